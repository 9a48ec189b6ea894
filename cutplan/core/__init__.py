# core package - resolution engine
from .errors import (
    CutPlanError,
    MalformedTimecode,
    InvalidCluster,
    DataIntegrityError,
    PlaybackGuardFailure,
    ExportBlocked,
)
from .timecode import parse_timecode, format_timecode
from .segment_store import SegmentStore, normalize_segment, normalize_category
from .cluster_detector import ClusterDetector
from .selection_tracker import SelectionTracker, default_selection
from .overlap_resolver import resolve, materialize_spans
from .timeline import TimelineSummary, summarize, reduction_percentage
from .playback import PlaybackSkipController, MediaHandle
from .session import EditSession

__all__ = [
    'CutPlanError',
    'MalformedTimecode',
    'InvalidCluster',
    'DataIntegrityError',
    'PlaybackGuardFailure',
    'ExportBlocked',
    'parse_timecode',
    'format_timecode',
    'SegmentStore',
    'normalize_segment',
    'normalize_category',
    'ClusterDetector',
    'SelectionTracker',
    'default_selection',
    'resolve',
    'materialize_spans',
    'TimelineSummary',
    'summarize',
    'reduction_percentage',
    'PlaybackSkipController',
    'MediaHandle',
    'EditSession',
]
