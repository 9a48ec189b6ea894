# schemas package
from .segments import (
    SegmentCategory,
    Severity,
    PriorityTier,
    RawSegment,
    Segment,
    TimeRange,
    Cluster,
    ClusterSelection,
    FilterState,
    SelectionState,
    RemovalSpan,
    SuppressedSpan,
    ResolutionResult,
)
from .requests import (
    CreateSessionRequest,
    WinnerRequest,
    ToggleSegmentRequest,
    FilterUpdateRequest,
    TimelineStatistics,
    EditPlan,
    ExportPayload,
)

__all__ = [
    'SegmentCategory',
    'Severity',
    'PriorityTier',
    'RawSegment',
    'Segment',
    'TimeRange',
    'Cluster',
    'ClusterSelection',
    'FilterState',
    'SelectionState',
    'RemovalSpan',
    'SuppressedSpan',
    'ResolutionResult',
    'CreateSessionRequest',
    'WinnerRequest',
    'ToggleSegmentRequest',
    'FilterUpdateRequest',
    'TimelineStatistics',
    'EditPlan',
    'ExportPayload',
]
