"""
Edit Session - wires the engine together for one recording

Every read recomputes the removal set from the current inputs and the
editor's selections; nothing derived is cached between calls.
"""

import logging
import time
import uuid
from typing import Dict, Iterable, Optional, Union

from cutplan.schemas import (
    EditPlan,
    ExportPayload,
    FilterState,
    RawSegment,
    ResolutionResult,
    TimelineStatistics,
)
from .cluster_detector import ClusterDetector
from .config import settings
from .errors import DataIntegrityError, ExportBlocked
from .overlap_resolver import resolve
from .playback import MediaHandle, PlaybackSkipController
from .segment_store import SegmentStore
from .selection_tracker import SelectionTracker
from .timeline import TimelineSummary, summarize

logger = logging.getLogger(__name__)

RawRecords = Iterable[Union[RawSegment, Dict]]


class EditSession:
    def __init__(
        self,
        raw_segments: RawRecords,
        original_duration: float,
        detections: RawRecords = (),
        filter_state: Optional[FilterState] = None,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.original_duration = float(original_duration)
        self.created_at = time.time()
        self.detector = ClusterDetector()
        self.tracker = SelectionTracker(
            filter_state=filter_state or FilterState(minConfidence=settings.min_confidence)
        )
        self.load_analysis(raw_segments, detections)

    def load_analysis(self, raw_segments: RawRecords, detections: RawRecords = ()):
        """Start over from a new analysis pass; previous selections are discarded."""
        self.store = SegmentStore.from_raw(raw_segments)
        self.detections = SegmentStore.from_raw(detections).segments
        self.clusters = self.detector.detect(self.store.segments)
        self.tracker.reset(self.clusters)
        logger.info(
            f"Session {self.session_id}: {len(self.store)} segments, "
            f"{len(self.detections)} detections, {len(self.clusters)} clusters"
        )

    def resolve(self) -> ResolutionResult:
        state = self.tracker.snapshot()
        return resolve(self.store.segments, self.clusters, state.selections, state.filters, self.detections)

    def timeline(self) -> TimelineSummary:
        """Raises DataIntegrityError if the removal set is inconsistent."""
        return summarize(self.resolve().primary, self.original_duration)

    def plan(self) -> EditPlan:
        resolution = self.resolve()
        state = self.tracker.snapshot()

        statistics = None
        keep_segments = []
        warnings = []
        try:
            summary = summarize(resolution.primary, self.original_duration)
            statistics = TimelineStatistics(**summary.to_dict())
            keep_segments = summary.keep_segments()
        except DataIntegrityError as e:
            logger.error(f"Session {self.session_id}: integrity check failed, export blocked: {e}")
            warnings.append(f"Export blocked: {e}")

        return EditPlan(
            sessionId=self.session_id,
            primary=list(resolution.primary),
            suppressed=list(resolution.suppressed),
            clusters=list(self.clusters),
            selections=list(state.selections),
            filters=state.filters,
            pendingReview=self.tracker.pending_review(),
            statistics=statistics,
            keepSegments=keep_segments,
            exportAllowed=statistics is not None,
            warnings=warnings,
        )

    def export_payload(self) -> ExportPayload:
        from cutplan.export import build_export_payload

        plan = self.plan()
        if not plan.exportAllowed:
            raise ExportBlocked(plan.warnings)
        return build_export_payload(plan)

    def skip_controller(self, media: Optional[MediaHandle]) -> PlaybackSkipController:
        """Auto-skip controller for the current removal set."""
        return PlaybackSkipController(media, self.resolve().primary)
