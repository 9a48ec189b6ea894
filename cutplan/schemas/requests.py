# Pydantic request/response schemas
from typing import Dict, List, Optional, Union, Literal

from pydantic import BaseModel, Field

from .segments import (
    Cluster,
    ClusterSelection,
    FilterState,
    RawSegment,
    RemovalSpan,
    SegmentCategory,
    SuppressedSpan,
    TimeRange,
)


class CreateSessionRequest(BaseModel):
    """Analysis output for a recording: candidate cuts plus independent detections."""
    segments: List[RawSegment]
    duration: float = Field(ge=0.0)
    detections: List[RawSegment] = []
    filters: Optional[FilterState] = None


class WinnerRequest(BaseModel):
    """Pick the kept member of a cluster ('gap' keeps none)."""
    selectedWinner: Union[Literal["gap"], int]


class ToggleSegmentRequest(BaseModel):
    """Flip one cluster member between removed and kept."""
    segmentId: str


class FilterUpdateRequest(BaseModel):
    """Partial filter update; omitted fields keep their current value."""
    enabled: Optional[Dict[SegmentCategory, bool]] = None
    showOnlyHighSeverity: Optional[bool] = None
    minConfidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class TimelineStatistics(BaseModel):
    originalDuration: float
    finalDuration: float
    totalRemoved: float
    reductionPercentage: float
    removedCount: int
    removedByCategory: Dict[str, float] = {}


class EditPlan(BaseModel):
    """Everything the review UI needs after a recompute."""
    sessionId: str
    primary: List[RemovalSpan]
    suppressed: List[SuppressedSpan]
    clusters: List[Cluster]
    selections: List[ClusterSelection]
    filters: FilterState
    pendingReview: List[str] = []
    statistics: Optional[TimelineStatistics] = None
    keepSegments: List[TimeRange] = []
    exportAllowed: bool = True
    warnings: List[str] = []


class ExportPayload(BaseModel):
    """Final, ordered, non-overlapping cut list for a render adapter."""
    sessionId: str
    removals: List[RemovalSpan]
    keepSegments: List[TimeRange]
    statistics: TimelineStatistics
