# Domain models shared by the resolution engine and the API
from enum import Enum, IntEnum
from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class SegmentCategory(str, Enum):
    """Why the analysis proposed cutting a span."""
    REDUNDANT_TAKE = "redundant-take"
    PAUSE = "pause"
    FALSE_START = "false-start"
    FILLER_WORDS = "filler-words"
    TECHNICAL = "technical"
    TANGENT = "tangent"
    LOW_ENERGY = "low-energy"
    LONG_EXPLANATION = "long-explanation"
    WEAK_TRANSITION = "weak-transition"
    SILENCE = "silence"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PriorityTier(IntEnum):
    """Precedence of a removal reason. Lower value wins."""
    CLUSTER_DECISION = 1
    CATEGORY_FILTER = 2
    SILENCE_DETECTION = 3

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    PriorityTier.CLUSTER_DECISION: "explicit cluster decision",
    PriorityTier.CATEGORY_FILTER: "active category filter",
    PriorityTier.SILENCE_DETECTION: "independent silence detection",
}

# Shown by default in the review UI; the rest are opt-in
DEFAULT_ENABLED_CATEGORIES = {
    SegmentCategory.REDUNDANT_TAKE: True,
    SegmentCategory.PAUSE: True,
    SegmentCategory.FALSE_START: True,
    SegmentCategory.FILLER_WORDS: True,
    SegmentCategory.TECHNICAL: True,
    SegmentCategory.TANGENT: False,
    SegmentCategory.LOW_ENERGY: False,
    SegmentCategory.LONG_EXPLANATION: False,
    SegmentCategory.WEAK_TRANSITION: False,
    SegmentCategory.SILENCE: True,
}


class RawSegment(BaseModel):
    """Candidate span as delivered by the analysis step, before normalization."""
    id: str
    category: str
    startTime: Union[float, str]
    endTime: Optional[Union[float, str]] = None
    duration: Optional[float] = None
    confidence: Optional[float] = None
    severity: Optional[str] = None
    reason: Optional[str] = None
    sourceText: Optional[str] = None
    transcript: Optional[str] = None


class Segment(BaseModel):
    """Normalized candidate span. Times in seconds."""
    model_config = ConfigDict(frozen=True)

    id: str
    category: SegmentCategory
    startTime: float
    endTime: float
    duration: float
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    severity: Severity = Severity.MEDIUM
    sourceText: Optional[str] = None
    reason: Optional[str] = None


class TimeRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: float
    end: float


class Cluster(BaseModel):
    """Alternate takes of the same content, with at most one winner."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    timeRange: TimeRange
    attempts: Tuple[Segment, ...]
    winner: Optional[Segment] = None
    pattern: str = "retake"
    confidence: float = 0.0

    @property
    def is_gap(self) -> bool:
        return self.winner is None

    @property
    def members(self) -> List[Segment]:
        """Attempts and winner ordered by start time."""
        members = list(self.attempts)
        if self.winner is not None:
            members.append(self.winner)
        return sorted(members, key=lambda s: (s.startTime, s.endTime))

    @property
    def member_ids(self) -> List[str]:
        return [s.id for s in self.members]


class ClusterSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    clusterId: str
    selectedWinner: Union[Literal["gap"], int]
    removedSegmentIds: Tuple[str, ...] = ()
    keptSegmentIds: Tuple[str, ...] = ()
    isUserOverride: bool = False


class FilterState(BaseModel):
    """Category toggles plus the confidence and severity gates."""
    model_config = ConfigDict(frozen=True)

    enabled: Dict[SegmentCategory, bool] = Field(default_factory=lambda: dict(DEFAULT_ENABLED_CATEGORIES))
    showOnlyHighSeverity: bool = False
    minConfidence: float = Field(default=0.7, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _covers_every_category(self):
        missing = set(SegmentCategory) - set(self.enabled)
        if missing:
            names = ", ".join(sorted(c.value for c in missing))
            raise ValueError(f"Filter state is missing categories: {names}")
        return self

    def is_enabled(self, category: SegmentCategory) -> bool:
        return self.enabled[category]


class SelectionState(BaseModel):
    """Immutable snapshot of every user decision, passed into the resolver."""
    model_config = ConfigDict(frozen=True)

    selections: Tuple[ClusterSelection, ...] = ()
    filters: FilterState = Field(default_factory=FilterState)

    def for_cluster(self, cluster_id: str) -> Optional[ClusterSelection]:
        for selection in self.selections:
            if selection.clusterId == cluster_id:
                return selection
        return None


class RemovalSpan(BaseModel):
    """Resolved range of source media to exclude from the edit."""
    model_config = ConfigDict(frozen=True)

    start: float
    end: float
    originSegmentId: str
    reasonCategory: SegmentCategory
    priorityTier: PriorityTier

    @computed_field
    @property
    def duration(self) -> float:
        return self.end - self.start


class SuppressedSpan(BaseModel):
    """A removal reason that lost to another span covering the same time."""
    model_config = ConfigDict(frozen=True)

    span: RemovalSpan
    reason: str
    coveredBy: Optional[str] = None


class ResolutionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: Tuple[RemovalSpan, ...] = ()
    suppressed: Tuple[SuppressedSpan, ...] = ()
