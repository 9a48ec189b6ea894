"""
Timeline Reconstructor - statistics and source/output time mapping

Works on the resolved (sorted, non-overlapping) removal spans. Removal
spans are mutually exclusive, so removed time is a plain sum and the
source -> output mapping is a cumulative sum lookup.
"""

import logging
from typing import Dict, List, Sequence

import numpy as np

from cutplan.schemas.segments import RemovalSpan, TimeRange
from .config import settings
from .errors import DataIntegrityError

logger = logging.getLogger(__name__)


def reduction_percentage(total_removed: float, original_duration: float) -> float:
    """Share of the original removed, in percent. Zero-length media reports 0."""
    if original_duration <= 0:
        return 0.0
    return round(total_removed / original_duration * 100, 1)


class TimelineSummary:
    def __init__(self, primary: Sequence[RemovalSpan], original_duration: float, epsilon: float = None):
        """
        Args:
            primary: Resolved removal spans, sorted and pairwise non-overlapping
            original_duration: Length of the source recording in seconds
            epsilon: Float tolerance for the integrity checks

        Raises:
            DataIntegrityError: if spans overlap / are unsorted, or more time
                                is removed than the recording contains
        """
        self.epsilon = settings.integrity_epsilon if epsilon is None else epsilon
        self.primary = tuple(primary)
        self.original_duration = float(original_duration)

        self._starts = np.array([s.start for s in self.primary], dtype=float)
        self._ends = np.array([s.end for s in self.primary], dtype=float)
        self._check_spans()

        durations = self._ends - self._starts
        # _removed_before[i] = total removed before span i
        self._removed_before = np.concatenate(([0.0], np.cumsum(durations)))
        # Output-time position where each span's cut happens
        self._output_cuts = self._starts - self._removed_before[:-1]

        self.total_removed = float(self._removed_before[-1])
        raw_final = self.original_duration - self.total_removed
        if raw_final < -self.epsilon:
            raise DataIntegrityError(
                f"Removed {self.total_removed:.3f}s from a {self.original_duration:.3f}s recording "
                f"(final duration {raw_final:.3f}s)"
            )
        self.final_duration = max(0.0, raw_final)
        self.reduction_percentage = reduction_percentage(self.total_removed, self.original_duration)

    def _check_spans(self):
        if np.any(self._ends < self._starts):
            raise DataIntegrityError("Removal span ends before it starts")
        # Overlapping or unsorted spans would make the time mapping non-monotonic
        if len(self.primary) > 1 and np.any(self._starts[1:] < self._ends[:-1] - self.epsilon):
            raise DataIntegrityError("Removal spans overlap or are out of order")

    def source_to_output(self, t: float) -> float:
        """
        Position in the edited result for source time t.
        Non-decreasing in t; every instant inside a removed span maps to the cut point.
        """
        # Spans that end at or before t are fully removed
        idx = int(np.searchsorted(self._ends, t, side="right"))
        removed = float(self._removed_before[idx])
        if idx < len(self._starts) and self._starts[idx] < t:
            removed += t - float(self._starts[idx])
        return t - removed

    def output_to_source(self, t: float) -> float:
        """Source time shown at output position t (always on kept media)."""
        idx = int(np.searchsorted(self._output_cuts, t, side="right"))
        return t + float(self._removed_before[idx])

    def keep_segments(self) -> List[TimeRange]:
        """Complement of the removal spans within the recording."""
        keeps = []
        cursor = 0.0
        for start, end in zip(self._starts, self._ends):
            start = min(float(start), self.original_duration)
            if start - cursor > self.epsilon:
                keeps.append(TimeRange(start=cursor, end=start))
            cursor = max(cursor, float(end))
        if self.original_duration - cursor > self.epsilon:
            keeps.append(TimeRange(start=cursor, end=self.original_duration))
        return keeps

    def removed_by_category(self) -> Dict[str, float]:
        totals: Dict[str, float] = {}
        for span in self.primary:
            key = span.reasonCategory.value
            totals[key] = totals.get(key, 0.0) + span.duration
        return {k: round(v, 3) for k, v in totals.items()}

    def to_dict(self) -> Dict:
        return {
            'originalDuration': round(self.original_duration, 3),
            'finalDuration': round(self.final_duration, 3),
            'totalRemoved': round(self.total_removed, 3),
            'reductionPercentage': self.reduction_percentage,
            'removedCount': len(self.primary),
            'removedByCategory': self.removed_by_category(),
        }


def summarize(primary: Sequence[RemovalSpan], original_duration: float) -> TimelineSummary:
    summary = TimelineSummary(primary, original_duration)
    logger.info(
        f"Timeline: {summary.original_duration:.1f}s -> {summary.final_duration:.1f}s "
        f"({summary.reduction_percentage}% reduction, {len(summary.primary)} cuts)"
    )
    return summary
