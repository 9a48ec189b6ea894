"""
Cluster Detector - groups repeated attempts at the same content

Two grouping signals, both driven by temporal proximity:
1. Take signal: redundant-take / false-start segments, or a reason that
   mentions a restart, close together in time
2. Repetition signal: neighbouring segments whose spoken text is nearly
   identical (verbatim repetition)

Within a cluster the LAST acceptable attempt is the default winner.
Segments that end up in no cluster stay on the category filter path.
"""

import difflib
import logging
import re
from typing import List, Optional, Sequence

from cutplan.schemas.segments import Cluster, Segment, SegmentCategory, Severity, TimeRange
from .config import settings
from .errors import InvalidCluster
from .timecode import format_timecode

logger = logging.getLogger(__name__)


class ClusterDetector:
    TAKE_CATEGORIES = {SegmentCategory.REDUNDANT_TAKE, SegmentCategory.FALSE_START}
    RETAKE_PHRASES = (
        "restart", "retake", "try again", "start over", "multiple attempts", "another take",
    )

    def __init__(self, max_gap: Optional[float] = None, repetition_similarity: Optional[float] = None):
        """
        Args:
            max_gap: Largest silence (seconds) between two attempts of the same content
            repetition_similarity: Text similarity (0-1) above which two neighbouring
                                   segments count as a verbatim repetition
        """
        # Thresholds
        self.MAX_TAKE_GAP = settings.cluster_max_gap if max_gap is None else max_gap
        self.REPETITION_SIMILARITY = (
            settings.repetition_similarity if repetition_similarity is None else repetition_similarity
        )
        self.OPENING_WINDOW = 60.0  # clusters starting this early are the opening statement
        self.MIN_MEMBERS = 2

    def detect(self, segments: Sequence[Segment]) -> List[Cluster]:
        """
        Main entry point - groups segments into clusters.
        Identical input always yields identical clusters, ids and winners.
        """
        valid = []
        for seg in segments:
            if seg.startTime > seg.endTime:
                logger.warning(
                    f"Dropping segment {seg.id} with inverted range "
                    f"{seg.startTime:.2f}s > {seg.endTime:.2f}s"
                )
                continue
            # Zero-length (e.g. malformed timecode) is not an attempt at anything
            if seg.startTime == seg.endTime:
                logger.debug(f"Leaving zero-length segment {seg.id} out of clustering")
                continue
            valid.append(seg)

        # Stable sort: ties keep input order, never id order
        ordered = sorted(valid, key=lambda s: (s.startTime, s.endTime))

        runs = self._group_takes(ordered) + self._group_repetitions(ordered)
        runs = self._merge_overlapping_runs(runs)

        clusters = []
        for run in runs:
            try:
                cluster = self._build_cluster(run, len(clusters) + 1)
                self._validate(cluster)
            except InvalidCluster as e:
                logger.warning(f"Discarding invalid cluster: {e}")
                continue
            clusters.append(cluster)

        logger.info(
            f"Detected {len(clusters)} clusters from {len(ordered)} segments "
            f"({sum(1 for c in clusters if c.is_gap)} need a winner)"
        )
        return clusters

    def is_take(self, segment: Segment) -> bool:
        if segment.category == SegmentCategory.SILENCE:
            return False
        if segment.category in self.TAKE_CATEGORIES:
            return True
        text = f"{segment.reason or ''} {segment.sourceText or ''}".lower()
        return any(phrase in text for phrase in self.RETAKE_PHRASES)

    def _group_takes(self, ordered: List[Segment]) -> List[List[Segment]]:
        """Consecutive take-like segments separated by at most MAX_TAKE_GAP."""
        runs = []
        current: List[Segment] = []
        current_end = 0.0

        for seg in ordered:
            if not self.is_take(seg):
                continue
            if current and seg.startTime - current_end <= self.MAX_TAKE_GAP:
                current.append(seg)
                current_end = max(current_end, seg.endTime)
                continue
            if len(current) >= self.MIN_MEMBERS:
                runs.append(current)
            current = [seg]
            current_end = seg.endTime

        if len(current) >= self.MIN_MEMBERS:
            runs.append(current)
        return runs

    def _group_repetitions(self, ordered: List[Segment]) -> List[List[Segment]]:
        """Neighbouring non-take segments that say nearly the same thing."""
        candidates = [
            s for s in ordered
            if not self.is_take(s) and s.category != SegmentCategory.SILENCE and s.sourceText
        ]

        runs = []
        current: List[Segment] = []
        for seg in candidates:
            if current:
                last = current[-1]
                close = seg.startTime - last.endTime <= self.MAX_TAKE_GAP
                if close and self._similarity(last.sourceText, seg.sourceText) >= self.REPETITION_SIMILARITY:
                    current.append(seg)
                    continue
            if len(current) >= self.MIN_MEMBERS:
                runs.append(current)
            current = [seg]

        if len(current) >= self.MIN_MEMBERS:
            runs.append(current)
        return runs

    def _merge_overlapping_runs(self, runs: List[List[Segment]]) -> List[List[Segment]]:
        """Clusters must not overlap in time; overlapping runs are merged."""
        if not runs:
            return []

        runs = sorted(runs, key=lambda r: (r[0].startTime, max(s.endTime for s in r)))
        merged = [runs[0]]
        for run in runs[1:]:
            prev = merged[-1]
            prev_end = max(s.endTime for s in prev)
            if run[0].startTime < prev_end:
                logger.info(
                    f"Merging overlapping clusters at {format_timecode(prev[0].startTime)} "
                    f"and {format_timecode(run[0].startTime)}"
                )
                seen = {id(s) for s in prev}
                combined = prev + [s for s in run if id(s) not in seen]
                merged[-1] = sorted(combined, key=lambda s: (s.startTime, s.endTime))
            else:
                merged.append(run)
        return merged

    def _pick_winner(self, members: List[Segment]) -> Optional[Segment]:
        """Keep the LAST version that is a complete, non-severe delivery."""
        for seg in reversed(members):
            if seg.category == SegmentCategory.FALSE_START:
                continue
            if seg.severity == Severity.HIGH:
                continue
            return seg
        return None

    def _build_cluster(self, members: List[Segment], number: int) -> Cluster:
        winner = self._pick_winner(members)
        attempts = tuple(s for s in members if s is not winner)

        return Cluster(
            id=f"cluster-{number}",
            name=self._infer_name(members),
            timeRange=TimeRange(
                start=min(s.startTime for s in members),
                end=max(s.endTime for s in members),
            ),
            attempts=attempts,
            winner=winner,
            pattern=self._determine_pattern(members),
            confidence=self._cluster_confidence(members),
        )

    def _validate(self, cluster: Cluster):
        if not cluster.attempts:
            raise InvalidCluster(f"{cluster.id} has no attempts")
        if cluster.timeRange.start > cluster.timeRange.end:
            raise InvalidCluster(f"{cluster.id} has an inverted time range")

    def _infer_name(self, members: List[Segment]) -> str:
        start = members[0].startTime
        reasons = " ".join((s.reason or "").lower() for s in members)

        if start < self.OPENING_WINDOW:
            return "Opening Statement"
        if "introduction" in reasons:
            return "Introduction"
        if "conclusion" in reasons:
            return "Closing Remarks"
        return f"Content Block ({format_timecode(start)})"

    def _determine_pattern(self, members: List[Segment]) -> str:
        reasons = " ".join((s.reason or "").lower() for s in members)
        if "introduction" in reasons:
            return "repeated_intro"
        if "practice" in reasons:
            return "practice_run"
        if len(members) > 3:
            return "multiple_takes"
        return "retake"

    def _cluster_confidence(self, members: List[Segment]) -> float:
        avg = sum(s.confidence for s in members) / len(members)
        bonus = 0.05 if len(members) >= 3 else 0.0
        return round(min(avg + bonus, 1.0), 4)

    @staticmethod
    def _similarity(a: str, b: str) -> float:
        a_clean = re.sub(r'[^\w\s]', '', a.lower()).strip()
        b_clean = re.sub(r'[^\w\s]', '', b.lower()).strip()
        if not a_clean or not b_clean:
            return 0.0
        return difflib.SequenceMatcher(None, a_clean, b_clean).ratio()
