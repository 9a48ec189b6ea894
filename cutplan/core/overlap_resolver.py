"""
Overlap Resolver - one authoritative removal decision per instant of source time

Removal reasons, highest priority first:
1. Explicit cluster decision (segments the editor removed from a cluster)
2. Active category filter (un-clustered segments passing the filter gates)
3. Independent silence detection (always considered, ignores toggles)

Overlapping spans are resolved with whole-span precedence: the winning span
takes its full extent and every span it overlaps is suppressed with a reason.
Nothing is dropped silently. The resolver is a pure function of its
arguments and always recomputes from scratch.
"""

import logging
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from cutplan.schemas.segments import (
    Cluster,
    ClusterSelection,
    FilterState,
    PriorityTier,
    RemovalSpan,
    ResolutionResult,
    Segment,
    SegmentCategory,
    Severity,
    SuppressedSpan,
)

logger = logging.getLogger(__name__)

EMPTY_SPAN_REASON = "empty or inverted time range"

_Ranked = Tuple[int, RemovalSpan]


def _to_span(segment: Segment, tier: PriorityTier) -> RemovalSpan:
    return RemovalSpan(
        start=segment.startTime,
        end=segment.endTime,
        originSegmentId=segment.id,
        reasonCategory=segment.category,
        priorityTier=tier,
    )


def passes_filter(segment: Segment, filters: FilterState) -> bool:
    """Category toggle, confidence floor and optional high-severity gate."""
    if not filters.is_enabled(segment.category):
        return False
    if segment.confidence < filters.minConfidence:
        return False
    if filters.showOnlyHighSeverity and segment.severity != Severity.HIGH:
        return False
    return True


def materialize_spans(
    segments: Sequence[Segment],
    clusters: Sequence[Cluster],
    selections: Iterable[ClusterSelection],
    filter_state: FilterState,
    detections: Sequence[Segment] = (),
) -> List[RemovalSpan]:
    """Expand every input into candidate removal spans tagged with their tier."""
    current: Dict[str, Segment] = {}
    for seg in segments:
        current.setdefault(seg.id, seg)

    members_by_cluster: Dict[str, Set[str]] = {c.id: set(c.member_ids) for c in clusters}
    clustered_ids = set().union(*members_by_cluster.values()) if members_by_cluster else set()

    spans: List[RemovalSpan] = []
    # Ids are not unique across segments and detections; the range is part of the key
    emitted: Set[Tuple[str, PriorityTier, float, float]] = set()

    def emit(seg: Segment, tier: PriorityTier):
        key = (seg.id, tier, seg.startTime, seg.endTime)
        if key in emitted:
            logger.debug(f"Skipping repeated {tier.label} span for {seg.id}")
            return
        emitted.add(key)
        spans.append(_to_span(seg, tier))

    # Tier 1: explicit cluster decisions
    for selection in selections:
        member_ids = members_by_cluster.get(selection.clusterId)
        if member_ids is None:
            logger.debug(f"Ignoring selection for unknown cluster {selection.clusterId}")
            continue
        for segment_id in selection.removedSegmentIds:
            seg = current.get(segment_id)
            if seg is None or segment_id not in member_ids:
                logger.debug(f"Ignoring stale segment {segment_id} in {selection.clusterId}")
                continue
            emit(seg, PriorityTier.CLUSTER_DECISION)

    # Tiers 2 and 3 from the candidate list
    for seg in segments:
        if seg.category == SegmentCategory.SILENCE:
            emit(seg, PriorityTier.SILENCE_DETECTION)
            continue
        if seg.id in clustered_ids:
            continue
        if passes_filter(seg, filter_state):
            emit(seg, PriorityTier.CATEGORY_FILTER)

    # Tier 3: independent detections
    for seg in detections:
        emit(seg, PriorityTier.SILENCE_DETECTION)

    return spans


def spans_overlap(a: RemovalSpan, b: RemovalSpan) -> bool:
    return not (a.end <= b.start or a.start >= b.end)


def overlap_groups(spans: Sequence[_Ranked]) -> List[List[_Ranked]]:
    """Sweep by start time, chaining spans that overlap the running group."""
    ordered = sorted(spans, key=lambda item: (item[1].start, item[1].end, item[0]))
    groups: List[List[_Ranked]] = []
    group_end = None

    for item in ordered:
        span = item[1]
        if groups and span.start < group_end:
            groups[-1].append(item)
            group_end = max(group_end, span.end)
        else:
            groups.append([item])
            group_end = span.end
    return groups


def _suppression_reason(loser: RemovalSpan, winner: RemovalSpan) -> str:
    if winner.priorityTier < loser.priorityTier:
        return f"lower priority than {winner.priorityTier.label}"
    return f"overlapped by longer {winner.reasonCategory.value} span"


def _resolve_group(group: List[_Ranked]) -> Tuple[List[RemovalSpan], List[SuppressedSpan]]:
    """Accept spans by (tier, longest, earliest); anything touching an accepted span loses."""
    ranked = sorted(group, key=lambda item: (item[1].priorityTier, -item[1].duration, item[1].start, item[0]))
    accepted: List[RemovalSpan] = []
    suppressed: List[SuppressedSpan] = []

    for _, span in ranked:
        blocker = next((kept for kept in accepted if spans_overlap(span, kept)), None)
        if blocker is None:
            accepted.append(span)
            continue
        suppressed.append(SuppressedSpan(
            span=span,
            reason=_suppression_reason(span, blocker),
            coveredBy=blocker.originSegmentId,
        ))
    return accepted, suppressed


def resolve(
    segments: Sequence[Segment],
    clusters: Sequence[Cluster],
    selections: Iterable[ClusterSelection],
    filter_state: FilterState,
    detections: Sequence[Segment] = (),
) -> ResolutionResult:
    """
    Combine cluster decisions, category filters and independent detections
    into a sorted, pairwise non-overlapping removal set.

    Returns:
        ResolutionResult with `primary` spans and the `suppressed` audit trail.
    """
    candidates = materialize_spans(segments, clusters, selections, filter_state, detections)

    suppressed: List[SuppressedSpan] = []
    valid: List[_Ranked] = []
    for order, span in enumerate(candidates):
        if span.end <= span.start:
            logger.warning(
                f"Excluding {span.reasonCategory.value} span from {span.originSegmentId}: "
                f"{span.start:.2f}s-{span.end:.2f}s is empty or inverted"
            )
            suppressed.append(SuppressedSpan(span=span, reason=EMPTY_SPAN_REASON))
            continue
        valid.append((order, span))

    primary: List[RemovalSpan] = []
    for group in overlap_groups(valid):
        if len(group) == 1:
            primary.append(group[0][1])
            continue
        accepted, lost = _resolve_group(group)
        primary.extend(accepted)
        suppressed.extend(lost)

    primary.sort(key=lambda s: (s.start, s.end))
    suppressed.sort(key=lambda s: (s.span.start, s.span.end, s.span.priorityTier))

    logger.debug(f"Resolved {len(candidates)} candidate spans into {len(primary)} removals, {len(suppressed)} suppressed")
    return ResolutionResult(primary=tuple(primary), suppressed=tuple(suppressed))
