"""
Selection Tracker - the editor's decisions for the current session

Holds one ClusterSelection per cluster plus the category filter state.
It is the only mutable state in the engine; everything downstream reads an
immutable snapshot() of it.
"""

import logging
from typing import Dict, List, Optional, Sequence, Union

from cutplan.schemas.segments import (
    Cluster,
    ClusterSelection,
    FilterState,
    SegmentCategory,
    SelectionState,
)

logger = logging.getLogger(__name__)

WinnerChoice = Union[str, int]


def default_selection(cluster: Cluster) -> ClusterSelection:
    """Keep the detected winner and remove every attempt; gap clusters remove all."""
    members = cluster.members
    if cluster.winner is None:
        return ClusterSelection(
            clusterId=cluster.id,
            selectedWinner="gap",
            removedSegmentIds=tuple(s.id for s in members),
            keptSegmentIds=(),
        )

    winner_index = next(i for i, s in enumerate(members) if s.id == cluster.winner.id)
    return ClusterSelection(
        clusterId=cluster.id,
        selectedWinner=winner_index,
        removedSegmentIds=tuple(s.id for s in members if s.id != cluster.winner.id),
        keptSegmentIds=(cluster.winner.id,),
    )


class SelectionTracker:
    def __init__(self, clusters: Sequence[Cluster] = (), filter_state: Optional[FilterState] = None):
        self._filters = filter_state or FilterState()
        self._clusters: Dict[str, Cluster] = {}
        self._selections: Dict[str, ClusterSelection] = {}
        self.reset(clusters)

    def reset(self, clusters: Sequence[Cluster]):
        """Discard every cluster decision (new analysis pass) and start from defaults."""
        self._clusters = {c.id: c for c in clusters}
        self._selections = {c.id: default_selection(c) for c in clusters}
        logger.info(f"Selection tracker reset with {len(self._selections)} default selections")

    @property
    def filters(self) -> FilterState:
        return self._filters

    def selection(self, cluster_id: str) -> ClusterSelection:
        if cluster_id not in self._selections:
            raise KeyError(f"Unknown cluster: {cluster_id}")
        return self._selections[cluster_id]

    def select_winner(self, cluster_id: str, choice: WinnerChoice) -> ClusterSelection:
        """
        Choose which member of a cluster to keep.
        'gap' removes every member; an integer keeps that member (by start order).
        """
        cluster = self._cluster(cluster_id)
        members = cluster.members

        if choice == "gap":
            selection = ClusterSelection(
                clusterId=cluster_id,
                selectedWinner="gap",
                removedSegmentIds=tuple(s.id for s in members),
                keptSegmentIds=(),
                isUserOverride=True,
            )
        elif isinstance(choice, int) and not isinstance(choice, bool):
            if not 0 <= choice < len(members):
                raise ValueError(f"Winner index {choice} out of range for {cluster_id} ({len(members)} members)")
            kept = members[choice].id
            selection = ClusterSelection(
                clusterId=cluster_id,
                selectedWinner=choice,
                removedSegmentIds=tuple(s.id for s in members if s.id != kept),
                keptSegmentIds=(kept,),
                isUserOverride=True,
            )
        else:
            raise ValueError(f"Winner must be 'gap' or a member index, got {choice!r}")

        self._selections[cluster_id] = selection
        logger.info(f"Cluster {cluster_id}: winner set to {selection.selectedWinner}")
        return selection

    def toggle_segment(self, cluster_id: str, segment_id: str) -> ClusterSelection:
        """Move one member between the removed and kept sets."""
        cluster = self._cluster(cluster_id)
        current = self._selections[cluster_id]
        members = cluster.members
        member_ids = [s.id for s in members]

        if segment_id not in member_ids:
            raise ValueError(f"Segment {segment_id} is not a member of {cluster_id}")

        kept = set(current.keptSegmentIds)
        if segment_id in kept:
            kept.discard(segment_id)
        else:
            kept.add(segment_id)

        winner: WinnerChoice = current.selectedWinner
        if not kept:
            winner = "gap"
        elif winner == "gap" or member_ids[winner] not in kept:
            winner = next(i for i, sid in enumerate(member_ids) if sid in kept)

        selection = ClusterSelection(
            clusterId=cluster_id,
            selectedWinner=winner,
            removedSegmentIds=tuple(sid for sid in member_ids if sid not in kept),
            keptSegmentIds=tuple(sid for sid in member_ids if sid in kept),
            isUserOverride=True,
        )
        self._selections[cluster_id] = selection
        logger.debug(f"Cluster {cluster_id}: toggled {segment_id}, {len(kept)} kept")
        return selection

    def set_category_enabled(self, category: SegmentCategory, enabled: bool) -> FilterState:
        category = SegmentCategory(category)
        toggles = dict(self._filters.enabled)
        toggles[category] = enabled
        self._filters = self._filters.model_copy(update={"enabled": toggles})
        return self._filters

    def set_min_confidence(self, value: float) -> FilterState:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"Minimum confidence must be between 0 and 1, got {value}")
        self._filters = self._filters.model_copy(update={"minConfidence": value})
        return self._filters

    def set_high_severity_only(self, enabled: bool) -> FilterState:
        self._filters = self._filters.model_copy(update={"showOnlyHighSeverity": enabled})
        return self._filters

    def pending_review(self) -> List[str]:
        """Gap clusters the editor has not decided on yet."""
        return [
            cid for cid, cluster in self._clusters.items()
            if cluster.is_gap and not self._selections[cid].isUserOverride
        ]

    def snapshot(self) -> SelectionState:
        return SelectionState(
            selections=tuple(self._selections[cid] for cid in self._clusters),
            filters=self._filters,
        )

    def _cluster(self, cluster_id: str) -> Cluster:
        if cluster_id not in self._clusters:
            raise KeyError(f"Unknown cluster: {cluster_id}")
        return self._clusters[cluster_id]
