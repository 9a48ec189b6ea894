import pytest

from cutplan.core.cluster_detector import ClusterDetector
from cutplan.core.selection_tracker import SelectionTracker
from cutplan.schemas import FilterState, SegmentCategory


@pytest.fixture
def clusters(make_segment):
    return ClusterDetector(max_gap=20.0).detect([
        make_segment("a", "redundant-take", 0, 10),
        make_segment("b", "redundant-take", 12, 20),
        make_segment("c", "redundant-take", 22, 30),
        make_segment("g1", "false-start", 100, 103),
        make_segment("g2", "false-start", 105, 107),
    ])


def assert_exact_cover(selection, cluster):
    removed = set(selection.removedSegmentIds)
    kept = set(selection.keptSegmentIds)
    assert removed.isdisjoint(kept)
    assert removed | kept == set(cluster.member_ids)


def test_default_selections(clusters):
    tracker = SelectionTracker(clusters)
    takes, gap = clusters

    sel = tracker.selection(takes.id)
    assert sel.selectedWinner == 2
    assert sel.keptSegmentIds == ("c",)
    assert sel.removedSegmentIds == ("a", "b")
    assert not sel.isUserOverride

    gap_sel = tracker.selection(gap.id)
    assert gap_sel.selectedWinner == "gap"
    assert gap_sel.keptSegmentIds == ()
    assert set(gap_sel.removedSegmentIds) == {"g1", "g2"}

    for cluster in clusters:
        assert_exact_cover(tracker.selection(cluster.id), cluster)


def test_select_winner_by_index_and_gap(clusters):
    tracker = SelectionTracker(clusters)
    takes = clusters[0]

    sel = tracker.select_winner(takes.id, 0)
    assert sel.keptSegmentIds == ("a",)
    assert sel.removedSegmentIds == ("b", "c")
    assert sel.isUserOverride
    assert_exact_cover(sel, takes)

    sel = tracker.select_winner(takes.id, "gap")
    assert sel.keptSegmentIds == ()
    assert_exact_cover(sel, takes)


def test_select_winner_rejects_bad_input(clusters):
    tracker = SelectionTracker(clusters)
    with pytest.raises(ValueError):
        tracker.select_winner(clusters[0].id, 7)
    with pytest.raises(ValueError):
        tracker.select_winner(clusters[0].id, "best")
    with pytest.raises(KeyError):
        tracker.select_winner("cluster-99", 0)


def test_toggle_segment_keeps_exact_cover(clusters):
    tracker = SelectionTracker(clusters)
    takes = clusters[0]

    sel = tracker.toggle_segment(takes.id, "a")
    assert set(sel.keptSegmentIds) == {"a", "c"}
    assert sel.selectedWinner == 2
    assert_exact_cover(sel, takes)

    sel = tracker.toggle_segment(takes.id, "c")
    assert sel.keptSegmentIds == ("a",)
    assert sel.selectedWinner == 0
    assert_exact_cover(sel, takes)

    sel = tracker.toggle_segment(takes.id, "a")
    assert sel.keptSegmentIds == ()
    assert sel.selectedWinner == "gap"
    assert_exact_cover(sel, takes)

    with pytest.raises(ValueError):
        tracker.toggle_segment(takes.id, "g1")


def test_pending_review_clears_after_decision(clusters):
    tracker = SelectionTracker(clusters)
    gap = clusters[1]

    assert tracker.pending_review() == [gap.id]
    tracker.select_winner(gap.id, 1)
    assert tracker.pending_review() == []


def test_reset_discards_decisions(clusters):
    tracker = SelectionTracker(clusters)
    tracker.select_winner(clusters[0].id, "gap")
    tracker.reset(clusters)
    assert tracker.selection(clusters[0].id).selectedWinner == 2


def test_filter_updates(clusters):
    tracker = SelectionTracker(clusters)

    tracker.set_category_enabled(SegmentCategory.TANGENT, True)
    tracker.set_min_confidence(0.5)
    tracker.set_high_severity_only(True)

    filters = tracker.snapshot().filters
    assert filters.is_enabled(SegmentCategory.TANGENT)
    assert filters.minConfidence == 0.5
    assert filters.showOnlyHighSeverity

    with pytest.raises(ValueError):
        tracker.set_min_confidence(1.5)
    with pytest.raises(ValueError):
        tracker.set_category_enabled("not-a-category", True)


def test_filter_state_must_cover_every_category():
    with pytest.raises(ValueError):
        FilterState(enabled={SegmentCategory.PAUSE: True})


def test_snapshot_is_detached(clusters):
    tracker = SelectionTracker(clusters)
    before = tracker.snapshot()
    tracker.select_winner(clusters[0].id, "gap")
    assert before.for_cluster(clusters[0].id).selectedWinner == 2
    assert tracker.snapshot().for_cluster(clusters[0].id).selectedWinner == "gap"


if __name__ == "__main__":
    pytest.main([__file__])
