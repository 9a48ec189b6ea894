import pytest

from cutplan.core.segment_store import SegmentStore, normalize_category
from cutplan.schemas import SegmentCategory, Severity


def test_normalize_category_aliases():
    assert normalize_category("bad_take") == SegmentCategory.REDUNDANT_TAKE
    assert normalize_category("redundancy") == SegmentCategory.REDUNDANT_TAKE
    assert normalize_category("filler") == SegmentCategory.FILLER_WORDS
    assert normalize_category("dead_air") == SegmentCategory.SILENCE
    assert normalize_category("off_topic") == SegmentCategory.TANGENT
    assert normalize_category("false_start") == SegmentCategory.FALSE_START
    assert normalize_category("Low-Energy") == SegmentCategory.LOW_ENERGY
    assert normalize_category("nonsense") is None


def test_from_raw_parses_and_orders():
    store = SegmentStore.from_raw([
        {"id": "b", "category": "pause", "startTime": "01:05", "endTime": "01:08"},
        {"id": "a", "category": "filler_words", "startTime": 2, "endTime": 3.5, "confidence": 0.8},
    ])

    assert [s.id for s in store] == ["a", "b"]
    b = store.get("b")
    assert b.startTime == 65.0
    assert b.endTime == 68.0
    assert b.duration == pytest.approx(3.0)
    assert b.severity == Severity.MEDIUM
    assert b.confidence == 1.0


def test_end_time_from_duration():
    store = SegmentStore.from_raw([
        {"id": "a", "category": "pause", "startTime": "10", "duration": 4.0},
    ])
    assert store.get("a").endTime == 14.0


def test_malformed_timecode_becomes_zero_duration_at_zero():
    store = SegmentStore.from_raw([
        {"id": "bad", "category": "pause", "startTime": "ab:cd", "endTime": "00:10"},
        {"id": "ok", "category": "pause", "startTime": 20, "endTime": 25},
    ])

    assert len(store) == 2
    bad = store.get("bad")
    assert bad.startTime == 0.0
    assert bad.endTime == 0.0
    assert bad.duration == 0.0


def test_unknown_category_and_unreadable_records_are_skipped():
    store = SegmentStore.from_raw([
        {"id": "x", "category": "mystery", "startTime": 1, "endTime": 2},
        {"category": "pause", "startTime": 1, "endTime": 2},
        {"id": "y", "category": "tangent", "startTime": 5, "endTime": 9, "severity": "HIGH"},
    ])

    assert [s.id for s in store] == ["y"]
    assert store.get("y").severity == Severity.HIGH


def test_stale_ids_are_absent():
    store = SegmentStore.from_raw([{"id": "a", "category": "pause", "startTime": 0, "endTime": 1}])
    assert store.get("gone") is None
    assert "gone" not in store
    assert "a" in store


def test_by_category(make_segment):
    store = SegmentStore([
        make_segment("p1", "pause", 0, 1),
        make_segment("f1", "filler-words", 2, 3),
        make_segment("p2", "pause", 4, 5),
    ])
    assert [s.id for s in store.by_category(SegmentCategory.PAUSE)] == ["p1", "p2"]


if __name__ == "__main__":
    pytest.main([__file__])
