import pytest

from cutplan.core.playback import PlaybackSkipController
from cutplan.schemas import PriorityTier, RemovalSpan, SegmentCategory


def span(start, end):
    return RemovalSpan(
        start=start,
        end=end,
        originSegmentId=f"seg-{start}",
        reasonCategory=SegmentCategory.PAUSE,
        priorityTier=PriorityTier.CATEGORY_FILTER,
    )


def test_jumps_past_span_and_does_not_retrigger(media):
    controller = PlaybackSkipController(media, [span(30, 45)], epsilon=0.1)

    media.play_to(30.2)
    target = controller.tick()
    assert target == pytest.approx(45.1)
    assert media.current_time == pytest.approx(45.1)

    # The seek landed a frame short, still inside the span
    media.play_to(44.98)
    assert controller.tick() is None
    assert len(media.seeks) == 1


def test_marker_clears_after_leaving_span(media):
    controller = PlaybackSkipController(media, [span(30, 45)], epsilon=0.1)

    media.play_to(31)
    controller.tick()
    media.play_to(46)
    assert controller.tick() is None
    assert controller.last_skipped is None

    # Manual seek back into the span is honoured again
    media.play_to(35)
    controller.notify_user_seek()
    assert controller.tick() == pytest.approx(45.1)
    assert len(media.seeks) == 2


def test_adjacent_spans_are_skipped_separately(media):
    controller = PlaybackSkipController(media, [span(10, 20), span(20.05, 30)], epsilon=0.1)

    media.play_to(12)
    assert controller.tick() == pytest.approx(20.1)
    # Landed inside the next span; it has its own identity
    assert controller.tick() == pytest.approx(30.1)
    assert controller.tick() is None


def test_outside_spans_no_seek(media):
    controller = PlaybackSkipController(media, [span(30, 45)])
    media.play_to(10)
    assert controller.tick() is None
    media.play_to(45)
    assert controller.tick() is None
    assert media.seeks == []


def test_no_op_without_metadata_or_spans(media):
    media.play_to(35)
    media.has_metadata = False
    assert PlaybackSkipController(media, [span(30, 45)]).tick() is None

    media.has_metadata = True
    assert PlaybackSkipController(media, []).tick() is None
    assert PlaybackSkipController(None, [span(30, 45)]).tick() is None
    assert media.seeks == []


def test_paused_player_is_left_alone(media):
    media.play_to(35)
    media.paused = True
    assert PlaybackSkipController(media, [span(30, 45)]).tick() is None


def test_media_fault_degrades_to_no_skip():
    class BrokenMedia:
        paused = False
        has_metadata = True

        @property
        def current_time(self):
            raise RuntimeError("decoder gone")

    controller = PlaybackSkipController(BrokenMedia(), [span(30, 45)])
    assert controller.tick() is None


def test_repeated_jump_loop_disengages_span(media):
    controller = PlaybackSkipController(media, [span(30, 45), span(60, 70)], epsilon=0.1, max_repeat_jumps=2)

    # The player drops each seek and lands back before the span
    for _ in range(2):
        media.play_to(31)
        assert controller.tick() == pytest.approx(45.1)
        media.play_to(29)
        assert controller.tick() is None

    media.play_to(31)
    assert controller.tick() is None
    assert 30 in controller.disabled_spans
    assert len(media.seeks) == 2

    # Other spans keep working
    media.play_to(61)
    assert controller.tick() == pytest.approx(70.1)


def test_looping_preview_keeps_skipping(media):
    controller = PlaybackSkipController(media, [span(30, 45)], epsilon=0.1, max_repeat_jumps=2)

    # Replays from the top without any user seek
    targets = []
    for _ in range(5):
        media.play_to(0)
        controller.tick()
        media.play_to(31)
        targets.append(controller.tick())
        media.play_to(60)
        controller.tick()

    assert targets == [pytest.approx(45.1)] * 5
    assert controller.disabled_spans == set()
    assert len(media.seeks) == 5


def test_update_spans_replaces_schedule(media):
    controller = PlaybackSkipController(media, [span(30, 45)])
    media.play_to(31)
    controller.tick()

    controller.update_spans([span(100, 110), span(5, 4)])
    assert controller.last_skipped is None
    assert [s.start for s in controller.spans] == [100]
    assert controller.span_at(105).start == 100
    assert controller.span_at(31) is None


if __name__ == "__main__":
    pytest.main([__file__])
