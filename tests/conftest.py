import pytest

from cutplan.schemas import Segment, SegmentCategory, Severity


def build_segment(id, category, start, end, confidence=0.9, severity="medium", reason=None, text=None):
    return Segment(
        id=id,
        category=SegmentCategory(category),
        startTime=start,
        endTime=end,
        duration=end - start,
        confidence=confidence,
        severity=Severity(severity),
        reason=reason,
        sourceText=text,
    )


@pytest.fixture
def make_segment():
    return build_segment


class FakeMedia:
    """Stand-in for the host player; records every seek the controller issues."""

    def __init__(self, position=0.0, paused=False, has_metadata=True):
        self._position = position
        self.paused = paused
        self.has_metadata = has_metadata
        self.seeks = []

    @property
    def current_time(self):
        return self._position

    @current_time.setter
    def current_time(self, value):
        self.seeks.append(value)
        self._position = value

    def play_to(self, position):
        """Advance the playhead without it counting as a controller seek."""
        self._position = position


@pytest.fixture
def media():
    return FakeMedia()
