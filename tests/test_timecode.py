import pytest

from cutplan.core.errors import MalformedTimecode
from cutplan.core.timecode import parse_timecode, format_timecode


def test_parse_plain_seconds():
    assert parse_timecode(12) == 12.0
    assert parse_timecode(3.5) == 3.5
    assert parse_timecode("42") == 42.0
    assert parse_timecode("7.25") == 7.25


def test_parse_minutes_seconds():
    assert parse_timecode("01:05") == 65.0
    assert parse_timecode("2:30.5") == 150.5


def test_parse_hours_minutes_seconds():
    assert parse_timecode("01:00:00") == 3600.0
    assert parse_timecode("00:01:02.5") == 62.5


@pytest.mark.parametrize("value", [
    "", "abc", "1:2:3:4", "1.5:30", "00:75", "01:61:00", "-3", "1::2", None, -1.0, float("nan"), True,
])
def test_parse_rejects_malformed(value):
    with pytest.raises(MalformedTimecode):
        parse_timecode(value)


def test_format_timecode():
    assert format_timecode(0) == "00:00.00"
    assert format_timecode(65.5) == "01:05.50"
    assert format_timecode(3725) == "01:02:05.00"
    assert format_timecode(-4) == "00:00.00"


if __name__ == "__main__":
    pytest.main([__file__])
