"""Unit tests for the SubRip timestamp codec.

WHY: Every caption boundary goes through encode(), and every translated
file goes through decode(). An off-by-one millisecond or a wrapped hour
shifts captions visibly.

RULES:
- Truncation, not rounding, is the expected millisecond behavior.
"""

import pytest

from subtitle_aligner.core.errors import FormatError
from subtitle_aligner.core.timecode import decode, encode


class TestEncode:
    """encode() renders HH:MM:SS,mmm."""

    def test_hours_minutes_seconds(self):
        assert encode(3661.4) == "01:01:01,400"

    def test_zero(self):
        assert encode(0) == "00:00:00,000"

    def test_truncates_milliseconds(self):
        assert encode(1.9999) == "00:00:01,999"

    def test_float_noise_does_not_drop_a_millisecond(self):
        # 1.001 is stored as 1.000999...; still 1001 ms
        assert encode(1.001) == "00:00:01,001"

    def test_hours_not_wrapped_at_24(self):
        assert encode(25 * 3600 + 2.5) == "25:00:02,500"

    def test_hours_beyond_two_digits(self):
        assert encode(100 * 3600) == "100:00:00,000"

    def test_integer_input(self):
        assert encode(59) == "00:00:59,000"

    def test_negative_raises(self):
        with pytest.raises(FormatError):
            encode(-0.5)

    def test_nan_raises(self):
        with pytest.raises(FormatError):
            encode(float("nan"))


class TestDecode:
    """decode() is the strict inverse of encode()."""

    def test_basic(self):
        assert decode("01:01:01,400") == pytest.approx(3661.4)

    def test_surrounding_whitespace_ignored(self):
        assert decode("  00:00:02,500 ") == pytest.approx(2.5)

    def test_long_hours(self):
        assert decode("123:00:00,000") == pytest.approx(123 * 3600)

    @pytest.mark.parametrize("bad", [
        "",
        "1:2:3,4",
        "00:00:01.000",
        "00:00:01,00",
        "00:0a:01,000",
        "00:00:01,000 extra",
        "00:7:00,000",
    ])
    def test_malformed_raises(self, bad):
        with pytest.raises(FormatError):
            decode(bad)

    def test_non_string_raises(self):
        with pytest.raises(FormatError):
            decode(12.5)

    @pytest.mark.parametrize("raw, seconds", [
        ("00:75:00,000", 4500.0),
        ("00:00:60,000", 60.0),
        ("00:59:99,500", 3639.5),
    ])
    def test_out_of_range_fields_carry_over(self, raw, seconds):
        assert decode(raw) == pytest.approx(seconds)


class TestRoundTrip:
    """decode(encode(t)) == t within the 1 ms truncation."""

    @pytest.mark.parametrize("seconds", [0.0, 0.3, 1.2345, 59.999, 3599.0, 3661.4, 86400.75])
    def test_within_one_millisecond(self, seconds):
        assert abs(decode(encode(seconds)) - seconds) < 0.001
