"""SubRip timestamp codec: float seconds <-> ``HH:MM:SS,mmm``.

WHY: Every caption boundary passes through this conversion, in both
directions (writing .srt files and reading them back for translation).

HOW: encode() works on the decimal representation of the float so that
values like 1.001 (stored as 1.00099999...) still truncate to 1001 ms.
decode() is a strict regex match.

RULES:
- Milliseconds are truncated, never rounded
- Hours are unbounded (no wrap at 24) and padded to at least two digits
- Negative or non-finite offsets raise FormatError
- decode() accepts any \\d+:\\d{2}:\\d{2},\\d{3} string; out-of-range minutes or
  seconds (as some editors write) carry over into the next unit
"""

from __future__ import annotations

import math
import re
from decimal import Decimal

from subtitle_aligner.core.errors import FormatError

TIMESTAMP_RE = re.compile(r"^(\d+):(\d{2}):(\d{2}),(\d{3})$")


def encode(seconds: float) -> str:
    """Convert a seconds offset to a SubRip timestamp.

    Args:
        seconds: Non-negative offset from the start of the media.

    Returns:
        Timestamp string such as ``"01:01:01,400"``.

    Raises:
        FormatError: If seconds is negative, NaN, or infinite.
    """
    value = float(seconds)
    if not math.isfinite(value) or value < 0:
        raise FormatError("Cannot encode timestamp for {!r} seconds".format(seconds))

    total_ms = int(Decimal(repr(value)) * 1000)
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


def decode(timestamp: str) -> float:
    """Convert a SubRip timestamp back to float seconds.

    Raises:
        FormatError: If the string does not match ``HH:MM:SS,mmm``.
    """
    match = TIMESTAMP_RE.match(timestamp.strip()) if isinstance(timestamp, str) else None
    if match is None:
        raise FormatError("Malformed timestamp: {!r}".format(timestamp))

    hours, minutes, secs, millis = (int(part) for part in match.groups())
    return hours * 3600 + minutes * 60 + secs + millis / 1000.0
