"""SubRip (.srt) serialization and parsing.

WHY: SubRip is the plain-text format every player and editor accepts. The
aligner writes it, and the translation workflow reads it back to send the
caption texts for translation and to write the translated file.

HOW: serialize() validates every caption first and only then renders the
blocks, so it never returns partial text. parse() normalizes line endings,
splits on blank lines, and reads each block's id, time range, and text.

RULES:
- Block layout: id line, "start --> end" line, text line(s)
- Blocks are separated by exactly one blank line; output ends with "\\n"
- Ids are written and read back as 1-based positions
- Caption text may span lines but must not contain a blank line
- Trailing whitespace on text lines is not written, since parse() drops it
- Any malformed block or timestamp raises FormatError
"""

from __future__ import annotations

import logging
import re
from typing import List

from subtitle_aligner.core.errors import FormatError
from subtitle_aligner.core.ir import Caption, SubtitleDocument
from subtitle_aligner.core.timecode import decode

logger = logging.getLogger(__name__)

_BLOCK_SEPARATOR_RE = re.compile(r"\n(?:[ \t]*\n)+")
_TIME_RANGE_RE = re.compile(r"^(\S+)\s+-->\s+(\S+)$")


def _check_caption(position: int, caption: Caption) -> None:
    """Raise FormatError if the caption cannot be written as a SubRip block."""
    decode(caption.start_time)
    decode(caption.end_time)
    lines = caption.text.replace("\r\n", "\n").strip("\n").split("\n")
    if len(lines) > 1 and any(not line.strip() for line in lines):
        raise FormatError(
            "Caption {} text contains a blank line, which would split the block".format(
                position
            )
        )


def serialize(document: SubtitleDocument) -> str:
    """Render a subtitle document as SubRip text.

    Raises:
        FormatError: If a caption has a malformed timestamp or its text
            contains a blank line.
    """
    captions = list(document)
    for position, caption in enumerate(captions, 1):
        _check_caption(position, caption)

    blocks: List[str] = []
    for position, caption in enumerate(captions, 1):
        if caption.id != str(position):
            logger.debug("Renumbering caption %s to %d", caption.id, position)
        text = "\n".join(
            line.rstrip() for line in caption.text.replace("\r\n", "\n").split("\n")
        ).strip("\n")
        lines = [
            str(position),
            "{} --> {}".format(caption.start_time.strip(), caption.end_time.strip()),
        ]
        if text:
            lines.append(text)
        blocks.append("\n".join(lines))

    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def parse(text: str) -> SubtitleDocument:
    """Parse SubRip text into a subtitle document.

    HOW: Strip a byte-order mark, normalize CRLF/CR to LF, drop trailing
    whitespace on each line, then split into blank-line-delimited blocks.

    Raises:
        FormatError: If a block lacks an integer id or a valid time range.
    """
    normalized = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    normalized = "\n".join(line.rstrip() for line in normalized.split("\n")).strip("\n")
    if not normalized.strip():
        return SubtitleDocument()

    captions: List[Caption] = []
    for block in _BLOCK_SEPARATOR_RE.split(normalized):
        lines = block.strip("\n").split("\n")
        position = len(captions) + 1

        raw_id = lines[0].strip()
        if not raw_id.isdigit():
            raise FormatError("Block {} has no numeric id: {!r}".format(position, lines[0]))
        if len(lines) < 2:
            raise FormatError("Block {} has no time range".format(position))

        match = _TIME_RANGE_RE.match(lines[1].strip())
        if match is None:
            raise FormatError(
                "Block {} has a malformed time range: {!r}".format(position, lines[1])
            )
        start_time, end_time = match.groups()
        decode(start_time)
        decode(end_time)

        if raw_id != str(position):
            logger.debug("Renumbering parsed caption %s to %d", raw_id, position)

        captions.append(Caption(
            id=str(position),
            start_time=start_time,
            end_time=end_time,
            text="\n".join(lines[2:]),
        ))

    return SubtitleDocument(captions=tuple(captions))
