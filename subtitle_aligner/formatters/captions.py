"""Caption text transforms and caption record construction.

WHY: Aligned sentences still need a little cleanup before they are shown:
the punctuation service sometimes leaves a stray dash, and plain recognizer
text has no capitalization or final period. This module also builds the
caption records (ids and rendered timestamps) the serializer writes.

HOW: strip_dash() and apply_casing() are small string transforms;
build_caption() combines them with the Time Codec. captions_from_ranges()
numbers aligned sentences 1..n; captions_from_speech_events() is the
unsegmented mode that shows each utterance as one caption.

RULES:
- Only the first "-" is removed, wherever it appears
- verbatim casing passes text through unchanged
- sentence casing trims, uppercases the first character, and appends "."
  unless the text already ends with . ! ? or …, optionally followed by
  closing quotes or brackets
- Caption text never carries trailing whitespace on a line; that is the
  form SubRip parsing returns
- Caption ids are 1-based positions in the output
"""

from __future__ import annotations

from typing import Iterable, List

from subtitle_aligner.core.ir import (
    Caption,
    CasingMode,
    SpeechEvent,
    SubtitleDocument,
    TimeRange,
)
from subtitle_aligner.core.timecode import encode

_TERMINAL_PUNCTUATION = (".", "!", "?", "…")
_CLOSING_MARKS = "\"'”’)]"


def strip_dash(text: str) -> str:
    """Remove the first literal dash from the text."""
    return text.replace("-", "", 1)


def apply_casing(text: str, casing: CasingMode) -> str:
    """Apply the casing mode to caption text."""
    if casing is CasingMode.VERBATIM:
        return text

    text = text.strip()
    if not text:
        return text

    text = text[0].upper() + text[1:]
    # Punctuation inside closing quotes or brackets still ends the sentence
    if not text.rstrip(_CLOSING_MARKS).endswith(_TERMINAL_PUNCTUATION):
        text += "."
    return text


def _trim_lines(text: str) -> str:
    """Drop trailing whitespace from each line and surrounding line breaks."""
    lines = text.replace("\r\n", "\n").split("\n")
    return "\n".join(line.rstrip() for line in lines).strip("\n")


def build_caption(
    position: int,
    text: str,
    start_s: float,
    end_s: float,
    casing: CasingMode = CasingMode.VERBATIM,
) -> Caption:
    """Build one caption record.

    Args:
        position: 1-based output position, used as the caption id.
        text: Sentence text (dash already removed by the aligner).
        start_s: Start of the first word, in seconds.
        end_s: End of the last word, in seconds.
        casing: Casing mode for the text.

    Raises:
        FormatError: If a time cannot be encoded.
    """
    return Caption(
        id=str(position),
        start_time=encode(start_s),
        end_time=encode(end_s),
        text=_trim_lines(apply_casing(text, casing)),
    )


def captions_from_ranges(
    ranges: Iterable[TimeRange],
    casing: CasingMode = CasingMode.VERBATIM,
) -> SubtitleDocument:
    """Turn aligned sentences into a numbered subtitle document."""
    captions = [
        build_caption(position, r.text, r.start_s, r.end_s, casing)
        for position, r in enumerate(ranges, 1)
    ]
    return SubtitleDocument(captions=tuple(captions))


def captions_from_speech_events(
    events: Iterable[SpeechEvent],
    casing: CasingMode = CasingMode.VERBATIM,
) -> SubtitleDocument:
    """Build one caption per utterance, without sentence segmentation.

    WHY: Before (or instead of) segmentation, the recognizer's utterances
    already make usable captions. This is the quick first-pass output.

    HOW: Each utterance spans from its first word's start to its last word's
    end; the text is the utterance transcript.

    RULES:
    - Utterances without words are skipped (they have no timing)
    - Callers filter low-confidence utterances first (filter_confident)
    - Ids are renumbered 1..n after skipping
    """
    captions: List[Caption] = []
    for event in events:
        if not event.words:
            continue
        captions.append(build_caption(
            len(captions) + 1,
            event.text,
            event.words[0].start_s,
            event.words[-1].end_s,
            casing,
        ))
    return SubtitleDocument(captions=tuple(captions))
