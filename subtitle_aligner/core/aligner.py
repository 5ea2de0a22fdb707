"""Sentence-to-timeline alignment.

WHY: Sentence segmentation and word timing come from two independent
collaborators. The segmentation service knows where sentences end but has
no timing; the recognizer knows when each word was spoken but has no
sentence structure. Captions need both.

HOW: Both sequences describe the same transcript, so the sentences
partition the word timeline into consecutive slices. A cursor walks the
timeline: each sentence starts at the cursor's word, advances the cursor by
the sentence's word count, and ends at the word just before the new cursor.

RULES:
- Word count: newlines → spaces, trim, collapse spaces, split on " ".
  The empty string counts as one word
- The first "-" of a sentence is removed before counting, matching the
  text the caption will show
- A cursor overrun raises AlignmentError; the cursor is never clamped
- Nothing is returned until every sentence has been aligned
- Leftover timeline words and blank sentences are logged as warnings
"""

from __future__ import annotations

import logging
import re
from typing import List, Sequence

from subtitle_aligner.core.errors import AlignmentError
from subtitle_aligner.core.ir import CasingMode, SubtitleDocument, TimeRange, WordTimestamp
from subtitle_aligner.formatters.captions import captions_from_ranges, strip_dash

logger = logging.getLogger(__name__)

_MULTI_SPACE_RE = re.compile(r"[ ]{2,}")


def count_words(sentence: str) -> int:
    """Count the timeline words a sentence occupies.

    Note that ``count_words("")`` is 1: splitting an empty string yields one
    empty token. Callers that produce empty sentences get one timeline word
    consumed per empty sentence.
    """
    text = sentence.replace("\n", " ").strip()
    text = _MULTI_SPACE_RE.sub(" ", text)
    return len(text.split(" "))


def align_sentences(
    sentences: Sequence[str],
    timeline: Sequence[WordTimestamp],
) -> List[TimeRange]:
    """Assign each sentence the time span of its words in the timeline.

    Args:
        sentences: Sentence strings in reading order.
        timeline: Normalized word timeline (one entry per word).

    Returns:
        One TimeRange per sentence. The text has its first dash removed.

    Raises:
        AlignmentError: If the sentences need more words than the timeline
            has.
    """
    ranges: List[TimeRange] = []
    cursor = 0
    available = len(timeline)

    for index, sentence in enumerate(sentences):
        text = strip_dash(sentence)
        if not text.strip():
            logger.warning(
                "Sentence %d is blank; it still consumes one timeline word", index + 1
            )

        n = count_words(text)
        if cursor + n > available:
            raise AlignmentError(index, cursor + n, available)

        start_s = timeline[cursor].start_s
        cursor += n
        end_s = timeline[cursor - 1].end_s
        ranges.append(TimeRange(text=text, start_s=start_s, end_s=end_s))

    if cursor < available:
        logger.warning(
            "%d timeline words were not covered by any sentence", available - cursor
        )

    return ranges


def align(
    sentences: Sequence[str],
    timeline: Sequence[WordTimestamp],
    casing: CasingMode = CasingMode.VERBATIM,
) -> SubtitleDocument:
    """Align sentences to the word timeline and build the subtitle document.

    This is the core entry point: alignment, then caption formatting. It
    either returns a complete document or raises.

    Raises:
        AlignmentError: On a segmentation/timeline mismatch.
        FormatError: If a timestamp cannot be encoded.
    """
    ranges = align_sentences(sentences, timeline)
    return captions_from_ranges(ranges, casing)
