"""Sentence tokenization of punctuated transcript text.

WHY: The segmentation service returns the whole transcript as one
punctuated string. The aligner needs it as an ordered list of sentences.

HOW: Split after sentence-ending punctuation (optionally followed by
closing quotes or brackets) when whitespace follows. Line breaks in the
service output are treated as plain whitespace.

RULES:
- Sentence-ending punctuation: . ! ? … (runs such as "?!" or "..." count once)
- Sentences are stripped; empty pieces are dropped
- Text with no sentence-ending punctuation is one sentence
- No abbreviation or language-specific heuristics
"""

from __future__ import annotations

import re
from typing import List

# Whitespace preceded by terminal punctuation and optional closing marks.
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?…])([\"'”’)\]]*)\s+")


def split_sentences(text: str) -> List[str]:
    """Split punctuated text into sentences, in reading order."""
    flattened = re.sub(r"\s+", " ", text).strip()
    if not flattened:
        return []

    # Keep closing quotes with the sentence they close
    marked = _SENTENCE_BOUNDARY_RE.sub(lambda m: m.group(1) + "\n", flattened)
    return [piece.strip() for piece in marked.split("\n") if piece.strip()]
