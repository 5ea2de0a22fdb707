"""Intermediate representation dataclasses for speech timelines and subtitles.

WHY: Recognition output, sentence segmentation, and SubRip text are three
different shapes of the same transcript. The IR gives each stage a small,
immutable record to produce and the next stage a stable contract to consume.

HOW: Five records and one enumeration:
  WordTimestamp     one recognized word (or phrase, before normalization)
  SpeechEvent       one recognized utterance with its word entries
  TimeRange         one aligned sentence with its start and end seconds
  Caption           one SubRip block: id, time strings, text
  SubtitleDocument  the ordered captions of one subtitle file
  CasingMode        how caption text is cased

RULES:
- All records are frozen; stages return new records, never mutate inputs
- Times are float seconds until the Time Codec renders them
- Caption ids are strings holding the 1-based output position
- SubtitleDocument order is display order
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional, Tuple


class CasingMode(str, enum.Enum):
    """How the Caption Formatter treats sentence text.

    HOW: Inherits from str so values come straight from CLI flags and .env.

    RULES:
    - verbatim: text passes through unchanged
    - sentence: trimmed, first letter uppercased, terminal period added
    """

    VERBATIM = "verbatim"
    SENTENCE_CASE = "sentence"


@dataclass(frozen=True)
class WordTimestamp:
    """A recognized word with its start and end time in seconds.

    RULES:
    - start_s <= end_s
    - Before normalization, word may hold several space-separated tokens
      that share one start/end pair; after normalization it is one token
    """

    word: str
    start_s: float
    end_s: float

    def as_triple(self) -> Tuple[str, float, float]:
        """Return the recognizer's ``[word, start, end]`` shape."""
        return (self.word, self.start_s, self.end_s)


@dataclass(frozen=True)
class SpeechEvent:
    """One recognized utterance.

    WHY: Persisting utterances lets segmentation be re-run without calling
    the recognizer again.

    RULES:
    - id: recognizer result index (stringified), unique per transcript
    - text: utterance transcript as returned by the recognizer
    - words: timestamp entries in spoken order, possibly phrase-level
    - confidence: recognizer confidence in [0, 1], None when not recorded
    """

    id: str
    text: str
    words: Tuple[WordTimestamp, ...] = ()
    confidence: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "words", tuple(self.words))


class TimeRange(NamedTuple):
    """One aligned sentence and the seconds it spans."""

    text: str
    start_s: float
    end_s: float


@dataclass(frozen=True)
class Caption:
    """A single SubRip caption block.

    RULES:
    - id: 1-based output position as a string ("1", "2", ...)
    - start_time / end_time: "HH:MM:SS,mmm"
    - text: may contain single newlines, never a blank line
    """

    id: str
    start_time: str
    end_time: str
    text: str


@dataclass(frozen=True)
class SubtitleDocument:
    """The ordered captions of one subtitle file."""

    captions: Tuple[Caption, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Lists are accepted for convenience; equality compares tuples
        object.__setattr__(self, "captions", tuple(self.captions))

    def __iter__(self) -> Iterator[Caption]:
        return iter(self.captions)

    def __len__(self) -> int:
        return len(self.captions)

    def __getitem__(self, index: int) -> Caption:
        return self.captions[index]
