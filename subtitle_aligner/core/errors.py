"""Error kinds raised by the alignment core.

WHY: Callers need typed exceptions to tell a malformed input file apart
from a segmentation that does not match the word timeline, or from a
request the collaborators cannot serve. The core never recovers locally;
it raises one of these and leaves reporting to the caller.

RULES:
- Every core error derives from SubtitleError
- Input validation errors also derive from ValueError
- Messages name the offending value and, where useful, the limit
"""

from __future__ import annotations


class SubtitleError(Exception):
    """Base class for all subtitle_aligner core errors."""


class FormatError(SubtitleError, ValueError):
    """Raised for malformed timestamps, triples, SRT blocks, or event JSON."""


class AlignmentError(SubtitleError):
    """Raised when the sentences need more words than the timeline holds.

    WHY: A cursor overrun means the segmentation and the word timeline have
    drifted apart. Clamping to the last word would silently shift every
    later caption, so alignment stops instead.

    RULES:
    - sentence_index: 0-based index of the sentence that overran
    - required: cursor position the sentence needs to reach
    - available: length of the word timeline
    """

    def __init__(self, sentence_index: int, required: int, available: int) -> None:
        self.sentence_index = sentence_index
        self.required = required
        self.available = available
        super().__init__(
            "Sentence {} needs words up to position {} but the timeline "
            "has only {} words".format(sentence_index + 1, required, available)
        )


class UnsupportedLanguageError(SubtitleError, ValueError):
    """Raised when segmentation is requested for an unsupported language."""

    def __init__(self, language: str, supported: set[str] | None = None) -> None:
        self.language = language
        self.supported = set(supported or ())
        message = "Segmentation is not supported for language '{}'".format(language)
        if self.supported:
            message += " (supported: {})".format(", ".join(sorted(self.supported)))
        super().__init__(message)


class InputBoundsError(SubtitleError, ValueError):
    """Raised when a subtitle batch exceeds a collaborator's size limit."""

    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(
            "Too many subtitles: {} (limit is {})".format(count, limit)
        )
