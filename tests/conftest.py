"""Shared test fixtures for the subtitle_aligner test suite.

WHY: Most test modules need the same small transcripts: a recognizer
payload, its speech events, and the word timeline they normalize to.
Centralizing them keeps expected timings consistent across modules.

HOW: Plain module constants plus pytest fixtures returning fresh copies.

RULES:
- SAMPLE_RESULTS is a flat recognizer payload with one phrase-level entry
  ("sat on", one timestamp for two words)
- The timeline fixture is the normalized form of SAMPLE_RESULTS
"""

from typing import Any, Dict, List

import pytest

from subtitle_aligner.core.ir import SpeechEvent, WordTimestamp


# ---------------------------------------------------------------------------
# Sample recognizer output: two utterances, two sentences
# ---------------------------------------------------------------------------

SAMPLE_RESULTS: List[Dict[str, Any]] = [
    {
        "text": "the cat sat on the mat ",
        "words": [
            ["the", 0.0, 0.3],
            ["cat", 0.3, 0.6],
            ["sat on", 0.6, 1.2],
            ["the", 1.2, 1.4],
            ["mat", 1.4, 1.9],
        ],
        "confidence": 0.91,
    },
    {
        "text": "it was warm ",
        "words": [
            ["it", 2.5, 2.7],
            ["was", 2.7, 2.9],
            ["warm", 2.9, 3.4],
        ],
        "confidence": 0.88,
    },
]

SAMPLE_PUNCTUATED = "The cat sat on the mat. It was warm."


@pytest.fixture
def sample_results():
    """Flat recognizer payload (list of utterance dicts)."""
    return [dict(item) for item in SAMPLE_RESULTS]


@pytest.fixture
def sample_events():
    """SpeechEvent records for SAMPLE_RESULTS, words as recorded."""
    return [
        SpeechEvent(
            id="1",
            text="the cat sat on the mat ",
            words=(
                WordTimestamp("the", 0.0, 0.3),
                WordTimestamp("cat", 0.3, 0.6),
                WordTimestamp("sat on", 0.6, 1.2),
                WordTimestamp("the", 1.2, 1.4),
                WordTimestamp("mat", 1.4, 1.9),
            ),
            confidence=0.91,
        ),
        SpeechEvent(
            id="2",
            text="it was warm ",
            words=(
                WordTimestamp("it", 2.5, 2.7),
                WordTimestamp("was", 2.7, 2.9),
                WordTimestamp("warm", 2.9, 3.4),
            ),
            confidence=0.88,
        ),
    ]


@pytest.fixture
def sample_timeline():
    """Normalized word timeline of SAMPLE_RESULTS (9 words)."""
    return [
        WordTimestamp("the", 0.0, 0.3),
        WordTimestamp("cat", 0.3, 0.6),
        WordTimestamp("sat", 0.6, 1.2),
        WordTimestamp("on", 0.6, 1.2),
        WordTimestamp("the", 1.2, 1.4),
        WordTimestamp("mat", 1.4, 1.9),
        WordTimestamp("it", 2.5, 2.7),
        WordTimestamp("was", 2.7, 2.9),
        WordTimestamp("warm", 2.9, 3.4),
    ]


@pytest.fixture
def sample_punctuated():
    """Punctuation service response for SAMPLE_RESULTS."""
    return SAMPLE_PUNCTUATED
