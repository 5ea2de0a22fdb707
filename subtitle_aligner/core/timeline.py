"""Word timeline normalization, recognition result parsing, and speech event
persistence.

WHY: The sentence aligner walks a flat timeline with exactly one entry per
spoken word. Recognizers do not always deliver that: some return one
timestamp entry for a multi-word phrase, and results arrive per utterance,
wrapped in recognizer-specific envelopes. This module is the bridge between
those payloads and the word timeline.

HOW: normalize_timestamps() splits phrase entries into one WordTimestamp per
token. build_word_timeline() concatenates the normalized words of all speech
events. speech_events_from_results() turns recognizer payloads into
SpeechEvent records, and dump/load_speech_events() persist them as JSON
(validated with jsonschema) so segmentation can be re-run offline.

RULES:
- A phrase entry "hello world" (1.0, 2.0) becomes two words, both (1.0, 2.0).
  This loses per-word precision; it is the accepted approximation when the
  recognizer only reports phrase timing
- Entries whose text is blank after stripping contribute no words
- Malformed entries (not [word, start, end], non-numeric times,
  start > end) raise FormatError
- Utterances with confidence <= 0 are dropped by filter_confident(), before
  any text or word reaches the aligner
"""

from __future__ import annotations

import json
import logging
import numbers
from typing import Any, Iterable, List, Optional, Sequence

import jsonschema

from subtitle_aligner.core.errors import FormatError
from subtitle_aligner.core.ir import SpeechEvent, WordTimestamp

logger = logging.getLogger(__name__)

# Schema for the persisted speech event file.
SPEECH_EVENTS_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "text", "words"],
        "properties": {
            "id": {"type": ["string", "integer"]},
            "text": {"type": "string"},
            "confidence": {"type": ["number", "null"]},
            "words": {
                "type": "array",
                "items": {
                    "type": "array",
                    "minItems": 3,
                    "maxItems": 3,
                    "prefixItems": [
                        {"type": "string"},
                        {"type": "number"},
                        {"type": "number"},
                    ],
                },
            },
        },
    },
}


def _to_seconds(value: Any, field_name: str, entry: Any) -> float:
    """Return value as float seconds, raising FormatError if it is not a number."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise FormatError(
            "Timestamp entry {!r} has a non-numeric {} time".format(entry, field_name)
        )
    return float(value)


def _utterance_text(value: Any, position: int) -> str:
    if not isinstance(value, str):
        raise FormatError(
            "Recognition result {} has a non-string transcript: {!r}".format(position, value)
        )
    return value


def _confidence(value: Any, position: int) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise FormatError(
            "Recognition result {} has a non-numeric confidence: {!r}".format(position, value)
        )
    return float(value)


def normalize_timestamps(triples: Iterable[Sequence[Any]]) -> List[WordTimestamp]:
    """Expand recognizer timestamp entries into one WordTimestamp per word.

    WHY: The aligner advances one timeline position per word of a sentence.
    A phrase entry counted as one position would desynchronize every
    following sentence.

    HOW: Split each entry's text on whitespace. A single token is emitted
    as-is; several tokens are emitted individually, each inheriting the
    entry's start and end.

    RULES:
    - Each entry must be a 3-item sequence: (token_or_phrase, start, end)
    - start and end must be numbers with start <= end
    - An empty input yields an empty list

    Args:
        triples: Timestamp entries for one utterance, in spoken order.

    Returns:
        List of WordTimestamp objects, one per token.

    Raises:
        FormatError: If an entry is malformed.
    """
    words: List[WordTimestamp] = []

    for entry in triples:
        if isinstance(entry, WordTimestamp):
            entry = entry.as_triple()
        if isinstance(entry, (str, bytes)) or not isinstance(entry, Sequence) or len(entry) != 3:
            raise FormatError(
                "Timestamp entry must be [word, start, end], got {!r}".format(entry)
            )

        token, start, end = entry
        if not isinstance(token, str):
            raise FormatError("Timestamp entry {!r} has a non-string word".format(entry))
        start_s = _to_seconds(start, "start", entry)
        end_s = _to_seconds(end, "end", entry)
        if start_s > end_s:
            raise FormatError(
                "Timestamp entry {!r} starts after it ends".format(entry)
            )

        for part in token.split():
            words.append(WordTimestamp(word=part, start_s=start_s, end_s=end_s))

    return words


def _recorded_words(raw_words: Iterable[Sequence[Any]]) -> tuple:
    """Validate timestamp entries but keep the recognizer's grouping."""
    raw_words = list(raw_words)
    normalize_timestamps(raw_words)
    return tuple(
        WordTimestamp(word=w[0], start_s=float(w[1]), end_s=float(w[2]))
        for w in raw_words
    )


def build_word_timeline(events: Iterable[SpeechEvent]) -> List[WordTimestamp]:
    """Concatenate the normalized words of all speech events, in event order."""
    timeline: List[WordTimestamp] = []
    for event in events:
        timeline.extend(normalize_timestamps(event.words))
    return timeline


def build_transcript_text(events: Iterable[SpeechEvent]) -> str:
    """Join utterance texts into the transcript sent for segmentation.

    Texts are stripped and joined with single spaces so the word count of
    the transcript matches the word timeline.
    """
    return " ".join(event.text.strip() for event in events if event.text.strip())


def filter_confident(events: Iterable[SpeechEvent]) -> List[SpeechEvent]:
    """Drop utterances whose recognizer confidence is zero or below.

    Events with no recorded confidence are kept.
    """
    kept: List[SpeechEvent] = []
    for event in events:
        if event.confidence is not None and event.confidence <= 0.0:
            logger.info("Dropping utterance %s (confidence %.2f)", event.id, event.confidence)
            continue
        kept.append(event)
    return kept


# ---------------------------------------------------------------------------
# Recognition results
# ---------------------------------------------------------------------------


def _event_from_envelope(envelope: dict, position: int) -> Optional[SpeechEvent]:
    """Build a SpeechEvent from a recognizer result envelope.

    Envelopes look like ``{"result_index": n, "results": [{"final": true,
    "alternatives": [{"transcript", "confidence", "timestamps"}]}]}``.
    Returns None for interim (non-final) results.
    """
    results = envelope.get("results") or []
    if not results:
        return None
    result = results[0]
    if not result.get("final", True):
        return None

    alternatives = result.get("alternatives") or []
    if not alternatives:
        raise FormatError("Recognition result {} has no alternatives".format(position))
    best = alternatives[0]

    index = envelope.get("result_index", position)
    return SpeechEvent(
        id=str(index + 1) if isinstance(index, int) else str(index),
        text=_utterance_text(best.get("transcript", ""), position),
        words=_recorded_words(best.get("timestamps") or []),
        confidence=_confidence(best.get("confidence"), position),
    )


def speech_events_from_results(results: Iterable[dict]) -> List[SpeechEvent]:
    """Parse recognizer output into SpeechEvent records.

    WHY: The recognizer hands over one payload per utterance. Two shapes
    occur in practice: the flat ``{"text", "words", "confidence"}`` record
    and the streaming recognizer's result envelope.

    HOW: Envelopes are unwrapped via their first result and first
    alternative; flat records are read directly. Words are kept as the
    recognizer reported them (possibly phrase-level) but validated.

    RULES:
    - Non-final envelopes are skipped
    - ids default to the 1-based position of the utterance
    - Confidence filtering is left to filter_confident()

    Raises:
        FormatError: If a record is not an object, its transcript is not a
            string, its confidence is not a number, or its words are malformed.
    """
    events: List[SpeechEvent] = []

    for position, item in enumerate(results):
        if not isinstance(item, dict):
            raise FormatError("Recognition result {} is not an object".format(position))

        if "results" in item:
            event = _event_from_envelope(item, position)
            if event is not None:
                events.append(event)
            continue

        text = item.get("text", item.get("transcript", ""))
        raw_words = item.get("words", item.get("timestamps")) or []
        events.append(SpeechEvent(
            id=str(item.get("id", position + 1)),
            text=_utterance_text(text, position),
            words=_recorded_words(raw_words),
            confidence=_confidence(item.get("confidence"), position),
        ))

    return events


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def speech_events_to_data(events: Iterable[SpeechEvent]) -> List[dict]:
    """Convert speech events to JSON-ready dicts."""
    data: List[dict] = []
    for event in events:
        item: dict = {
            "id": event.id,
            "text": event.text,
            "words": [list(w.as_triple()) for w in event.words],
        }
        if event.confidence is not None:
            item["confidence"] = event.confidence
        data.append(item)
    return data


def dump_speech_events(events: Iterable[SpeechEvent]) -> str:
    """Serialize speech events to the persisted JSON array format."""
    return json.dumps(speech_events_to_data(events), indent=2, ensure_ascii=False)


def load_speech_events(raw: str) -> List[SpeechEvent]:
    """Parse a persisted speech event JSON array.

    WHY: Segmentation can be re-run many times against one recognition
    pass; the persisted file is the hand-off between them.

    HOW: json.loads, then schema validation, then record construction.

    Raises:
        FormatError: If the text is not JSON, violates the schema, or
            contains a malformed timestamp entry.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FormatError("Speech event file is not valid JSON: {}".format(e)) from e

    try:
        jsonschema.validate(instance=data, schema=SPEECH_EVENTS_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise FormatError(
            "Speech event file is malformed at {}: {}".format(location, e.message)
        ) from e

    return [
        SpeechEvent(
            id=str(item["id"]),
            text=item["text"],
            words=_recorded_words(item["words"]),
            confidence=item.get("confidence"),
        )
        for item in data
    ]
