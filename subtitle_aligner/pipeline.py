"""Stage composition: speech events to segmented subtitles, and the
translation round trip.

WHY: Each workflow touches the core and one remote service. Keeping the
sequencing here, as plain async functions, lets the CLI and tests drive the
same steps with whatever client they construct.

HOW: Every function takes its client as an argument and awaits each stage
in order. Errors from any stage propagate unchanged; nothing is written by
these functions, they only return records.

RULES:
- Clients are passed in; this module never creates one
- Low-confidence utterances are filtered before text or words are used
- The translation size limit is checked before any request is sent
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from subtitle_aligner.api.segmentation import SegmentationClient
from subtitle_aligner.api.translation import TranslationClient
from subtitle_aligner.core.aligner import align
from subtitle_aligner.core.bundle import apply_translations, captions_to_strings
from subtitle_aligner.core.ir import CasingMode, SpeechEvent, SubtitleDocument
from subtitle_aligner.core.timeline import (
    build_transcript_text,
    build_word_timeline,
    filter_confident,
)

logger = logging.getLogger(__name__)


def align_speech_events(
    events: Sequence[SpeechEvent],
    sentences: Sequence[str],
    casing: CasingMode = CasingMode.VERBATIM,
) -> SubtitleDocument:
    """Align already-segmented sentences against the events' word timeline."""
    timeline = build_word_timeline(filter_confident(events))
    logger.info("Aligning %d sentences to %d words", len(sentences), len(timeline))
    return align(sentences, timeline, casing)


async def segment_speech_events(
    events: Sequence[SpeechEvent],
    client: SegmentationClient,
    casing: CasingMode = CasingMode.VERBATIM,
) -> SubtitleDocument:
    """Segment the events' transcript into sentences and align them.

    Raises:
        SegmentationServiceError: If the service call fails.
        AlignmentError: If the returned sentences do not fit the timeline.
    """
    kept: List[SpeechEvent] = filter_confident(events)
    transcript = build_transcript_text(kept)
    sentences = await client.segment(transcript)
    return align_speech_events(kept, sentences, casing)


async def upload_for_translation(
    document: SubtitleDocument,
    client: TranslationClient,
    bundle_id: str,
    source_language: str,
    target_language: str,
) -> int:
    """Upload caption texts as the source strings of a translation bundle.

    An existing bundle has its target languages updated; otherwise a new
    bundle is created.

    Returns:
        Number of strings uploaded.

    Raises:
        InputBoundsError: If the document exceeds the bundle size limit.
        TranslationServiceError: If a service call fails.
    """
    strings = captions_to_strings(document)

    if bundle_id in await client.list_bundles():
        await client.update_target_languages(bundle_id, [target_language])
    else:
        await client.create_bundle(bundle_id, source_language, [target_language])

    await client.upload_strings(bundle_id, source_language, strings)
    return len(strings)


async def download_translation(
    document: SubtitleDocument,
    client: TranslationClient,
    bundle_id: str,
    target_language: str,
) -> SubtitleDocument:
    """Fetch translated strings and merge them into the document's timing."""
    strings = await client.fetch_strings(bundle_id, target_language)
    return apply_translations(document, strings)
