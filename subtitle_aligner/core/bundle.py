"""Mapping between subtitle documents and translation string bundles.

WHY: The translation service stores strings as key/value bundles per
language. Subtitles go up as {caption id: text} and come back as
{caption id: translated text}; timing never leaves this machine.

HOW: captions_to_strings() builds the upload bundle after checking the
service's size limit. apply_translations() returns a new document with the
translated texts dropped into the original timing.

RULES:
- Keys are caption ids ("1", "2", ...)
- A document larger than the limit raises InputBoundsError before any
  strings are built
- Captions with no translation keep their source text (logged)
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Mapping

from subtitle_aligner.config import MAX_TRANSLATION_STRINGS
from subtitle_aligner.core.errors import InputBoundsError
from subtitle_aligner.core.ir import SubtitleDocument

logger = logging.getLogger(__name__)


def captions_to_strings(
    document: SubtitleDocument,
    limit: int = MAX_TRANSLATION_STRINGS,
) -> Dict[str, str]:
    """Build the {id: text} bundle for upload.

    Raises:
        InputBoundsError: If the document has more than ``limit`` captions.
    """
    if len(document) > limit:
        raise InputBoundsError(len(document), limit)
    return {caption.id: caption.text for caption in document}


def apply_translations(
    document: SubtitleDocument,
    strings: Mapping[str, str],
) -> SubtitleDocument:
    """Replace each caption's text with its translation, keeping the timing."""
    missing = 0
    captions = []
    for caption in document:
        translated = strings.get(caption.id)
        if translated is None:
            missing += 1
            captions.append(caption)
        else:
            captions.append(replace(caption, text=translated))

    if missing:
        logger.warning("%d captions have no translation; keeping source text", missing)

    return SubtitleDocument(captions=tuple(captions))
