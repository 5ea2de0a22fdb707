"""Unit tests for subtitle document <-> translation bundle mapping."""

import logging

import pytest

from subtitle_aligner.config import MAX_TRANSLATION_STRINGS
from subtitle_aligner.core.bundle import apply_translations, captions_to_strings
from subtitle_aligner.core.errors import InputBoundsError
from subtitle_aligner.core.ir import Caption, SubtitleDocument


def _document(count):
    return SubtitleDocument(captions=[
        Caption(str(i), "00:00:00,000", "00:00:01,000", "line {}".format(i))
        for i in range(1, count + 1)
    ])


class TestCaptionsToStrings:

    def test_keys_are_caption_ids(self):
        assert captions_to_strings(_document(2)) == {"1": "line 1", "2": "line 2"}

    def test_limit_is_inclusive(self):
        strings = captions_to_strings(_document(MAX_TRANSLATION_STRINGS))
        assert len(strings) == MAX_TRANSLATION_STRINGS

    def test_over_limit_raises(self):
        with pytest.raises(InputBoundsError) as exc_info:
            captions_to_strings(_document(MAX_TRANSLATION_STRINGS + 1))
        assert exc_info.value.count == 1001
        assert exc_info.value.limit == 1000
        assert "1001" in str(exc_info.value)

    def test_custom_limit(self):
        with pytest.raises(InputBoundsError):
            captions_to_strings(_document(3), limit=2)


class TestApplyTranslations:

    def test_replaces_text_keeps_timing(self):
        source = _document(2)
        translated = apply_translations(source, {"1": "ligne 1", "2": "ligne 2"})
        assert [c.text for c in translated] == ["ligne 1", "ligne 2"]
        assert translated[0].start_time == source[0].start_time
        assert translated[1].id == "2"

    def test_missing_translation_keeps_source(self, caplog):
        with caplog.at_level(logging.WARNING, logger="subtitle_aligner.core.bundle"):
            translated = apply_translations(_document(2), {"2": "ligne 2"})
        assert [c.text for c in translated] == ["line 1", "ligne 2"]
        assert "1 captions have no translation" in caplog.text

    def test_source_document_unchanged(self):
        source = _document(1)
        apply_translations(source, {"1": "ligne 1"})
        assert source[0].text == "line 1"
