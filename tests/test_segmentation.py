"""Unit tests for the segmentation service client.

WHY: The client is the only place that talks to the punctuation service.
It must refuse unsupported languages before any request, send the form
field the services expect, and surface HTTP failures as typed errors.

HOW: httpx.MockTransport stands in for the network; each test records the
requests it receives. Coroutines run via asyncio.run().
"""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from subtitle_aligner.api.segmentation import (
    SegmentationClient,
    SegmentationServiceError,
    resolve_service_url,
)
from subtitle_aligner.config import DEFAULT_SEGMENTATION_SERVICE, SEGMENTATION_SERVICES
from subtitle_aligner.core.errors import UnsupportedLanguageError

PUNCTUATED = "The cat sat on the mat. It was warm."


def _transport(status_code=200, body=PUNCTUATED, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, text=body)

    return httpx.MockTransport(handler)


class TestConstruction:

    def test_unsupported_language_raises(self):
        seen = []
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            SegmentationClient(language="sv", transport=_transport(seen=seen))
        assert exc_info.value.language == "sv"
        assert "en" in str(exc_info.value)
        assert seen == []

    def test_default_service(self):
        client = SegmentationClient()
        assert client.url == SEGMENTATION_SERVICES[DEFAULT_SEGMENTATION_SERVICE]

    def test_named_service(self):
        assert resolve_service_url("punctuator") == SEGMENTATION_SERVICES["punctuator"]

    def test_custom_url(self):
        client = SegmentationClient(service="http://localhost:9000/punct")
        assert client.url == "http://localhost:9000/punct"

    def test_unknown_service_raises(self):
        with pytest.raises(ValueError):
            resolve_service_url("nope")


class TestRequests:

    def test_punctuate_posts_form_text(self):
        seen = []

        async def _run():
            client = SegmentationClient(
                service="http://punct.test/api", transport=_transport(seen=seen)
            )
            async with client:
                return await client.punctuate("the cat sat on the mat it was warm")

        assert asyncio.run(_run()) == PUNCTUATED
        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://punct.test/api"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {
            "text": ["the cat sat on the mat it was warm"],
        }

    def test_segment_splits_sentences(self):
        async def _run():
            async with SegmentationClient(transport=_transport()) as client:
                return await client.segment("the cat sat on the mat it was warm")

        assert asyncio.run(_run()) == ["The cat sat on the mat.", "It was warm."]

    def test_segment_empty_transcript_skips_request(self):
        seen = []

        async def _run():
            async with SegmentationClient(transport=_transport(seen=seen)) as client:
                return await client.segment("   ")

        assert asyncio.run(_run()) == []
        assert seen == []

    def test_error_status_raises(self):
        async def _run():
            async with SegmentationClient(
                transport=_transport(status_code=503, body="overloaded")
            ) as client:
                await client.punctuate("hello")

        with pytest.raises(SegmentationServiceError) as exc_info:
            asyncio.run(_run())
        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "overloaded"

    def test_outside_context_manager_raises(self):
        client = SegmentationClient()
        with pytest.raises(RuntimeError):
            asyncio.run(client.punctuate("hello"))
