"""Async HTTP client for the sentence segmentation (punctuation) service.

WHY: Recognizer transcripts are lowercase runs of words with no sentence
boundaries. A punctuation service restores punctuation, and the sentence
tokenizer then splits its output into the sentences the aligner consumes.

HOW: Uses httpx.AsyncClient. The service takes a form-encoded POST with the
transcript in the ``text`` field and answers with the punctuated text as the
response body. segment() combines the call with split_sentences().

RULES:
- Use as: async with SegmentationClient(language="en") as client: ...
- The language is checked in the constructor, before any HTTP call
- Only SUPPORTED_SEGMENTATION_LANGUAGES can be segmented
- service is a key of SEGMENTATION_SERVICES, or a full URL
- Non-2xx responses raise SegmentationServiceError
"""

from __future__ import annotations

import logging
from typing import List

import httpx

from subtitle_aligner.config import (
    DEFAULT_SEGMENTATION_SERVICE,
    DEFAULT_SOURCE_LANGUAGE,
    HTTP_TIMEOUT_S,
    SEGMENTATION_SERVICES,
    SUPPORTED_SEGMENTATION_LANGUAGES,
)
from subtitle_aligner.core.errors import UnsupportedLanguageError
from subtitle_aligner.core.sentences import split_sentences

logger = logging.getLogger(__name__)


class SegmentationServiceError(Exception):
    """Raised when the segmentation service returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Segmentation service error {status_code}: {message}")


def resolve_service_url(service: str) -> str:
    """Return the endpoint URL for a service name, or the URL itself.

    Raises:
        ValueError: If service is neither a known name nor an http(s) URL.
    """
    if service in SEGMENTATION_SERVICES:
        return SEGMENTATION_SERVICES[service]
    if service.startswith(("http://", "https://")):
        return service
    raise ValueError(
        "Unknown segmentation service '{}'. Available: {}".format(
            service, ", ".join(sorted(SEGMENTATION_SERVICES))
        )
    )


class SegmentationClient:
    """Async client for a punctuation-based sentence segmentation service.

    WHY: Provides a typed interface to the punctuation service and rejects
    languages it cannot handle before anything is sent.

    HOW: Wraps httpx.AsyncClient. punctuate() returns the raw punctuated
    text; segment() also splits it into sentences.
    """

    def __init__(
        self,
        language: str | None = None,
        service: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._language = language or DEFAULT_SOURCE_LANGUAGE
        if self._language not in SUPPORTED_SEGMENTATION_LANGUAGES:
            raise UnsupportedLanguageError(self._language, SUPPORTED_SEGMENTATION_LANGUAGES)
        self._url = resolve_service_url(service or DEFAULT_SEGMENTATION_SERVICE)
        self._timeout = timeout or HTTP_TIMEOUT_S
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return self._url

    async def __aenter__(self) -> SegmentationClient:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "SegmentationClient must be used as an async context manager: "
                "async with SegmentationClient() as client: ..."
            )
        return self._client

    async def punctuate(self, transcript: str) -> str:
        """Send the transcript to the service and return the punctuated text.

        Raises:
            SegmentationServiceError: On a non-2xx response.
        """
        client = self._ensure_client()
        logger.info("Requesting segmentation of %d characters from %s", len(transcript), self._url)

        resp = await client.post(self._url, data={"text": transcript})
        if resp.status_code != 200:
            raise SegmentationServiceError(resp.status_code, resp.text)

        return resp.text

    async def segment(self, transcript: str) -> List[str]:
        """Punctuate the transcript and split it into sentences."""
        if not transcript.strip():
            return []
        punctuated = await self.punctuate(transcript)
        sentences = split_sentences(punctuated)
        logger.info("Segmentation returned %d sentences", len(sentences))
        return sentences
