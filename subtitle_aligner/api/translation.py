"""Async HTTP client for the translation bundle service.

WHY: Subtitles are translated by a bundle-based translation service
(Globalization Pipeline REST API). Caption texts are uploaded as a bundle
of source strings; once machine translation is done the target-language
strings are downloaded and merged back into the original timing.

HOW: Uses httpx.AsyncClient with basic auth against
``{url}/{instance_id}/v2/bundles``. Each REST call is one method:
list_bundles, create_bundle, update_target_languages, upload_strings,
fetch_strings.

RULES:
- Use as: async with TranslationClient(credentials) as client: ...
- Credentials are passed in explicitly (see config.load_translation_credentials)
- Non-2xx responses, or a body whose status is not SUCCESS, raise
  TranslationServiceError
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping
from urllib.parse import quote

import httpx

from subtitle_aligner.config import HTTP_TIMEOUT_S, TranslationCredentials

logger = logging.getLogger(__name__)


class TranslationServiceError(Exception):
    """Raised when the translation service rejects a request.

    RULES:
    - Always include status_code and message
    - message is the service's error message or the response body
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Translation service error {status_code}: {message}")


class TranslationClient:
    """Async client for the translation bundle service."""

    def __init__(
        self,
        credentials: TranslationCredentials,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._base_url = "{}/{}/v2".format(
            credentials.url.rstrip("/"), quote(credentials.instance_id, safe="")
        )
        self._timeout = timeout or HTTP_TIMEOUT_S
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TranslationClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            auth=httpx.BasicAuth(self._credentials.user_id, self._credentials.password),
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
                "TranslationClient must be used as an async context manager: "
                "async with TranslationClient(credentials) as client: ..."
            )
        return self._client

    @staticmethod
    def _bundle_path(bundle_id: str, language: str | None = None) -> str:
        path = "/bundles/{}".format(quote(bundle_id, safe=""))
        if language:
            path += "/{}".format(quote(language, safe=""))
        return path

    async def _request(self, method: str, path: str, json: dict | None = None) -> dict:
        """Send one request and return the decoded JSON body.

        Raises:
            TranslationServiceError: On a non-2xx response or an error status.
        """
        client = self._ensure_client()
        resp = await client.request(method, path, json=json)

        if resp.status_code not in (200, 201):
            message = resp.text
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = body["message"]
            raise TranslationServiceError(resp.status_code, message)

        data = resp.json() if resp.content else {}
        if not isinstance(data, dict):
            raise TranslationServiceError(resp.status_code, "Unexpected response body")
        if data.get("status", "SUCCESS") != "SUCCESS":
            raise TranslationServiceError(resp.status_code, data.get("message", str(data)))
        return data

    async def list_bundles(self) -> List[str]:
        """Return the ids of all bundles in the service instance."""
        data = await self._request("GET", "/bundles")
        return list(data.get("bundleIds", []))

    async def create_bundle(
        self,
        bundle_id: str,
        source_language: str,
        target_languages: List[str],
    ) -> None:
        """Create a new bundle with a source and target languages."""
        logger.info("Creating bundle %s (%s -> %s)", bundle_id, source_language,
                    ", ".join(target_languages))
        await self._request("PUT", self._bundle_path(bundle_id), json={
            "sourceLanguage": source_language,
            "targetLanguages": list(target_languages),
        })

    async def update_target_languages(
        self,
        bundle_id: str,
        target_languages: List[str],
    ) -> None:
        """Set the target languages of an existing bundle."""
        logger.info("Updating bundle %s targets: %s", bundle_id, ", ".join(target_languages))
        await self._request("POST", self._bundle_path(bundle_id), json={
            "targetLanguages": list(target_languages),
        })

    async def upload_strings(
        self,
        bundle_id: str,
        language: str,
        strings: Mapping[str, str],
    ) -> None:
        """Upload key/value strings for one language of a bundle."""
        logger.info("Uploading %d strings to bundle %s (%s)", len(strings), bundle_id, language)
        await self._request("PUT", self._bundle_path(bundle_id, language), json=dict(strings))

    async def fetch_strings(self, bundle_id: str, language: str) -> Dict[str, str]:
        """Download the key/value strings for one language of a bundle."""
        data = await self._request("GET", self._bundle_path(bundle_id, language))
        strings = data.get("resourceStrings", {})
        logger.info("Fetched %d strings from bundle %s (%s)", len(strings), bundle_id, language)
        return dict(strings)
