"""Configuration constants, service endpoints, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Service URLs, supported languages, and limits are
plain data structures outside the logic, so they can be changed
without touching the alignment code.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts, sets, and strings. load_translation_credentials()
provides a clear error when the translation service is not configured.

RULES:
- SEGMENTATION_SERVICES maps a service name to its punctuation endpoint
- Only languages in SUPPORTED_SEGMENTATION_LANGUAGES can be segmented
- MAX_TRANSLATION_STRINGS is the translation service's per-bundle limit
- Credentials are loaded from a JSON file or .env, never hardcoded
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Segmentation (punctuation) services
# ---------------------------------------------------------------------------

SEGMENTATION_SERVICES: dict[str, str] = {
    "bark": os.getenv("BARK_PUNCTUATOR_URL", "http://bark.phon.ioc.ee/punctuator"),
    "punctuator": os.getenv(
        "PUNCTUATION_SERVICE_URL",
        "https://punctuationservice.mybluemix.net/api/punctext",
    ),
}

DEFAULT_SEGMENTATION_SERVICE = os.getenv("DEFAULT_SEGMENTATION_SERVICE", "bark")

SUPPORTED_SEGMENTATION_LANGUAGES: set[str] = {"en"}
"""Languages the punctuation services can segment (ISO 639-1)."""

DEFAULT_SOURCE_LANGUAGE = os.getenv("DEFAULT_SOURCE_LANGUAGE", "en")
DEFAULT_CASING = os.getenv("DEFAULT_CASING", "verbatim")

HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "120"))

# ---------------------------------------------------------------------------
# Translation bundle service
# ---------------------------------------------------------------------------

MAX_TRANSLATION_STRINGS = 1000
"""Largest number of captions a single translation bundle accepts."""

TRANSLATION_CREDENTIALS_FILE = os.getenv(
    "TRANSLATION_CREDENTIALS_FILE", "g11n-credentials.json"
)


@dataclass(frozen=True)
class TranslationCredentials:
    """Connection details for the translation bundle service.

    RULES:
    - url: service base URL, without a trailing slash
    - instance_id: service instance owning the bundles
    - user_id / password: basic-auth credentials
    """

    url: str
    instance_id: str
    user_id: str
    password: str


def load_translation_credentials(path: str | Path | None = None) -> TranslationCredentials:
    """Load translation service credentials from a JSON file or the environment.

    WHY: The bundle client needs a URL, instance and basic-auth pair. Teams
    usually keep these in the service's downloaded credentials JSON; CI
    provides them as environment variables instead.

    HOW: If ``path`` is given (or the default credentials file exists), read
    it. Both the bare object and the ``{"credentials": {...}}`` wrapper are
    accepted. Otherwise read G11N_URL, G11N_INSTANCE_ID, G11N_USER_ID and
    G11N_PASSWORD.

    RULES:
    - Raises ValueError if the file is not a JSON object or any field is
      missing or empty
    - Never returns placeholder values
    """
    candidate = Path(path) if path else Path(TRANSLATION_CREDENTIALS_FILE)

    if path or candidate.is_file():
        data = json.loads(candidate.read_text(encoding="utf-8"))
        source = data.get("credentials", data) if isinstance(data, dict) else None
        if not isinstance(source, dict):
            raise ValueError(
                "Translation credentials file {} must hold a JSON object".format(candidate)
            )
        values = {
            "url": source.get("url", ""),
            "instance_id": source.get("instanceId", ""),
            "user_id": source.get("userId", ""),
            "password": source.get("password", ""),
        }
    else:
        values = {
            "url": os.getenv("G11N_URL", ""),
            "instance_id": os.getenv("G11N_INSTANCE_ID", ""),
            "user_id": os.getenv("G11N_USER_ID", ""),
            "password": os.getenv("G11N_PASSWORD", ""),
        }

    missing = [key for key, value in values.items() if not str(value).strip()]
    if missing:
        raise ValueError(
            "Translation service credentials incomplete (missing: {}). "
            "Provide {} or set the G11N_* variables in .env.".format(
                ", ".join(missing), TRANSLATION_CREDENTIALS_FILE
            )
        )

    return TranslationCredentials(
        url=str(values["url"]).rstrip("/"),
        instance_id=str(values["instance_id"]),
        user_id=str(values["user_id"]),
        password=str(values["password"]),
    )
