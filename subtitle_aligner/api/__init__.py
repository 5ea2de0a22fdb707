"""Service client package: async HTTP interfaces to remote collaborators.

WHY: Sentence segmentation (punctuation) and subtitle translation run as
remote services. This package keeps all HTTP details behind two client
classes so the pipeline and CLI only deal with text and records.

HOW: Uses httpx.AsyncClient. Each client is an async context manager that
the caller creates and passes explicitly; there are no module-level client
instances.

RULES:
- All HTTP calls go through SegmentationClient or TranslationClient
- Non-2xx responses raise the client's typed service error
- Clients never retry; retry policy belongs to the caller
"""

from subtitle_aligner.api.segmentation import SegmentationClient, SegmentationServiceError
from subtitle_aligner.api.translation import TranslationClient, TranslationServiceError

__all__ = [
    "SegmentationClient",
    "SegmentationServiceError",
    "TranslationClient",
    "TranslationServiceError",
]
