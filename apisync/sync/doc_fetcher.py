"""
OpenAPI Document Fetcher.

Retrieves a module's OpenAPI document from the documentation service and
returns it in canonical form: keys sorted at every level, two-space
indentation. Identical remote content always yields an identical string, so
import payloads do not depend on the source's field ordering.
"""

import json
from typing import Any, Optional

from ..config import DEFAULT_TIMEOUT_SECONDS
from .http_client import HTTPClient
from .logging_manager import get_logger

logger = get_logger(__name__)


def canonicalize_document(data: Any) -> str:
    """
    Serialize a decoded JSON document deterministically.

    Args:
        data: Decoded JSON value (object, array or scalar)

    Returns:
        JSON string with sorted keys and two-space indentation
    """
    return json.dumps(data, sort_keys=True, indent=2, ensure_ascii=False)


class DocumentFetcher:
    """Fetches module documents with the documentation service key."""

    def __init__(self, doc_api_key: str, timeout: float = DEFAULT_TIMEOUT_SECONDS, http_client: Optional[HTTPClient] = None):
        self.http = http_client or HTTPClient(doc_api_key, timeout=timeout, credential="doc-api-key")

    def fetch(self, url: str) -> str:
        """
        Fetch a document and return its canonical serialization.

        Args:
            url: Fully formed documentation endpoint of one module

        Returns:
            Canonical JSON string

        Raises:
            UnexpectedStatusError: non-200 status (status code and body attached)
            DecodeError: 200 with a body that is not JSON
            TransportError, RequestConstructionError
        """
        logger.info(f"Fetching document from {url}")
        response = self.http.request("GET", url, operation="unexpected status")
        data = self.http.decode_json(response, "decoding JSON")
        document = canonicalize_document(data)
        logger.info(f"Fetched {len(document)} characters from {url}")
        return document

    def close(self) -> None:
        self.http.close()
