"""
Workspace API client: list, delete and import collections.

The list response is loosely typed; entries are parsed one at a time into
``CollectionEntry`` models whose fields are all optional, and any entry
without a usable id and name is skipped instead of failing the query.
"""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, ValidationError

from ..config import DEFAULT_PM_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from .http_client import HTTPClient
from .logging_manager import get_logger

logger = get_logger(__name__)


class CollectionEntry(BaseModel):
    """One entry of the ``collections`` list; unknown fields are ignored."""
    model_config = ConfigDict(extra='ignore')

    id: Optional[str] = None
    name: Optional[str] = None


class CollectionList(BaseModel):
    """Top-level list response. Entries stay raw until parsed individually."""
    model_config = ConfigDict(extra='ignore')

    collections: Optional[List[Any]] = None


def parse_collection_entries(payload: Any) -> List[CollectionEntry]:
    """
    Extract well-formed collection entries from a list response.

    Returns an empty list when the payload has no ``collections`` list.
    """
    if not isinstance(payload, dict):
        return []
    try:
        collection_list = CollectionList.model_validate(payload)
    except ValidationError:
        return []

    entries = []
    for raw in collection_list.collections or []:
        if not isinstance(raw, dict):
            continue
        try:
            entry = CollectionEntry.model_validate(raw)
        except ValidationError:
            logger.debug(f"Skipping malformed collection entry: {raw!r}")
            continue
        if entry.id is None or entry.name is None:
            continue
        entries.append(entry)
    return entries


class WorkspaceClient:
    """Collection directory, remover and importer for one workspace API."""

    def __init__(self, pm_api_key: str, base_url: str = DEFAULT_PM_BASE_URL, timeout: float = DEFAULT_TIMEOUT_SECONDS, http_client: Optional[HTTPClient] = None):
        self.base_url = base_url.rstrip('/')
        self.http = http_client or HTTPClient(pm_api_key, timeout=timeout, credential="pm-api-key")

    def find_collections_by_name(self, name: str, workspace_id: str) -> List[str]:
        """
        Find the ids of all collections in a workspace with exactly this name.

        Args:
            name: Collection name, matched case-sensitively
            workspace_id: Workspace to search

        Returns:
            Matching collection ids, possibly empty

        Raises:
            UnexpectedStatusError: non-200 status
            DecodeError: body is not JSON
            TransportError, RequestConstructionError
        """
        url = f"{self.base_url}/collections"
        response = self.http.request(
            "GET", url,
            operation="failed to list collections",
            params={"workspace": workspace_id},
        )
        logger.info(f"Collections response: {response.text}")
        payload = self.http.decode_json(response, "parsing response")

        ids = [entry.id for entry in parse_collection_entries(payload) if entry.name == name]
        logger.info(f"Found {len(ids)} collection(s) named '{name}'", extra={'details': {'workspace_id': workspace_id, 'collection_ids': ids}})
        return ids

    def delete_collection(self, collection_id: str) -> None:
        """
        Delete one collection. Both 200 and 204 count as success.

        Raises:
            UnexpectedStatusError: any other status
            TransportError, RequestConstructionError
        """
        url = f"{self.base_url}/collections/{quote(collection_id, safe='')}"
        response = self.http.request(
            "DELETE", url,
            operation="failed to delete collection",
            accepted=(200, 204),
        )
        logger.info(f"Delete response (status {response.status_code}): {response.text}")
        logger.info(f"Successfully deleted collection: {collection_id}")

    def import_openapi(self, document: str, workspace_id: str) -> Optional[Dict[str, Any]]:
        """
        Import an OpenAPI document as a new collection.

        Args:
            document: Document serialized as a string
            workspace_id: Target workspace

        Returns:
            The parsed response body when it is JSON, otherwise None

        Raises:
            UnexpectedStatusError: non-200 status
            TransportError, RequestConstructionError
        """
        payload = {
            "type": "string",
            "input": document,
        }
        url = f"{self.base_url}/import/openapi"
        response = self.http.request(
            "POST", url,
            operation="import failed with status",
            params={"workspace": workspace_id},
            headers={"Content-Type": "application/json"},
            data=json.dumps(payload),
        )
        logger.info(f"Import successful: {response.text}")
        try:
            return response.json()
        except ValueError:
            return None

    def close(self) -> None:
        self.http.close()
