"""
Per-module replace protocol: fetch -> purge same-named collections -> import.

Fetch, lookup and import failures abort the module. Deletion failures are
logged and recorded on the result; the import still runs, which can leave a
duplicate-named collection behind until the next successful round.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from .config import SyncConfig
from .doc_fetcher import DocumentFetcher
from .error_tracker import SyncException
from .logging_manager import get_logger
from .workspace_client import WorkspaceClient

logger = get_logger(__name__)


@dataclass
class ModuleSyncResult:
    """Result of syncing a single module."""
    module: str
    collection_name: str
    status: str  # success, failed
    processing_time: float = 0.0
    deleted_collection_ids: List[str] = field(default_factory=list)
    delete_errors: List[str] = field(default_factory=list)
    error_message: Optional[str] = None


class ModuleSynchronizer:
    """Runs the replace protocol for one module at a time. Safe to share across threads."""

    def __init__(self, fetcher: DocumentFetcher, workspace: WorkspaceClient, config: Optional[SyncConfig] = None):
        self.fetcher = fetcher
        self.workspace = workspace
        self.config = config or SyncConfig.default()

    def sync_module(self, module: str, collection_name: str, workspace_id: str) -> ModuleSyncResult:
        """
        Replace the workspace collection of one module with a fresh import.

        Args:
            module: Module slug, substituted into the doc URL template
            collection_name: Name of the collection to replace
            workspace_id: Target workspace

        Returns:
            ModuleSyncResult with status 'success'; tolerated deletion
            failures are listed in ``delete_errors``

        Raises:
            SyncException: from the fetch, lookup or import step, tagged
            with the module as ``source_id``
        """
        start_time = time.time()
        logger.info(f"Processing module {module}")

        try:
            # Step 1: fetch the document
            document = self.fetcher.fetch(self.config.doc_url(module))

            # Step 2: find existing collections with the same name
            existing_ids = self.workspace.find_collections_by_name(collection_name, workspace_id)
        except SyncException as e:
            self._tag(e, module)
            logger.error(f"Module {module} failed before import: {e}", extra={'details': {'module': module}})
            raise

        # Step 3: best-effort purge
        deleted_ids: List[str] = []
        delete_errors: List[str] = []
        for collection_id in existing_ids:
            logger.info(f"Found existing collection {collection_id}, deleting...")
            try:
                self.workspace.delete_collection(collection_id)
                deleted_ids.append(collection_id)
            except SyncException as e:
                delete_errors.append(f"{collection_id}: {e}")
                logger.warning(
                    f"Error deleting collection {collection_id}: {e}",
                    extra={'details': {'module': module, 'collection_id': collection_id}}
                )

        # Step 4: import
        try:
            self.workspace.import_openapi(document, workspace_id)
        except SyncException as e:
            self._tag(e, module)
            logger.error(f"Import failed for module {module}: {e}", extra={'details': {'module': module}})
            raise

        logger.info(f"Processed module {module}")
        return ModuleSyncResult(
            module=module,
            collection_name=collection_name,
            status='success',
            processing_time=time.time() - start_time,
            deleted_collection_ids=deleted_ids,
            delete_errors=delete_errors,
        )

    @staticmethod
    def _tag(exc: SyncException, module: str) -> None:
        if exc.source_id is None:
            exc.source_id = module
