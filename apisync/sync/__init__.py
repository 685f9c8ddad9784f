"""
Sync module for replacing workspace collections with freshly fetched OpenAPI documents.

For every configured module the OpenAPI document is fetched from the
documentation service, all workspace collections with the module's
collection name are deleted, and the document is imported as a new
collection. Modules are synced concurrently and independently.
"""

from .config import SyncConfig, SyncParams

from .error_tracker import (
    ErrorTracker, ErrorSeverity, SyncError, SyncException, ConfigurationError,
    RequestConstructionError, TransportError, UnexpectedStatusError, DecodeError
)

from .http_client import HTTPClient
from .doc_fetcher import DocumentFetcher, canonicalize_document
from .workspace_client import WorkspaceClient, CollectionEntry, parse_collection_entries
from .module_sync import ModuleSynchronizer, ModuleSyncResult
from .orchestrator import SyncOrchestrator, SyncSummary

__all__ = [
    # Configuration
    'SyncConfig',
    'SyncParams',

    # Errors
    'ErrorTracker',
    'ErrorSeverity',
    'SyncError',
    'SyncException',
    'ConfigurationError',
    'RequestConstructionError',
    'TransportError',
    'UnexpectedStatusError',
    'DecodeError',

    # Clients
    'HTTPClient',
    'DocumentFetcher',
    'canonicalize_document',
    'WorkspaceClient',
    'CollectionEntry',
    'parse_collection_entries',

    # Orchestration
    'ModuleSynchronizer',
    'ModuleSyncResult',
    'SyncOrchestrator',
    'SyncSummary',
]
