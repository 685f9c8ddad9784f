"""
Sync Orchestration across all configured modules.

Every module in the Module Set is synced by its own worker thread:
- all workers are submitted before any is awaited
- the orchestrator waits for every worker, nothing is cancelled
- a failing module never affects the others
- every failure is logged and recorded in the ErrorTracker; ``sync_all``
  raises the first failure in Module Set order, ``run_sync`` only reports
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .config import SyncConfig, SyncParams
from .doc_fetcher import DocumentFetcher
from .error_tracker import ErrorTracker, ErrorSeverity, SyncException
from .logging_manager import LoggingManager
from .module_sync import ModuleSynchronizer, ModuleSyncResult
from .workspace_client import WorkspaceClient

logger = LoggingManager.get_logger(__name__)


@dataclass
class SyncSummary:
    """Summary of the entire sync operation."""
    total_modules: int
    successful_modules: int
    failed_modules: int
    total_processing_time: float
    errors: List[Dict[str, Any]]
    results: List[ModuleSyncResult]
    error_count: int = 0
    warning_count: int = 0


class SyncOrchestrator:
    """
    Fans the module replace protocol out over the Module Set.

    The synchronizer (and the HTTP sessions behind it) is shared by all
    workers; the only state written by workers is the error tracker.
    The tracker is cleared at the start of every run.
    """

    def __init__(self, synchronizer: ModuleSynchronizer, config: Optional[SyncConfig] = None):
        """
        Initialize the sync orchestrator.

        Args:
            synchronizer: Runs the per-module protocol
            config: Module Set and processing settings
        """
        self.synchronizer = synchronizer
        self.config = config or synchronizer.config
        self.error_tracker = ErrorTracker()

    @classmethod
    def from_params(cls, params: SyncParams, config: Optional[SyncConfig] = None) -> 'SyncOrchestrator':
        """Build the fetcher, workspace client and synchronizer from credentials."""
        config = config or SyncConfig.default()
        fetcher = DocumentFetcher(params.doc_api_key, timeout=config.timeout)
        workspace = WorkspaceClient(params.pm_api_key, base_url=config.pm_base_url, timeout=config.timeout)
        return cls(ModuleSynchronizer(fetcher, workspace, config), config)

    def run_sync(self, workspace_id: str) -> SyncSummary:
        """
        Sync every module and summarize. Module failures do not raise.

        Args:
            workspace_id: Target workspace

        Returns:
            SyncSummary with one result per module, in Module Set order
        """
        summary, _ = self._run(workspace_id)
        return summary

    def sync_all(self, workspace_id: str) -> SyncSummary:
        """
        Sync every module, raising if any of them failed.

        Raises:
            Exception: the failure of the first failed module in Module Set
            order; the others are logged and in ``error_tracker``
        """
        summary, failures = self._run(workspace_id)
        if failures:
            module, exc = failures[0]
            if len(failures) > 1:
                others = ', '.join(m for m, _ in failures[1:])
                logger.error(f"{len(failures)} modules failed; raising error of {module}, also failed: {others}")
            raise exc
        return summary

    def _run(self, workspace_id: str) -> Tuple[SyncSummary, List[Tuple[str, Exception]]]:
        start_time = time.time()
        self.error_tracker.clear()
        modules = self.config.modules
        logger.info(f"Syncing {len(modules)} modules into workspace {workspace_id}")

        results: Dict[str, ModuleSyncResult] = {}
        failures: Dict[str, Exception] = {}

        with ThreadPoolExecutor(max_workers=self.config.worker_count()) as executor:
            future_to_module = {
                executor.submit(self.synchronizer.sync_module, module, collection_name, workspace_id): module
                for module, collection_name in modules.items()
            }

            for future in as_completed(future_to_module):
                module = future_to_module[future]
                try:
                    result = future.result()
                    results[module] = result
                    for delete_error in result.delete_errors:
                        self.error_tracker.report(
                            f"Failed to delete stale collection {delete_error}",
                            source_id=module,
                            severity=ErrorSeverity.WARNING,
                        )
                    logger.info(f"{module}: imported as '{result.collection_name}' ({len(result.deleted_collection_ids)} replaced)")
                except SyncException as e:
                    failures[module] = e
                    self.error_tracker.report_exception(e, severity=ErrorSeverity.ERROR, details={'module': module})
                    results[module] = self._failed_result(module, modules[module], e)
                except Exception as e:
                    failures[module] = e
                    self.error_tracker.report(
                        f"Unexpected error syncing module {module}: {e}",
                        source_id=module,
                        severity=ErrorSeverity.ERROR,
                        details={'exception': repr(e)},
                    )
                    logger.error(f"Unexpected error syncing module {module}: {e}", exc_info=True)
                    results[module] = self._failed_result(module, modules[module], e)

        ordered_results = [results[module] for module in modules]
        ordered_failures = [(module, failures[module]) for module in modules if module in failures]

        report = self.error_tracker.generate_report()
        summary = SyncSummary(
            total_modules=len(ordered_results),
            successful_modules=sum(1 for r in ordered_results if r.status == 'success'),
            failed_modules=len(ordered_failures),
            total_processing_time=time.time() - start_time,
            errors=report["errors"],
            results=ordered_results,
            error_count=report["error_count"],
            warning_count=report["warning_count"],
        )
        return summary, ordered_failures

    @staticmethod
    def _failed_result(module: str, collection_name: str, exc: Exception) -> ModuleSyncResult:
        return ModuleSyncResult(
            module=module,
            collection_name=collection_name,
            status='failed',
            error_message=str(exc),
        )

    def print_summary(self, summary: SyncSummary):
        """Log the sync summary in a readable form."""
        logger.info("=" * 60)
        logger.info("SYNC OPERATION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Total Modules: {summary.total_modules}")
        logger.info(f"Successful: {summary.successful_modules}")
        logger.info(f"Failed: {summary.failed_modules}")
        logger.info(f"Total Processing Time: {summary.total_processing_time:.2f}s")

        for result in summary.results:
            logger.info(
                f"[{result.status}] {result.module} -> '{result.collection_name}': "
                f"{len(result.deleted_collection_ids)} replaced, "
                f"{result.processing_time:.2f}s"
            )
            if result.error_message:
                logger.info(f"   Error: {result.error_message}")
            for delete_error in result.delete_errors:
                logger.info(f"   Delete error: {delete_error}")

        if summary.errors:
            logger.info(f"ERRORS: {summary.error_count} errors, {summary.warning_count} warnings")
            for error in summary.errors:
                logger.error(f"  - [{error['severity']}] {error['source_id']}: {error['message']}")
                if error["recovery_suggestion"]:
                    logger.error(f"    Suggestion: {error['recovery_suggestion']}")
        logger.info("=" * 60)

    def cleanup(self):
        """Close the HTTP sessions."""
        self.synchronizer.fetcher.close()
        self.synchronizer.workspace.close()
