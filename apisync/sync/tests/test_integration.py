"""
Live integration test against the real documentation service and workspace API.

Skipped unless RUN_INTEGRATION_TESTS is set together with TEST_DOC_API_KEY,
TEST_PM_API_KEY and TEST_PM_WORKSPACE_ID.
"""

import os
import pytest

from ..config import SyncConfig, SyncParams
from ..orchestrator import SyncOrchestrator

pytestmark = pytest.mark.skipif(
    not os.getenv("RUN_INTEGRATION_TESTS"),
    reason="Set RUN_INTEGRATION_TESTS=1 to run live integration tests",
)


@pytest.fixture
def params():
    params = SyncParams(
        doc_api_key=os.getenv("TEST_DOC_API_KEY"),
        pm_api_key=os.getenv("TEST_PM_API_KEY"),
        pm_workspace_id=os.getenv("TEST_PM_WORKSPACE_ID"),
    )
    if not (params.doc_api_key and params.pm_api_key and params.pm_workspace_id):
        pytest.skip("Requires TEST_DOC_API_KEY, TEST_PM_API_KEY and TEST_PM_WORKSPACE_ID")
    return params


def test_live_sync(params):
    config = SyncConfig.default()
    orchestrator = SyncOrchestrator.from_params(params, config)
    try:
        summary = orchestrator.run_sync(params.pm_workspace_id)
    finally:
        orchestrator.cleanup()

    orchestrator.print_summary(summary)
    assert summary.total_modules == len(config.modules)
    assert summary.successful_modules + summary.failed_modules == summary.total_modules
