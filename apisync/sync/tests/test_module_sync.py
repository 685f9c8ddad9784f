#!/usr/bin/env python3
"""
Tests for the per-module replace protocol.
"""

from unittest.mock import Mock, call
import pytest

from ..config import SyncConfig
from ..error_tracker import TransportError, UnexpectedStatusError, DecodeError
from ..module_sync import ModuleSynchronizer, ModuleSyncResult

DOCUMENT = '{\n  "openapi": "3.0.0"\n}'


@pytest.fixture
def calls():
    """Parent mock recording the order of fetcher and workspace calls."""
    parent = Mock()
    parent.fetcher.fetch.return_value = DOCUMENT
    parent.workspace.find_collections_by_name.return_value = []
    parent.workspace.import_openapi.return_value = {}
    return parent


@pytest.fixture
def synchronizer(calls):
    return ModuleSynchronizer(calls.fetcher, calls.workspace, SyncConfig.default())


class TestModuleSynchronizer:
    """Test ModuleSynchronizer.sync_module."""

    def test_no_existing_collections(self, synchronizer, calls):
        result = synchronizer.sync_module("members", "Members Module API", "ws-1")

        assert isinstance(result, ModuleSyncResult)
        assert result.status == 'success'
        assert result.deleted_collection_ids == []
        assert result.delete_errors == []
        calls.workspace.delete_collection.assert_not_called()
        assert calls.mock_calls == [
            call.fetcher.fetch("https://api.members.vivalabs-dev.link/v1/internal-docs"),
            call.workspace.find_collections_by_name("Members Module API", "ws-1"),
            call.workspace.import_openapi(DOCUMENT, "ws-1"),
        ]

    def test_deletes_every_match_before_import(self, synchronizer, calls):
        calls.workspace.find_collections_by_name.return_value = ["a", "b", "c"]

        result = synchronizer.sync_module("brands", "Brands Module API", "ws-1")

        assert result.deleted_collection_ids == ["a", "b", "c"]
        assert calls.mock_calls[2:] == [
            call.workspace.delete_collection("a"),
            call.workspace.delete_collection("b"),
            call.workspace.delete_collection("c"),
            call.workspace.import_openapi(DOCUMENT, "ws-1"),
        ]

    def test_fetch_failure_stops_module(self, synchronizer, calls):
        calls.fetcher.fetch.side_effect = TransportError("making request: timed out")

        with pytest.raises(TransportError) as exc_info:
            synchronizer.sync_module("members", "Members Module API", "ws-1")

        assert exc_info.value.source_id == "members"
        calls.workspace.find_collections_by_name.assert_not_called()
        calls.workspace.delete_collection.assert_not_called()
        calls.workspace.import_openapi.assert_not_called()

    def test_directory_failure_skips_delete_and_import(self, synchronizer, calls):
        calls.workspace.find_collections_by_name.side_effect = UnexpectedStatusError(
            "failed to list collections", status_code=500, body="boom"
        )

        with pytest.raises(UnexpectedStatusError) as exc_info:
            synchronizer.sync_module("classes", "Classes Module API", "ws-1")

        assert "500" in str(exc_info.value)
        assert exc_info.value.source_id == "classes"
        calls.workspace.delete_collection.assert_not_called()
        calls.workspace.import_openapi.assert_not_called()

    def test_delete_failure_is_tolerated(self, synchronizer, calls):
        calls.workspace.find_collections_by_name.return_value = ["a", "b"]
        calls.workspace.delete_collection.side_effect = [
            UnexpectedStatusError("failed to delete collection", status_code=403, body="forbidden"),
            None,
        ]

        result = synchronizer.sync_module("vivapay", "Payments Module API", "ws-1")

        assert result.status == 'success'
        assert result.deleted_collection_ids == ["b"]
        assert len(result.delete_errors) == 1
        assert result.delete_errors[0].startswith("a: ")
        assert "403" in result.delete_errors[0]
        assert calls.workspace.delete_collection.call_count == 2
        calls.workspace.import_openapi.assert_called_once_with(DOCUMENT, "ws-1")

    def test_import_failure_fails_module(self, synchronizer, calls):
        calls.workspace.find_collections_by_name.return_value = ["a"]
        calls.workspace.import_openapi.side_effect = UnexpectedStatusError(
            "import failed with status", status_code=400, body="bad document"
        )

        with pytest.raises(UnexpectedStatusError) as exc_info:
            synchronizer.sync_module("members", "Members Module API", "ws-1")

        assert exc_info.value.source_id == "members"
        calls.workspace.delete_collection.assert_called_once_with("a")

    def test_existing_source_id_is_kept(self, synchronizer, calls):
        calls.fetcher.fetch.side_effect = DecodeError("decoding JSON", source_id="upstream")

        with pytest.raises(DecodeError) as exc_info:
            synchronizer.sync_module("members", "Members Module API", "ws-1")

        assert exc_info.value.source_id == "upstream"

    def test_custom_doc_url_template(self, calls):
        config = SyncConfig(doc_url_template="https://{doc_host}/{module}/openapi.json", doc_host="docs.local")
        synchronizer = ModuleSynchronizer(calls.fetcher, calls.workspace, config)

        synchronizer.sync_module("brands", "Brands Module API", "ws-1")

        calls.fetcher.fetch.assert_called_once_with("https://docs.local/brands/openapi.json")
