"""Tests for the catalog models and gateway."""

import json
import threading
from unittest.mock import patch

import httpx
import pytest

from dagflow.catalog import CatalogGateway, CatalogUnavailableError
from dagflow.models import Catalog, CatalogRecord, catalog_key


def _response(payload, status_code: int = 200) -> httpx.Response:
    request = httpx.Request("GET", "https://example.test/nodes.json")
    return httpx.Response(status_code, json=payload, request=request)


class TestCatalogKey:
    """Tests for deriving a catalog key from a node id."""

    def test_strips_instance_suffix(self):
        """Test the suffix after the first separator is ignored."""
        assert catalog_key("trigger_1") == "trigger"
        assert catalog_key("http_request_2") == "http"

    def test_is_case_insensitive(self):
        """Test keys are lower-cased."""
        assert catalog_key("Webhook_7") == "webhook"

    def test_id_without_separator(self):
        """Test an id without separator is its own key."""
        assert catalog_key("scheduler") == "scheduler"

    def test_empty_id(self):
        """Test missing ids give an empty key."""
        assert catalog_key(None) == ""
        assert catalog_key("") == ""


class TestCatalog:
    """Tests for the Catalog model."""

    def test_entry_kinds_flagged(self, catalog):
        """Test records of an entry kind are flagged."""
        assert catalog.lookup("trigger").is_entry_kind is True
        assert catalog.lookup("process").is_entry_kind is False

    def test_lookup_case_insensitive(self, catalog):
        """Test lookup ignores case."""
        assert catalog.lookup("WEBHOOK").name == "webhook"

    def test_resolve_node_id(self, catalog):
        """Test resolving a node id through its catalog key."""
        entry = catalog.resolve("Scheduler_3")
        assert entry is not None
        assert entry.kind == "scheduler"

    def test_unknown_name(self, catalog):
        """Test unknown names resolve to None."""
        assert catalog.lookup("database") is None
        assert catalog.resolve(None) is None

    def test_first_record_wins(self):
        """Test duplicate names keep the first record."""
        catalog = Catalog.from_records(
            [
                CatalogRecord(name="hook", type="webhook"),
                CatalogRecord(name="hook", type="action"),
            ]
        )
        assert catalog.lookup("hook").kind == "webhook"
        assert len(catalog) == 2

    def test_custom_entry_kinds(self):
        """Test the entry kinds are configurable."""
        catalog = Catalog.from_records(
            [CatalogRecord(name="cron", type="timer")],
            entry_kinds={"Timer"},
        )
        assert catalog.lookup("cron").is_entry_kind is True

    def test_records_round_trip(self, catalog, catalog_records):
        """Test records() gives back the source shape."""
        assert catalog.records() == catalog_records

    def test_extra_record_fields_ignored(self):
        """Test unknown fields of a record are ignored."""
        record = CatalogRecord(name="trigger", type="trigger", icon="bolt.svg")
        assert record.name == "trigger"

    def test_null_label_and_type(self):
        """Test a record with null label and type becomes a plain entry."""
        catalog = Catalog.from_records([CatalogRecord(name="note", label=None, type=None)])

        entry = catalog.lookup("note")
        assert entry.label == ""
        assert entry.kind == ""
        assert entry.is_entry_kind is False
        assert catalog.records() == [{"name": "note", "label": "", "type": ""}]


class TestCatalogGateway:
    """Tests for the CatalogGateway."""

    URL = "https://example.test/nodes.json"

    def test_not_loaded_initially(self):
        """Test nothing is fetched on construction."""
        gateway = CatalogGateway(self.URL)
        assert gateway.is_loaded is False

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_loads_once(self, mock_get, catalog_records):
        """Test repeated loads fetch the source a single time."""
        mock_get.return_value = _response(catalog_records)
        gateway = CatalogGateway(self.URL)

        first = gateway.load()
        second = gateway.load()

        assert first is second
        assert mock_get.call_count == 1
        assert gateway.is_loaded is True
        assert len(first) == len(catalog_records)

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_concurrent_first_load_fetches_once(self, mock_get, catalog_records):
        """Test callers racing on the cold load share a single fetch."""
        release = threading.Event()

        def slow_get(*args, **kwargs):
            release.wait(timeout=5)
            return _response(catalog_records)

        mock_get.side_effect = slow_get
        gateway = CatalogGateway(self.URL)
        results = []
        results_lock = threading.Lock()

        def worker():
            catalog = gateway.load()
            with results_lock:
                results.append(catalog)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        release.set()
        for thread in threads:
            thread.join(timeout=5)

        assert mock_get.call_count == 1
        assert len(results) == 8
        assert all(catalog is results[0] for catalog in results)

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_null_fields_do_not_fail_load(self, mock_get, catalog_records):
        """Test one record with null label and type still loads the catalog."""
        mock_get.return_value = _response(catalog_records + [{"name": "note", "label": None, "type": None}])
        gateway = CatalogGateway(self.URL)

        catalog = gateway.load()

        assert len(catalog) == len(catalog_records) + 1
        assert catalog.lookup("note").kind == ""
        assert catalog.lookup("trigger").is_entry_kind is True

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_lookup_loads(self, mock_get, catalog_records):
        """Test lookup triggers the cold load."""
        mock_get.return_value = _response(catalog_records)
        gateway = CatalogGateway(self.URL)

        assert gateway.lookup("webhook").is_entry_kind is True
        assert mock_get.call_count == 1

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_refresh_refetches(self, mock_get, catalog_records):
        """Test refresh replaces the cached catalog."""
        mock_get.side_effect = [
            _response(catalog_records),
            _response(catalog_records + [{"name": "slack", "label": "Slack", "type": "action"}]),
        ]
        gateway = CatalogGateway(self.URL)

        before = gateway.load()
        after = gateway.refresh()

        assert mock_get.call_count == 2
        assert before.lookup("slack") is None
        assert after.lookup("slack") is not None
        assert gateway.load() is after

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_http_error_raises_unavailable(self, mock_get):
        """Test a failed fetch raises CatalogUnavailableError."""
        mock_get.return_value = _response({"error": "nope"}, status_code=500)
        gateway = CatalogGateway(self.URL)

        with pytest.raises(CatalogUnavailableError) as exc_info:
            gateway.load()

        assert exc_info.value.code == "catalog-unavailable"
        assert exc_info.value.source == self.URL
        assert gateway.is_loaded is False

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_connection_error_raises_unavailable(self, mock_get):
        """Test network errors are reported as unavailable."""
        mock_get.side_effect = httpx.ConnectError("connection refused")
        gateway = CatalogGateway(self.URL)

        with pytest.raises(CatalogUnavailableError):
            gateway.load()

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_malformed_payload_raises_unavailable(self, mock_get):
        """Test a payload that is not a list of records is rejected."""
        mock_get.return_value = _response({"nodes": "not a list"})
        gateway = CatalogGateway(self.URL)

        with pytest.raises(CatalogUnavailableError):
            gateway.load()

    @patch("dagflow.catalog.gateway.httpx.get")
    def test_failed_refresh_keeps_catalog(self, mock_get, catalog_records):
        """Test a failed refresh leaves the cached catalog in place."""
        mock_get.side_effect = [
            _response(catalog_records),
            httpx.ConnectError("down"),
        ]
        gateway = CatalogGateway(self.URL)
        loaded = gateway.load()

        with pytest.raises(CatalogUnavailableError):
            gateway.refresh()

        assert gateway.load() is loaded

    def test_local_file_source(self, tmp_path, catalog_records):
        """Test a local JSON file can be the source."""
        path = tmp_path / "nodes.json"
        path.write_text(json.dumps(catalog_records), encoding="utf-8")
        gateway = CatalogGateway(str(path))

        catalog = gateway.load()

        assert catalog.lookup("scheduler").is_entry_kind is True

    def test_missing_local_file(self, tmp_path):
        """Test a missing file is reported as unavailable."""
        gateway = CatalogGateway(str(tmp_path / "missing.json"))

        with pytest.raises(CatalogUnavailableError):
            gateway.load()

    def test_entry_kinds_passed_through(self, tmp_path, catalog_records):
        """Test the gateway's entry kinds drive the flags."""
        path = tmp_path / "nodes.json"
        path.write_text(json.dumps(catalog_records), encoding="utf-8")
        gateway = CatalogGateway(str(path), entry_kinds={"trigger"})

        catalog = gateway.load()

        assert catalog.lookup("trigger").is_entry_kind is True
        assert catalog.lookup("webhook").is_entry_kind is False
