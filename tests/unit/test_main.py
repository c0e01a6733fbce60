"""Tests for the JSON lines entry point."""

from __future__ import annotations

import io
import json
from unittest.mock import MagicMock, patch

from kubelet_metadata_filter import main as main_module
from kubelet_metadata_filter.main import main, read_records, run

CONTAINER_ID = "49095a2894da899d3b327c5fde1e056a81376cc9a8f8b09a195f2a92bceed459"
TAG = f"var.log.containers.my-app-98rqc_my-namespace_main-{CONTAINER_ID}.log"


class TestReadRecords:
    """Test cases for read_records."""

    def test_skips_blank_and_malformed_lines(self):
        """Test only JSON objects are yielded."""
        stream = io.StringIO('{"a": 1}\n\nnot json\n[1, 2]\n{"b": 2}\n')
        assert list(read_records(stream)) == [{"a": 1}, {"b": 2}]


class TestRun:
    """Test cases for run."""

    def test_writes_filtered_records(self):
        """Test every record is written as one JSON line."""
        log_filter = MagicMock()
        log_filter.filter_stream.side_effect = lambda records: ({**r, "seen": True} for r in records)
        stdout = io.StringIO()

        count = run(log_filter, io.StringIO('{"tag": "x"}\n{"tag": "y"}\n'), stdout)

        assert count == 2
        lines = stdout.getvalue().splitlines()
        assert [json.loads(line) for line in lines] == [
            {"tag": "x", "seen": True},
            {"tag": "y", "seen": True},
        ]


class TestMain:
    """Test cases for main."""

    def test_invalid_configuration(self, monkeypatch):
        """Test bad configuration exits with status 2."""
        monkeypatch.setenv("KUBELET_POD_CACHE_SIZE", "lots")
        assert main([], stdin=io.StringIO(), stdout=io.StringIO()) == 2

    def test_dry_run_validates_only(self, monkeypatch):
        """Test --dry-run builds the filter without reading input or fetching."""
        monkeypatch.setenv("METRICS_PORT", "0")
        monkeypatch.setenv("KUBELET_METRICS_SINK", "none")
        with patch.object(main_module, "create_filter_from_config") as mock_create:
            stdout = io.StringIO()
            assert main(["--dry-run"], stdin=io.StringIO('{"tag": "x"}\n'), stdout=stdout) == 0

        assert mock_create.call_args[0][0].dry_run is True
        assert stdout.getvalue() == ""

    def test_unloadable_sink_exits(self, monkeypatch):
        """Test an invalid metrics sink exits with status 2."""
        monkeypatch.setenv("METRICS_PORT", "0")
        monkeypatch.setenv("KUBELET_METRICS_SINK", "no_such_module_for_main:client")
        assert main(["--dry-run"], stdin=io.StringIO(), stdout=io.StringIO()) == 2

    def test_filters_stdin_to_stdout(self, monkeypatch, tmp_path):
        """Test records are enriched end to end with a stubbed kubelet."""
        token = tmp_path / "token"
        token.write_text("TOKEN")
        monkeypatch.setenv("METRICS_PORT", "0")
        monkeypatch.setenv("KUBELET_METRICS_SINK", "none")
        monkeypatch.setenv("KUBELET_TOKEN_PATH", str(token))

        body = {"items": [{"metadata": {"name": "my-app-98rqc", "namespace": "my-namespace", "labels": {"la": "bel"}}}]}
        response = MagicMock(status_code=200, text=json.dumps(body))
        response.json.return_value = body

        stdin = io.StringIO(json.dumps({"tag": TAG, "log": "hello"}) + "\n")
        stdout = io.StringIO()
        with patch("requests.Session.get", return_value=response) as mock_get:
            assert main([], stdin=stdin, stdout=stdout) == 0

        assert mock_get.call_count == 1
        record = json.loads(stdout.getvalue())
        assert record["log"] == "hello"
        assert "tag" not in record
        assert record["kubernetes"]["labels"] == {"la": "bel"}
        assert record["docker"]["container_id"] == CONTAINER_ID

    def test_starts_and_stops_metrics_server(self, monkeypatch):
        """Test the metrics server is started when a port is configured."""
        monkeypatch.setenv("METRICS_PORT", "9999")
        monkeypatch.setenv("KUBELET_METRICS_SINK", "none")
        server = MagicMock()
        with patch.object(main_module.health, "start_metrics_server", return_value=server) as mock_start, \
                patch.object(main_module, "create_filter_from_config"):
            assert main(["--dry-run"], stdin=io.StringIO(), stdout=io.StringIO()) == 0

        assert mock_start.call_args[0][0] == 9999
        server.shutdown.assert_called_once()

    def test_continues_when_metrics_port_is_taken(self, monkeypatch):
        """Test a metrics server bind failure does not stop the pipe."""
        monkeypatch.setenv("METRICS_PORT", "9999")
        monkeypatch.setenv("KUBELET_METRICS_SINK", "none")
        log_filter = MagicMock()
        log_filter.filter_stream.side_effect = lambda records: iter(list(records))
        stdout = io.StringIO()
        with patch.object(
            main_module.health, "start_metrics_server", side_effect=OSError("Address already in use")
        ), patch.object(main_module, "create_filter_from_config", return_value=log_filter):
            assert main([], stdin=io.StringIO('{"log": "hi"}\n'), stdout=stdout) == 0

        assert json.loads(stdout.getvalue()) == {"log": "hi"}

    def test_ready_once_filter_is_built(self, monkeypatch):
        """Test readiness flips only after the filter (and its warm-up) is constructed."""
        monkeypatch.setenv("METRICS_PORT", "9999")
        monkeypatch.setenv("KUBELET_METRICS_SINK", "none")
        captured = {}

        def create_app(is_ready):
            captured["is_ready"] = is_ready
            return MagicMock()

        def create_filter(config):
            captured["during_build"] = captured["is_ready"]()
            return MagicMock()

        with patch.object(main_module.health, "create_combined_wsgi_app", side_effect=create_app), \
                patch.object(main_module.health, "start_metrics_server", return_value=MagicMock()), \
                patch.object(main_module, "create_filter_from_config", side_effect=create_filter):
            assert main(["--dry-run"], stdin=io.StringIO(), stdout=io.StringIO()) == 0

        assert captured["during_build"] is False
        assert captured["is_ready"]() is True
