"""Tests for health check endpoints."""

from __future__ import annotations

import urllib.request
from unittest.mock import MagicMock, patch

from kubelet_metadata_filter.health import create_combined_wsgi_app, start_metrics_server


def make_environ(path: str) -> dict:
    return {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": path,
        "SCRIPT_NAME": "",
        "QUERY_STRING": "",
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "SERVER_PROTOCOL": "HTTP/1.1",
        "wsgi.url_scheme": "http",
    }


class TestCombinedWsgiApp:
    """Test cases for create_combined_wsgi_app."""

    def test_healthz(self):
        """Test /healthz always answers ok."""
        app = create_combined_wsgi_app(lambda: False)
        start_response = MagicMock()

        body = b"".join(app(make_environ("/healthz"), start_response))

        assert b'"status":"ok"' in body
        assert "200" in start_response.call_args[0][0]

    def test_readyz_ready(self):
        """Test /readyz answers ready once the filter is built."""
        app = create_combined_wsgi_app(lambda: True)
        start_response = MagicMock()

        body = b"".join(app(make_environ("/readyz"), start_response))

        assert b'"status":"ready"' in body
        assert "200" in start_response.call_args[0][0]

    def test_readyz_starting(self):
        """Test /readyz answers 503 while warming up."""
        app = create_combined_wsgi_app(lambda: False)
        start_response = MagicMock()

        body = b"".join(app(make_environ("/readyz"), start_response))

        assert b'"status":"starting"' in body
        assert "503" in start_response.call_args[0][0]

    def test_content_type_is_json(self):
        """Test that content type is application/json."""
        app = create_combined_wsgi_app()
        start_response = MagicMock()

        app(make_environ("/healthz"), start_response)

        headers = dict(start_response.call_args[0][1])
        assert headers["Content-Type"].startswith("application/json")

    def test_other_paths_go_to_prometheus(self):
        """Test /metrics is served by the prometheus app."""
        with patch("kubelet_metadata_filter.health.make_wsgi_app") as mock_make_app:
            metrics_app = MagicMock(return_value=[b"metrics"])
            mock_make_app.return_value = metrics_app
            app = create_combined_wsgi_app()

            result = app(make_environ("/metrics"), MagicMock())

        assert result == [b"metrics"]
        metrics_app.assert_called_once()


class TestStartMetricsServer:
    """Test cases for start_metrics_server."""

    def test_serves_health_from_thread(self):
        """Test the server answers on an ephemeral port."""
        server = start_metrics_server(0, create_combined_wsgi_app())
        try:
            with urllib.request.urlopen(f"http://127.0.0.1:{server.server_port}/healthz", timeout=5) as response:
                assert response.status == 200
                assert b'"status":"ok"' in response.read()
        finally:
            server.shutdown()
