# ============================================================================
# HEARTBEAT SERVER TESTS
# ============================================================================
# STATUS: Tests - Standalone publish/shutdown lifecycle
# PURPOSE: Verify the app factory and the background uvicorn listener
# CREATED: 17 OCT 2026
# ============================================================================
"""
Heartbeat Server Tests

The lifecycle test binds a real localhost port.

Run with:
    pytest tests/test_server.py -v
"""

import random
import socket

import httpx
import pytest
from fastapi.testclient import TestClient

from heartbeat.config import ConfigurationError, HeartbeatConfig
from heartbeat.core import CheckResult, FunctionCheck
from heartbeat.server import HeartbeatServer, create_app


def _free_port() -> int:
    """Find an unused localhost port inside the allowed range."""
    for _ in range(50):
        port = random.randint(20000, 40000)
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.bind(("127.0.0.1", port))
            except OSError:
                continue
            return port
    pytest.skip("no free port available")


class TestCreateApp:

    def test_serves_configured_endpoint(self):
        config = HeartbeatConfig(
            service_name="unit",
            endpoint_name="status",
            dependencies=[FunctionCheck(name="db", fn=lambda: CheckResult.ok())],
        )

        client = TestClient(create_app(config))
        response = client.get("/status")

        assert response.status_code == 200
        assert response.json()["dependencies"][0]["name"] == "db"

    def test_invalid_config_rejected(self):
        with pytest.raises(ConfigurationError):
            create_app(HeartbeatConfig(service_name="unit", port=80))


class TestHeartbeatServer:

    def test_publish_and_shutdown(self):
        port = _free_port()
        server = HeartbeatServer(
            HeartbeatConfig(service_name="unit", host="127.0.0.1", port=port, log_level="WARNING")
        )

        server.publish()
        try:
            assert server.started
            with httpx.Client(trust_env=False, timeout=5) as client:
                response = client.get(f"http://127.0.0.1:{port}/heartbeat")
            assert response.status_code == 200
            assert response.json()["resource"] == "unit"

            with pytest.raises(RuntimeError):
                server.publish()
        finally:
            server.shutdown()

        assert not server.started

    def test_shutdown_without_publish_is_noop(self):
        server = HeartbeatServer(HeartbeatConfig(service_name="unit"))
        server.shutdown()
        assert not server.started

    def test_invalid_config_rejected(self):
        with pytest.raises(ConfigurationError):
            HeartbeatServer(HeartbeatConfig(service_name="unit", port=49152))
