# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# STATUS: Tests - Heartbeat configuration
# PURPOSE: Verify validation rules and environment loading
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

import json

import pytest

from heartbeat.config import (
    ConfigurationError,
    HeartbeatConfig,
    parse_dependencies,
)
from heartbeat.core import UrlCheck


class TestValidate:

    @pytest.mark.parametrize("kwargs", [
        {"port": 1023},
        {"port": 49152},
        {"service_name": ""},
        {"endpoint_name": ""},
        {"endpoint_name": "/"},
        {"request_timeout": 0},
    ])
    def test_invalid(self, kwargs):
        values = {"service_name": "unit", "endpoint_name": "heartbeat", "port": 8181}
        values.update(kwargs)
        with pytest.raises(ConfigurationError):
            HeartbeatConfig(**values).validate()

    @pytest.mark.parametrize("port", [1024, 8181, 49151])
    def test_valid_ports(self, port):
        config = HeartbeatConfig(service_name="unit", port=port).validate()
        assert config.port == port

    def test_endpoint_slashes_stripped(self):
        config = HeartbeatConfig(service_name="unit", endpoint_name="/health/")
        assert config.endpoint_name == "health"
        assert config.path == "/health"

    def test_dependencies_stored_as_tuple(self):
        deps = [UrlCheck(name="a", url="http://a")]
        config = HeartbeatConfig(service_name="unit", dependencies=deps)
        assert config.dependencies == tuple(deps)


class TestParseDependencies:

    def test_empty(self):
        assert parse_dependencies("") == ()
        assert parse_dependencies("  ") == ()

    def test_url_dependencies(self):
        raw = json.dumps([
            {"name": "Golang Site", "type": "Website", "connection": "https://golang.org/"},
            {"name": "api", "connection": "http://api/health", "timeout_seconds": 2.5},
        ])

        deps = parse_dependencies(raw)

        assert deps == (
            UrlCheck(name="Golang Site", kind="Website", url="https://golang.org/"),
            UrlCheck(name="api", url="http://api/health", timeout=2.5),
        )

    @pytest.mark.parametrize("raw", [
        "not json",
        '{"name": "x"}',
        '[{"name": "x"}]',
        '[{"name": "", "connection": "http://x"}]',
        '[{"name": "x", "connection": "http://x", "timeout_seconds": -1}]',
    ])
    def test_invalid(self, raw):
        with pytest.raises(ConfigurationError):
            parse_dependencies(raw)


class TestFromEnv:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("HEARTBEAT_SERVICE_NAME", "orders")
        monkeypatch.setenv("HEARTBEAT_ENDPOINT", "healthcheck")
        monkeypatch.setenv("HEARTBEAT_PORT", "9000")
        monkeypatch.setenv("HEARTBEAT_REQUEST_TIMEOUT", "15")
        monkeypatch.setenv(
            "HEARTBEAT_DEPENDENCIES",
            '[{"name": "api", "connection": "http://api/health"}]',
        )
        monkeypatch.setenv("LOG_FORMAT", "JSON")

        config = HeartbeatConfig.from_env()

        assert config.service_name == "orders"
        assert config.path == "/healthcheck"
        assert config.port == 9000
        assert config.request_timeout == 15.0
        assert config.dependencies == (UrlCheck(name="api", url="http://api/health"),)
        assert config.log_format == "json"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("HEARTBEAT_SERVICE_NAME", "orders")
        config = HeartbeatConfig.from_env(port=9100)
        assert config.port == 9100

    def test_missing_service_name(self, monkeypatch):
        monkeypatch.delenv("HEARTBEAT_SERVICE_NAME", raising=False)
        with pytest.raises(ConfigurationError):
            HeartbeatConfig.from_env()

    def test_bad_port(self, monkeypatch):
        monkeypatch.setenv("HEARTBEAT_SERVICE_NAME", "orders")
        monkeypatch.setenv("HEARTBEAT_PORT", "eighty")
        with pytest.raises(ConfigurationError):
            HeartbeatConfig.from_env()
