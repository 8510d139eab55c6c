# ============================================================================
# HEARTBEAT CONFIGURATION
# ============================================================================
# STATUS: Core - Caller-owned configuration
# PURPOSE: Service identity, endpoint, listener and dependency list
# CREATED: 17 OCT 2026
# ============================================================================
"""
Heartbeat Configuration

Design:
- Immutable dataclass, passed explicitly to the router and server
- Environment variable overrides via HeartbeatConfig.from_env()
- Dependency lists from the environment are validated with pydantic

Environment:
    HEARTBEAT_SERVICE_NAME     Service name reported as the resource
    HEARTBEAT_ENDPOINT         Endpoint path segment (default: heartbeat)
    HEARTBEAT_HOST             Listener host (default: 0.0.0.0)
    HEARTBEAT_PORT             Listener port, 1024-49151 (default: 8181)
    HEARTBEAT_REQUEST_TIMEOUT  Overall seconds per probe request (optional)
    HEARTBEAT_DEPENDENCIES     JSON list of URL dependencies, e.g.
                               [{"name": "api", "type": "http",
                                 "connection": "https://api/health",
                                 "timeout_seconds": 5}]
    LOG_LEVEL, LOG_FORMAT      Logging level and "json" for JSON output
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from heartbeat.core import CheckDescriptor, describe_dependency

MIN_PORT = 1024
MAX_PORT = 49151


class ConfigurationError(ValueError):
    """Raised when heartbeat configuration is invalid."""


class DependencySettings(BaseModel):
    """One URL dependency as declared in configuration."""
    name: str = Field(..., min_length=1, description="Dependency display name")
    type: str = Field("", description="Free-form dependency kind")
    connection: str = Field(..., description="http or https URL to probe")
    timeout_seconds: float = Field(0.0, ge=0, description="0 applies the default")

    def to_descriptor(self) -> CheckDescriptor:
        return describe_dependency(
            name=self.name,
            kind=self.type,
            connection=self.connection,
            timeout=self.timeout_seconds,
        )


_dependency_list = TypeAdapter(List[DependencySettings])


def parse_dependencies(raw: str) -> Tuple[CheckDescriptor, ...]:
    """
    Parse a JSON dependency list.

    Raises:
        ConfigurationError: If the JSON is malformed or fails validation
    """
    if not raw.strip():
        return ()
    try:
        settings = _dependency_list.validate_json(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid HEARTBEAT_DEPENDENCIES: {e}") from e
    return tuple(s.to_descriptor() for s in settings)


@dataclass(frozen=True)
class HeartbeatConfig:
    """
    Configuration for one heartbeat endpoint.

    Attributes:
        service_name: Reported as name/resource of the heartbeat response
        endpoint_name: Path segment, served at /<endpoint_name>
        host: Listener host for HeartbeatServer
        port: Listener port for HeartbeatServer (1024-49151)
        dependencies: Checks run for every probe request
        request_timeout: Optional overall deadline per probe request
        disconnect_poll_interval: Seconds between client disconnect polls
    """
    service_name: str
    endpoint_name: str = "heartbeat"
    host: str = "0.0.0.0"
    port: int = 8181
    dependencies: Tuple[CheckDescriptor, ...] = field(default_factory=tuple)
    request_timeout: Optional[float] = None
    disconnect_poll_interval: float = 0.25
    log_level: str = "INFO"
    log_format: str = "human"

    def __post_init__(self):
        # Accept any sequence but store a tuple
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "endpoint_name", self.endpoint_name.strip("/"))

    def validate(self) -> "HeartbeatConfig":
        """
        Validate the configuration.

        Raises:
            ConfigurationError: On invalid port, service name or endpoint
        """
        if not self.service_name:
            raise ConfigurationError("missing service name")
        if not self.endpoint_name:
            raise ConfigurationError("missing endpoint name")
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ConfigurationError(
                f"invalid port number {self.port}: must be between {MIN_PORT} and {MAX_PORT}"
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError(f"request timeout must be positive, got {self.request_timeout}")
        return self

    @property
    def path(self) -> str:
        return f"/{self.endpoint_name}"

    @classmethod
    def from_env(cls, **overrides) -> "HeartbeatConfig":
        """Create from environment variables; keyword overrides win."""
        try:
            port = int(os.getenv("HEARTBEAT_PORT", 8181))
            raw_timeout = os.getenv("HEARTBEAT_REQUEST_TIMEOUT")
            request_timeout = float(raw_timeout) if raw_timeout else None
        except ValueError as e:
            raise ConfigurationError(f"Invalid heartbeat environment: {e}") from e

        values = dict(
            service_name=os.getenv("HEARTBEAT_SERVICE_NAME", ""),
            endpoint_name=os.getenv("HEARTBEAT_ENDPOINT", "heartbeat"),
            host=os.getenv("HEARTBEAT_HOST", "0.0.0.0"),
            port=port,
            dependencies=parse_dependencies(os.getenv("HEARTBEAT_DEPENDENCIES", "")),
            request_timeout=request_timeout,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "human").lower(),
        )
        values.update(overrides)
        return cls(**values).validate()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MIN_PORT",
    "MAX_PORT",
    "ConfigurationError",
    "DependencySettings",
    "parse_dependencies",
    "HeartbeatConfig",
]
