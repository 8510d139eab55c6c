# ============================================================================
# HEARTBEAT
# ============================================================================
# STATUS: Package - Dependency health aggregation
# PURPOSE: Liveness/readiness signal from a service's external dependencies
# CREATED: 17 OCT 2026
# ============================================================================
"""
Heartbeat

Aggregates the health of a service's dependencies into one status:
- URL checks probe http/https endpoints
- Function checks run user code with a timeout and fault containment
- Every check runs concurrently; the worst status wins

Architecture:
- Severity, CheckResult, descriptors: heartbeat.core
- CheckScope: cancellation and deadlines (heartbeat.scope)
- check_url / run_check_function: heartbeat.checks
- DependencyCheckExecutor: concurrent execution and aggregation
- create_heartbeat_router: FastAPI probe endpoint
- HeartbeatServer: standalone publish/shutdown

Usage:
    from heartbeat import HeartbeatConfig, UrlCheck, FunctionCheck, create_heartbeat_router

    config = HeartbeatConfig(
        service_name="orders",
        dependencies=[
            UrlCheck(name="payments", url="https://payments/health"),
            FunctionCheck(name="database", fn=check_db, timeout=2.0),
        ],
    )
    app.include_router(create_heartbeat_router(config))
"""

from heartbeat.__version__ import __version__
from heartbeat.core import (
    AggregateResult,
    CheckDescriptor,
    CheckResult,
    FunctionCheck,
    InvalidStatusError,
    Severity,
    UrlCheck,
    describe_dependency,
    status_text,
)
from heartbeat.scope import CheckScope
from heartbeat.checks import check_url, run_check_function
from heartbeat.executor import DependencyCheckExecutor, check_dependencies
from heartbeat.config import ConfigurationError, HeartbeatConfig
from heartbeat.router import create_heartbeat_router
from heartbeat.server import HeartbeatServer, create_app

__all__ = [
    "__version__",
    # Core types
    "Severity",
    "InvalidStatusError",
    "status_text",
    "CheckResult",
    "AggregateResult",
    "CheckDescriptor",
    "UrlCheck",
    "FunctionCheck",
    "describe_dependency",
    "CheckScope",
    # Checks
    "check_url",
    "run_check_function",
    # Executor
    "DependencyCheckExecutor",
    "check_dependencies",
    # Configuration
    "HeartbeatConfig",
    "ConfigurationError",
    # Serving
    "create_heartbeat_router",
    "create_app",
    "HeartbeatServer",
]
