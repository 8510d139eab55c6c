# ============================================================================
# HEARTBEAT ROUTER
# ============================================================================
# STATUS: Infrastructure - FastAPI heartbeat endpoint
# PURPOSE: Liveness/readiness probe backed by the dependency executor
# CREATED: 17 OCT 2026
# ============================================================================
"""
Heartbeat Router

Endpoint:
    GET /<endpoint_name> - Check every configured dependency and report

Response Codes:
    200 - OK, Warning or NotSet (still operational)
    503 - Critical (service unavailable)

The execution scope for a request is cancelled when the client
disconnects, and expires after config.request_timeout when one is set.
"""

import asyncio
import socket
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from heartbeat.config import HeartbeatConfig
from heartbeat.core import AggregateResult, CheckResult, Severity, status_text
from heartbeat.executor import DependencyCheckExecutor
from heartbeat.logging import get_logger, log_context
from heartbeat.scope import CheckScope

logger = get_logger(__name__)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class DependencyStatus(BaseModel):
    """Status of one dependency."""
    status: str = Field(..., description="NotSet, OK, Warning or Critical")
    name: str
    resource: str
    request_duration_ms: float
    http_status_code: int = Field(0, description="0 for function checks")
    message: str = ""

    @classmethod
    def from_result(cls, result: CheckResult) -> "DependencyStatus":
        return cls(**result.to_dict())


class HeartbeatResponse(BaseModel):
    """Heartbeat document returned by the probe endpoint."""
    status: str
    name: str
    resource: str
    machine: str = Field("", description="Host name, empty if unavailable")
    utc_DateTime: datetime
    request_duration_ms: float
    message: str = ""
    dependencies: List[DependencyStatus] = Field(default_factory=list)


def status_to_http_code(status: Severity) -> int:
    """Map overall severity to an HTTP status code."""
    if status == Severity.CRITICAL:
        return 503
    return 200


def machine_name() -> str:
    try:
        return socket.gethostname()
    except OSError:
        return ""


def summarize(result: AggregateResult) -> str:
    if not result.results:
        return "no dependencies configured"
    return (
        f"{len(result.results)} dependencies checked: "
        f"{result.count(Severity.OK)} ok, "
        f"{result.count(Severity.WARNING)} warning, "
        f"{result.count(Severity.CRITICAL)} critical"
    )


async def _cancel_on_disconnect(request: Request, scope: CheckScope, interval: float) -> None:
    """Cancel scope once the client has gone away."""
    while not scope.done:
        await asyncio.sleep(interval)
        if await request.is_disconnected():
            logger.warning("Client disconnected, cancelling dependency checks")
            scope.cancel()
            return


def create_heartbeat_router(
    config: HeartbeatConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> APIRouter:
    """
    Build the heartbeat router for a configuration.

    Args:
        config: Service identity, endpoint and dependencies
        transport: Optional httpx transport for URL checks
    """
    router = APIRouter(tags=["Heartbeat"])
    executor = DependencyCheckExecutor(transport=transport)

    @router.get(config.path, response_model=HeartbeatResponse)
    async def heartbeat(request: Request):
        """
        Check every dependency and report the worst status.

        Returns 503 when any dependency is Critical.
        """
        started = time.perf_counter()
        checked_at = datetime.now(timezone.utc)
        machine = machine_name()

        scope = CheckScope(timeout=config.request_timeout)
        watcher = asyncio.create_task(
            _cancel_on_disconnect(request, scope, config.disconnect_poll_interval)
        )

        with log_context(service=config.service_name, request_id=uuid.uuid4().hex[:12]):
            try:
                result = await executor.execute(config.dependencies, scope)
            finally:
                watcher.cancel()

            body = HeartbeatResponse(
                status=status_text(result.status),
                name=config.service_name,
                resource=config.service_name,
                machine=machine,
                utc_DateTime=checked_at,
                request_duration_ms=round((time.perf_counter() - started) * 1000, 3),
                message=summarize(result),
                dependencies=[DependencyStatus.from_result(r) for r in result.results],
            )

            log = logger.warning if result.status == Severity.CRITICAL else logger.info
            log(f"Heartbeat {body.status}: {body.message} ({body.request_duration_ms}ms)")

        return JSONResponse(
            status_code=status_to_http_code(result.status),
            content=body.model_dump(mode="json"),
        )

    return router


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DependencyStatus",
    "HeartbeatResponse",
    "status_to_http_code",
    "machine_name",
    "summarize",
    "create_heartbeat_router",
]
