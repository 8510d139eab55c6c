# ============================================================================
# DEPENDENCY CHECK EXECUTOR
# ============================================================================
# STATUS: Core - Concurrent dependency check aggregation
# PURPOSE: Run every dependency check concurrently and reduce to one status
# CREATED: 17 OCT 2026
# ============================================================================
"""
Dependency Check Executor

Executes a batch of check descriptors with:
- One asyncio task per descriptor (no worker pool, no tiers)
- Results written into a pre-sized slot per descriptor, so output order
  always matches input order
- 'Worst wins' reduction guarded by a lock
- No early termination: every dependency is checked to completion

The executor holds no state between invocations.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

import httpx

from heartbeat.core import (
    AggregateResult,
    CheckDescriptor,
    CheckResult,
    FunctionCheck,
    Severity,
    UrlCheck,
)
from heartbeat.checks import check_url, run_check_function
from heartbeat.logging import log_context
from heartbeat.scope import CheckScope

logger = logging.getLogger(__name__)


class DependencyCheckExecutor:
    """
    Executes dependency checks concurrently.

    Attributes:
        transport: Optional httpx transport handed to every URL check
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport

    async def execute(
        self,
        descriptors: Sequence[CheckDescriptor],
        scope: Optional[CheckScope] = None,
    ) -> AggregateResult:
        """
        Check every descriptor and aggregate.

        Args:
            descriptors: Dependencies to check, in output order
            scope: Caller scope; cancelling it ends outstanding checks

        Returns:
            AggregateResult with one result per descriptor
        """
        scope = scope or CheckScope()
        results: List[Optional[CheckResult]] = [None] * len(descriptors)
        overall = Severity.NOT_SET
        lock = asyncio.Lock()

        async def run(index: int, descriptor: CheckDescriptor) -> None:
            nonlocal overall
            with log_context(dependency=descriptor.name, check_kind=descriptor.kind or None):
                result = await self._execute_check(descriptor, scope)

            result.name = descriptor.name
            if not result.resource:
                result.resource = descriptor.name
            results[index] = result

            async with lock:
                if result.status > overall:
                    overall = result.status

        await asyncio.gather(*(run(i, d) for i, d in enumerate(descriptors)))

        return AggregateResult(status=overall, results=list(results))

    async def _execute_check(
        self,
        descriptor: CheckDescriptor,
        scope: CheckScope,
    ) -> CheckResult:
        """Dispatch on the descriptor variant; never raises."""
        try:
            if isinstance(descriptor, FunctionCheck) and descriptor.fn is not None:
                result = await run_check_function(descriptor.fn, scope, descriptor.timeout)
            elif isinstance(descriptor, UrlCheck):
                result = await check_url(
                    descriptor.url, scope, descriptor.timeout, transport=self.transport
                )
            else:
                result = CheckResult.critical(
                    f"no check target: {type(descriptor).__name__} has no URL or check function"
                )
        except Exception as e:
            logger.exception(f"Dependency check {descriptor.name} failed: {e}")
            result = CheckResult.critical(f"check failed: {type(e).__name__}: {e}")

        logger.debug(
            f"Dependency check {descriptor.name}: {result.status} "
            f"({result.latency_ms:.1f}ms) {result.message}"
        )
        return result


async def check_dependencies(
    descriptors: Sequence[CheckDescriptor],
    scope: Optional[CheckScope] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AggregateResult:
    """Check a batch of dependencies with a fresh executor."""
    return await DependencyCheckExecutor(transport=transport).execute(descriptors, scope)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DependencyCheckExecutor",
    "check_dependencies",
]
