# ============================================================================
# FUNCTION CHECK EXECUTOR
# ============================================================================
# STATUS: Checks - User supplied check functions
# PURPOSE: Run check functions with fault containment and a bounded wait
# CREATED: 17 OCT 2026
# ============================================================================
"""
Function Check Executor

Runs a zero-argument check function and waits for its result under a
bounded scope (caller scope + timeout).

Execution:
- async def functions run as an asyncio task, cancelled if the wait ends
- plain functions run in their own daemon thread; a thread cannot be
  stopped, so a late result is simply dropped
- an awaitable returned by a plain function is awaited back on the event
  loop, like an async def function

Every path deposits exactly one result into a single-slot
future. The deposit never blocks: once the waiter has given up, the slot
is cancelled and the deposit is a no-op.

Outcomes (first one wins):
    Completed  -> the function's CheckResult, verbatim
    Faulted    -> Critical "panic recovered in check function: ..."
                  (any exception, SystemExit included; task cancellation
                  is left to propagate)
    TimedOut   -> Critical "timeout after <duration>"
"""

import asyncio
import inspect
import logging
import threading
import time
from dataclasses import replace
from typing import Any, Awaitable, Callable, Optional, Tuple

from heartbeat.core import (
    CheckFunction,
    CheckResult,
    DEFAULT_TIMEOUT_SECONDS,
    Severity,
    format_duration,
)
from heartbeat.scope import CheckScope

logger = logging.getLogger(__name__)


def _fault_result(e: BaseException) -> CheckResult:
    return CheckResult.critical(
        f"panic recovered in check function: {type(e).__name__}: {e}"
    )


def _validate(result: Any) -> CheckResult:
    """Ensure a check function handed back a usable CheckResult."""
    if not isinstance(result, CheckResult):
        if inspect.iscoroutine(result):
            result.close()
        return CheckResult.critical(
            f"invalid result: check function returned {type(result).__name__}, expected CheckResult"
        )
    if not isinstance(result.status, Severity):
        try:
            result.status = Severity(result.status)
        except ValueError:
            return CheckResult.critical(f"invalid result: unknown status {result.status!r}")
    return result


def _deposit(slot: asyncio.Future, result: CheckResult) -> None:
    if not slot.done():
        slot.set_result(result)


def _contain(fn: CheckFunction, e: BaseException) -> CheckResult:
    logger.error(f"Check function {fn!r} raised {type(e).__name__}", exc_info=e)
    return _fault_result(e)


async def _await_result(
    fn: CheckFunction,
    awaitable: Awaitable[Any],
    slot: asyncio.Future,
) -> None:
    try:
        result = _validate(await awaitable)
    except asyncio.CancelledError:
        raise
    except BaseException as e:
        result = _contain(fn, e)
    _deposit(slot, result)


def _adopt(fn: CheckFunction, awaitable: Awaitable[Any], slot: asyncio.Future) -> None:
    """Await a plain function's returned awaitable on the event loop."""
    if slot.done():
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        return
    task = asyncio.ensure_future(_await_result(fn, awaitable, slot))
    # Cancelling the slot on timeout cancels the adopted task too
    slot.add_done_callback(lambda _: task.cancel())


def _run_in_thread(
    fn: CheckFunction,
    loop: asyncio.AbstractEventLoop,
    slot: asyncio.Future,
) -> None:
    handoff: Callable[..., None] = _deposit
    args: Tuple[Any, ...]
    try:
        result = fn()
        if inspect.isawaitable(result):
            handoff, args = _adopt, (fn, result, slot)
        else:
            args = (slot, _validate(result))
    except BaseException as e:
        args = (slot, _contain(fn, e))

    try:
        loop.call_soon_threadsafe(handoff, *args)
    except RuntimeError:
        logger.debug(f"Check function {fn!r} finished after its event loop closed")
        if handoff is _adopt and inspect.iscoroutine(args[1]):
            args[1].close()


async def _run_as_task(fn: CheckFunction, slot: asyncio.Future) -> None:
    try:
        result = fn()
    except asyncio.CancelledError:
        raise
    except BaseException as e:
        _deposit(slot, _contain(fn, e))
        return
    if inspect.isawaitable(result):
        await _await_result(fn, result, slot)
    else:
        _deposit(slot, _validate(result))


def _is_async(fn: CheckFunction) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )


async def run_check_function(
    fn: CheckFunction,
    scope: Optional[CheckScope] = None,
    timeout: float = 0.0,
) -> CheckResult:
    """
    Run a check function and return its CheckResult.

    Args:
        fn: Zero-argument callable (plain or async) returning a CheckResult
        scope: Caller scope; cancelling it ends the wait early
        timeout: Seconds, 0 applies DEFAULT_TIMEOUT_SECONDS

    Returns:
        The function's result, a fault result, or a timeout result.
        Never raises for failures inside the function.
    """
    timeout = timeout or DEFAULT_TIMEOUT_SECONDS
    bounded = (scope or CheckScope()).child(timeout=timeout)
    started = time.perf_counter()

    def timed_out() -> CheckResult:
        return CheckResult.critical(
            f"timeout after {format_duration(timeout)}",
            latency_ms=(time.perf_counter() - started) * 1000,
        )

    if bounded.done:
        logger.warning(f"Check function {fn!r} not started: scope {bounded.reason}")
        return timed_out()

    loop = asyncio.get_running_loop()
    slot = loop.create_future()
    task: Optional[asyncio.Future] = None

    if _is_async(fn):
        task = asyncio.ensure_future(_run_as_task(fn, slot))
    else:
        threading.Thread(
            target=_run_in_thread,
            args=(fn, loop, slot),
            name=f"heartbeat-check-{getattr(fn, '__name__', 'fn')}",
            daemon=True,
        ).start()

    scope_ended = asyncio.ensure_future(bounded.wait())
    try:
        await asyncio.wait({slot, scope_ended}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        scope_ended.cancel()
        if not slot.done():
            slot.cancel()
            if task is not None:
                task.cancel()

    if slot.cancelled():
        logger.warning(
            f"Check function {fn!r} timed out after {format_duration(timeout)} ({bounded.reason})"
        )
        return timed_out()

    result = replace(slot.result())
    if not result.latency_ms:
        result.latency_ms = (time.perf_counter() - started) * 1000
    return result


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "run_check_function",
]
