# ============================================================================
# CHECK SCOPE
# ============================================================================
# STATUS: Core - Cancellable execution scope
# PURPOSE: External cancellation and deadlines for dependency checks
# CREATED: 17 OCT 2026
# ============================================================================
"""
Check Scope

A CheckScope ends when it is cancelled or its deadline passes. Child scopes
end when their parent ends or when their own timeout expires, whichever
comes first.

Usage:
    scope = CheckScope(timeout=30.0)
    bounded = scope.child(timeout=5.0)

    await bounded.wait()        # returns when the bounded scope ends
    bounded.reason              # "cancelled" or "deadline exceeded"

Scopes belong to one event loop; call cancel() from that loop's thread
(or before the loop starts).
"""

import asyncio
import time
import weakref
from typing import Optional

CANCELLED = "cancelled"
DEADLINE_EXCEEDED = "deadline exceeded"


class CheckScope:
    """Cancellable scope with an optional deadline."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        parent: Optional["CheckScope"] = None,
    ):
        self._parent = parent
        # Weak so finished children do not pile up on a long-lived parent
        self._children: "weakref.WeakSet[CheckScope]" = weakref.WeakSet()
        self._event = asyncio.Event()
        self._cancelled = False

        deadline = None if timeout is None else time.monotonic() + timeout
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

        if parent is not None:
            parent._children.add(self)
            if parent.cancelled:
                self.cancel()

    @property
    def deadline(self) -> Optional[float]:
        """Monotonic deadline, or None when unbounded."""
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self._cancelled or self.expired

    @property
    def reason(self) -> Optional[str]:
        if self._cancelled:
            return CANCELLED
        if self.expired:
            return DEADLINE_EXCEEDED
        return None

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline (never negative), None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        """Cancel this scope and every child derived from it."""
        if self._cancelled:
            return
        self._cancelled = True
        self._event.set()
        for child in list(self._children):
            child.cancel()

    def child(self, timeout: Optional[float] = None) -> "CheckScope":
        """Derive a scope bounded by this one and by timeout."""
        return CheckScope(timeout=timeout, parent=self)

    async def wait(self) -> None:
        """Suspend until the scope is cancelled or its deadline passes."""
        if self.done:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=self.remaining())
        except asyncio.TimeoutError:
            pass

    def __repr__(self) -> str:
        return f"CheckScope(remaining={self.remaining()}, reason={self.reason})"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "CANCELLED",
    "DEADLINE_EXCEEDED",
    "CheckScope",
]
