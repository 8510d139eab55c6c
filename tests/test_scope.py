# ============================================================================
# CHECK SCOPE TESTS
# ============================================================================
# STATUS: Tests - Cancellable execution scope
# PURPOSE: Verify cancellation propagation and deadlines
# CREATED: 17 OCT 2026
# ============================================================================
"""
Check Scope Tests

Run with:
    pytest tests/test_scope.py -v
"""

import asyncio
import gc
import time

from heartbeat.scope import CANCELLED, DEADLINE_EXCEEDED, CheckScope


class TestCheckScope:

    def test_unbounded_scope_is_not_done(self):
        scope = CheckScope()
        assert not scope.done
        assert scope.reason is None
        assert scope.remaining() is None

    def test_cancel_propagates_to_children(self):
        parent = CheckScope()
        child = parent.child(timeout=60)
        grandchild = child.child()

        parent.cancel()

        assert child.cancelled
        assert grandchild.reason == CANCELLED

    def test_child_of_cancelled_parent_starts_cancelled(self):
        parent = CheckScope()
        parent.cancel()
        assert parent.child(timeout=60).cancelled

    def test_cancelling_child_leaves_parent_running(self):
        parent = CheckScope()
        parent.child().cancel()
        assert not parent.done

    def test_child_deadline_bounded_by_parent(self):
        parent = CheckScope(timeout=1.0)
        child = parent.child(timeout=60.0)
        assert child.deadline == parent.deadline

    def test_deadline_expires(self):
        scope = CheckScope(timeout=0.01)
        time.sleep(0.02)
        assert scope.expired
        assert scope.reason == DEADLINE_EXCEEDED
        assert scope.remaining() == 0.0

    def test_wait_returns_on_deadline(self):
        scope = CheckScope(timeout=0.05)

        started = time.monotonic()
        asyncio.run(scope.wait())

        assert time.monotonic() - started < 1.0
        assert scope.reason == DEADLINE_EXCEEDED

    def test_wait_returns_on_parent_cancel(self):
        async def scenario():
            parent = CheckScope()
            child = parent.child(timeout=60)
            asyncio.get_running_loop().call_later(0.02, parent.cancel)
            await asyncio.wait_for(child.wait(), timeout=2)
            return child

        child = asyncio.run(scenario())
        assert child.reason == CANCELLED

    def test_finished_children_are_released(self):
        parent = CheckScope()
        kept = parent.child()
        for _ in range(100):
            parent.child(timeout=1)

        gc.collect()

        assert len(parent._children) == 1
        parent.cancel()
        assert kept.cancelled
