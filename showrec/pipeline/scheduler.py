"""Coalescing scheduler for debounced background work.

# ─── HOW COALESCING WORKS ─────────────────────────────────────────────
#
#   request() ──→ [pending: sleep(quiet_period)] ──→ [running: action()]
#       │                  ▲
#       └── cancels ───────┘   (a newer request replaces a pending one)
#
#   - A burst of requests inside the quiet period runs the action once,
#     with the payload of the last request.
#   - While the action is running, new requests are ignored: at most one
#     run at a time and nothing is queued behind it.
#   - Action errors are logged and swallowed; the scheduler stays usable.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from showrec.utils.logging import get_logger


class CoalescingScheduler:
    """Runs *action* once after *quiet_period_ms* of silence.

    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        name: str,
        quiet_period_ms: int,
        action: Callable[[Any], Awaitable[None]],
    ) -> None:
        self._name = name
        self._quiet_period = quiet_period_ms / 1000.0
        self._action = action
        self._pending: asyncio.Task[None] | None = None
        self._payload: Any = None
        self._running = False
        self._runs = 0
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done() and not self._running

    @property
    def runs(self) -> int:
        """How many times the action has started."""
        return self._runs

    def request(self, payload: Any = None) -> bool:
        """Schedule the action; returns ``False`` if ignored because one is running."""
        if self._running:
            self._logger.debug("scheduler_request_ignored", scheduler=self._name)
            return False

        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            self._logger.debug("scheduler_request_superseded", scheduler=self._name)

        self._payload = payload
        self._pending = asyncio.get_running_loop().create_task(
            self._drain(), name=f"showrec-{self._name}"
        )
        return True

    async def wait_idle(self) -> None:
        """Wait until nothing is pending or running (cancelled tasks count as done)."""
        while self._pending is not None and not self._pending.done():
            await asyncio.wait({self._pending})

    async def cancel(self) -> None:
        """Cancel a pending run and wait for any in-flight run to finish."""
        task = self._pending
        if task is None or task.done():
            return
        if not self._running:
            task.cancel()
        await asyncio.wait({task})

    async def _drain(self) -> None:
        await asyncio.sleep(self._quiet_period)
        # No await between the sleep returning and this flag, so request()
        # can no longer cancel us from here on.
        self._running = True
        self._runs += 1
        payload, self._payload = self._payload, None
        try:
            await self._action(payload)
        except Exception as exc:
            self._logger.error("scheduler_action_failed", scheduler=self._name, error=str(exc))
        finally:
            self._running = False
