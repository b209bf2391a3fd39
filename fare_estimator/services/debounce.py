"""Keyed, cancellable delayed execution on the asyncio event loop.

Each key (for example one input field) holds at most one pending task.
Scheduling again under the same key supersedes the previous call: its
timer is cancelled, any run already in flight is cancelled, and its
future is abandoned. The superseded caller never receives a result or an
error. Only the last scheduled call per key can deliver a value.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

T = TypeVar("T")

TaskFactory = Callable[[], Awaitable[T]]


@dataclass
class _Pending:
    future: asyncio.Future[Any]
    timer: Optional[asyncio.TimerHandle] = None
    runner: Optional[asyncio.Task[None]] = None


@dataclass
class DebounceScheduler:
    """Debounce async work per key.

    Firing and superseding both run on the event loop thread and check
    ownership of the key's slot, so of two racing calls exactly one runs.

    Example:
        scheduler = DebounceScheduler()
        places = await scheduler.schedule("origin", 800, lambda: search("Cebu"))
    """

    _pending: Dict[str, _Pending] = field(default_factory=dict, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def schedule(
        self, key: str, delay_ms: float, task: TaskFactory[T]
    ) -> asyncio.Future[T]:
        """Run `task` once `delay_ms` has passed without another call for `key`.

        Must be called from a running event loop.

        Args:
            key: Debounce slot; independent keys never interfere.
            delay_ms: Quiet period in milliseconds, restarted by every call.
            task: Zero-argument callable returning an awaitable.

        Returns:
            A future resolved with the task's result (or its exception).
            It stays pending forever if the call gets superseded.
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")

        loop = asyncio.get_running_loop()
        if self._discard(key):
            self._logger.debug("Superseded pending task", extra={"key": key})

        entry = _Pending(future=loop.create_future())
        entry.timer = loop.call_later(delay_ms / 1000, self._fire, key, entry, task)
        self._pending[key] = entry
        return entry.future

    def cancel(self, key: str) -> bool:
        """Drop the key's pending work, abandoning its future.

        Returns:
            True if something was pending for the key.
        """
        return self._discard(key)

    def pending_keys(self) -> List[str]:
        """Keys with a task waiting or running."""
        return list(self._pending)

    def shutdown(self) -> None:
        """Cancel everything, releasing awaiting callers with CancelledError."""
        for key in list(self._pending):
            entry = self._pending[key]
            self._discard(key)
            if not entry.future.done():
                entry.future.cancel()

    def _discard(self, key: str) -> bool:
        entry = self._pending.pop(key, None)
        if entry is None:
            return False
        if entry.timer is not None:
            entry.timer.cancel()
        if entry.runner is not None and not entry.runner.done():
            entry.runner.cancel()
        return True

    def _fire(self, key: str, entry: _Pending, task: TaskFactory[Any]) -> None:
        if self._pending.get(key) is not entry:
            return
        entry.timer = None
        entry.runner = asyncio.ensure_future(self._run(key, entry, task))

    async def _run(self, key: str, entry: _Pending, task: TaskFactory[Any]) -> None:
        try:
            result = await task()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self._release(key, entry):
                entry.future.set_exception(e)
            return

        if self._release(key, entry):
            entry.future.set_result(result)

    def _release(self, key: str, entry: _Pending) -> bool:
        """Free the slot if `entry` still owns it; True if its caller still waits."""
        if self._pending.get(key) is not entry:
            return False
        del self._pending[key]
        return not entry.future.done()
