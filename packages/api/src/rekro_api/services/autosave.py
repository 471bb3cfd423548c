# This project was developed with assistance from AI tools.
"""Debounced, single-slot auto-save coordinator.

Rapid ``schedule()`` calls coalesce into one save once the debounce window
passes without another edit. At most one save runs at a time; edits that
arrive while a save is in flight replace a single pending slot (latest state
wins) which is saved as soon as the in-flight save completes.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.config import settings
from .change_detection import canonical, deep_clone

logger = logging.getLogger(__name__)

SaveFn = Callable[[Any], Awaitable[Any]]
SavedCallback = Callable[[Any, Any], None]

_EMPTY = object()


class AutoSaver:
    """Coalesce form edits into serialized saves.

    Args:
        save: Coroutine function persisting one state; its return value is
            passed to ``on_saved``.
        debounce_seconds: Quiescence window before a scheduled save fires.
        on_saved: Called with ``(state, result)`` after each successful save.
    """

    def __init__(
        self,
        save: SaveFn,
        debounce_seconds: float | None = None,
        *,
        on_saved: SavedCallback | None = None,
    ):
        self._save = save
        self._debounce = (
            settings.AUTOSAVE_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self._on_saved = on_saved
        self._pending: Any = _EMPTY
        self._timer: asyncio.TimerHandle | None = None
        self._running: asyncio.Task | None = None
        self._last_saved: str | None = None
        self.last_error: Exception | None = None
        self.save_count = 0

    # -- state -------------------------------------------------------------

    @property
    def has_pending(self) -> bool:
        return self._pending is not _EMPTY

    @property
    def is_saving(self) -> bool:
        return self._running is not None and not self._running.done()

    def mark_saved(self, state: Any) -> None:
        """Record ``state`` as already persisted (e.g. after hydration)."""
        self._last_saved = canonical(state)

    # -- triggers ----------------------------------------------------------

    def schedule(self, state: Any) -> None:
        """Queue ``state`` and restart the debounce window."""
        self._pending = deep_clone(state)
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce, self._kick)

    async def flush(self) -> None:
        """Save any pending state now and wait until no save is running."""
        self._cancel_timer()
        self._kick()
        while self.is_saving:
            await asyncio.shield(self._running)

    async def aclose(self) -> None:
        """Stop the debounce timer and let an in-flight save finish."""
        self._cancel_timer()
        if self.is_saving:
            await asyncio.shield(self._running)

    # -- internals ---------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _kick(self) -> None:
        self._timer = None
        if self.is_saving or not self.has_pending:
            return
        self._running = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not _EMPTY:
            state = self._pending
            self._pending = _EMPTY

            key = canonical(state)
            if key == self._last_saved:
                logger.debug("Auto-save skipped: state unchanged since last save")
                continue

            try:
                result = await self._save(state)
            except Exception as exc:
                self.last_error = exc
                logger.warning("Auto-save failed, will retry on next trigger: %s", exc)
                if self._pending is _EMPTY:
                    # Nothing newer queued; keep the failed state for the retry
                    self._pending = state
                    return
                continue

            self.last_error = None
            self._last_saved = key
            self.save_count += 1
            if self._on_saved is not None:
                self._on_saved(state, result)
