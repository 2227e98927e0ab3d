"""Visibility/focus wiring for the resume coordinator.

Browsers report a resume as a visibility change; the native shell also
emits focus events, and emits them more often, so native focus is
collapsed through a quiet window before it reaches the coordinator.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from fitconnect.config import Config
from fitconnect.resume.coordinator import ResumeCoordinator

logger = logging.getLogger(__name__)


class ResumeSignals:
    """Turns platform events into ``execute_handlers`` calls.

    Call ``on_visibility_change`` / ``on_focus`` from the platform's event
    listeners. Both must be called from inside the running event loop.
    """

    def __init__(
        self,
        coordinator: ResumeCoordinator,
        *,
        is_native_shell: Callable[[], bool] | None = None,
        native_focus_quiet_ms: int | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._is_native_shell = is_native_shell or coordinator.is_native_shell
        self._quiet_ms = (
            Config.resume.native_focus_quiet_ms
            if native_focus_quiet_ms is None
            else native_focus_quiet_ms
        )
        self._focus_handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def focus_pending(self) -> bool:
        return self._focus_handle is not None

    def on_visibility_change(self, visible: bool) -> asyncio.Task | None:
        """Page became visible/hidden. Only visible triggers a resume."""
        if not visible:
            return None
        return self._trigger("visibility")

    def on_focus(self) -> asyncio.Task | None:
        """Window/app gained focus.

        In the native shell the trigger waits for a quiet window; every new
        focus event restarts it. Returns None in that case.
        """
        if not self._is_native_shell():
            return self._trigger("focus")

        if self._focus_handle is not None:
            self._focus_handle.cancel()
        loop = asyncio.get_running_loop()
        self._focus_handle = loop.call_later(
            self._quiet_ms / 1000, self._fire_native_focus
        )
        return None

    def close(self) -> None:
        """Drop a pending native focus trigger."""
        if self._focus_handle is not None:
            self._focus_handle.cancel()
            self._focus_handle = None

    async def wait_idle(self) -> None:
        """Wait for triggered ``execute_handlers`` calls to return."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire_native_focus(self) -> None:
        self._focus_handle = None
        self._trigger("native focus")

    def _trigger(self, source: str) -> asyncio.Task:
        logger.debug(f"Resume signal: {source}")
        task = asyncio.get_running_loop().create_task(
            self._coordinator.execute_handlers()
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
