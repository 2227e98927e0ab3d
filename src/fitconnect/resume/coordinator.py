"""App-resume coordinator.

Owns the handler registry and runs every applicable handler once per
accepted resume signal. Immediate and fast handlers run one after another
in tier order; background handlers are started later on their own timers.

Construct one coordinator at app start and hand it to the features that
register handlers. It does not know where resume signals come from; see
``fitconnect.resume.signals`` for the visibility/focus wiring.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
import time
from typing import Awaitable, Callable, Mapping

from fitconnect.config import Config
from fitconnect.resume.handlers import (
    DEFAULT_BACKGROUND_DELAYS_MS,
    ResumeHandler,
    ResumePriority,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


def _ms_or_default(value: int | None, default: int) -> int:
    return default if value is None else value


class ResumeCoordinator:
    """Registry of resume handlers plus the debounce/re-entrancy state.

    Timings default to ``Config.resume`` and are in milliseconds.
    ``clock`` returns seconds (monotonic); ``sleep`` is awaited before
    immediate/fast handlers that have a start delay.
    """

    def __init__(
        self,
        *,
        is_native_shell: Callable[[], bool] | None = None,
        debounce_ms: int | None = None,
        settle_ms: int | None = None,
        fast_delay_ms: int | None = None,
        background_delay_ms: int | None = None,
        background_delays: Mapping[str, int] | None = None,
        handler_timeout_ms: int | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        cfg = Config.resume
        self._is_native_shell = is_native_shell or (lambda: False)
        self._debounce_ms = _ms_or_default(debounce_ms, cfg.debounce_ms)
        self._settle_ms = _ms_or_default(settle_ms, cfg.settle_ms)
        self._fast_delay_ms = _ms_or_default(fast_delay_ms, cfg.fast_delay_ms)
        self._background_delay_ms = _ms_or_default(
            background_delay_ms, cfg.background_delay_ms
        )
        self._background_delays = dict(
            background_delays
            if background_delays is not None
            else DEFAULT_BACKGROUND_DELAYS_MS
        )
        self._handler_timeout_ms = _ms_or_default(
            handler_timeout_ms, cfg.handler_timeout_ms
        )
        self._clock = clock
        self._sleep = sleep

        self._handlers: dict[str, ResumeHandler] = {}
        self._is_handling_resume = False
        self._last_resume_time: float | None = None
        self._pending_background: dict[int, asyncio.TimerHandle] = {}
        self._background_tasks: set[asyncio.Task] = set()
        self._settle_handle: asyncio.TimerHandle | None = None
        self._timer_ids = itertools.count()

    # -- Registry -------------------------------------------------------------

    @property
    def handlers(self) -> dict[str, ResumeHandler]:
        """Snapshot of registered handlers."""
        return dict(self._handlers)

    @property
    def is_handling_resume(self) -> bool:
        return self._is_handling_resume

    @property
    def last_resume_time(self) -> float | None:
        """Time (ms) of the last accepted resume, or None."""
        return self._last_resume_time

    @property
    def pending_background_count(self) -> int:
        """Background timers scheduled but not yet fired."""
        return len(self._pending_background)

    def is_native_shell(self) -> bool:
        return bool(self._is_native_shell())

    def register_handler(self, handler: ResumeHandler) -> None:
        """Add a handler, replacing any handler with the same id."""
        if handler.web_only and handler.native_only:
            logger.warning(
                f"Resume handler {handler.id} is both web_only and native_only; it will never run"
            )
        self._handlers[handler.id] = handler
        logger.debug(
            f"Resume handler registered: {handler.id} ({handler.priority.name.lower()})"
        )

    def unregister_handler(self, handler_id: str) -> None:
        """Remove a handler. Unknown ids are ignored."""
        if self._handlers.pop(handler_id, None) is not None:
            logger.debug(f"Resume handler unregistered: {handler_id}")

    # -- Execution ------------------------------------------------------------

    async def execute_handlers(self) -> bool:
        """Run one resume cycle.

        Returns False when the signal was dropped (a cycle is still in its
        immediate/fast phase, or the last accepted resume is within the
        debounce window), True when the cycle ran.
        """
        if self._is_handling_resume:
            logger.debug("Resume signal dropped: cycle already running")
            return False

        now = self._now_ms()
        if (
            self._last_resume_time is not None
            and now - self._last_resume_time < self._debounce_ms
        ):
            logger.debug(
                f"Resume signal dropped: {now - self._last_resume_time:.0f}ms since last resume"
            )
            return False

        self._is_handling_resume = True
        self._last_resume_time = now
        self._cancel_background_timers()

        loop = asyncio.get_running_loop()
        applicable = self._applicable_handlers()
        foreground = [h for h in applicable if h.priority is not ResumePriority.BACKGROUND]
        background = [h for h in applicable if h.priority is ResumePriority.BACKGROUND]

        logger.info(
            f"Resume cycle started: {len(foreground)} foreground, "
            f"{len(background)} background handlers"
        )

        try:
            for handler in foreground:
                delay_ms = self._delay_for(handler)
                if delay_ms > 0:
                    await self._sleep(delay_ms / 1000)
                await self._invoke(handler)

            for handler in background:
                self._schedule_background(loop, handler)
        finally:
            self._settle_handle = loop.call_later(
                self._settle_ms / 1000, self._finish_cycle
            )

        return True

    async def aclose(self) -> None:
        """Cancel pending background timers and running background handlers."""
        self._cancel_background_timers()
        if self._settle_handle is not None:
            self._settle_handle.cancel()
            self._settle_handle = None
        self._is_handling_resume = False

        tasks = list(self._background_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._background_tasks.clear()

    # -- Internals ------------------------------------------------------------

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _applicable_handlers(self) -> list[ResumeHandler]:
        native = self.is_native_shell()
        applicable = [h for h in self._handlers.values() if h.applies_to(native)]
        # stable: registry order within a tier
        applicable.sort(key=lambda h: h.priority)
        return applicable

    def _delay_for(self, handler: ResumeHandler) -> int:
        return handler.effective_delay_ms(
            fast_default_ms=self._fast_delay_ms,
            background_default_ms=self._background_delay_ms,
            background_delays=self._background_delays,
        )

    async def _invoke(self, handler: ResumeHandler) -> None:
        """Run one handler. Failures are logged, never raised."""
        try:
            result = handler.handler()
            if inspect.isawaitable(result):
                if self._handler_timeout_ms > 0:
                    await asyncio.wait_for(result, self._handler_timeout_ms / 1000)
                else:
                    await result
        except asyncio.TimeoutError:
            logger.error(
                f"Resume handler timed out: {handler.id} ({self._handler_timeout_ms}ms)"
            )
        except Exception:
            logger.exception(f"Resume handler error: {handler.id}")

    def _schedule_background(
        self, loop: asyncio.AbstractEventLoop, handler: ResumeHandler
    ) -> None:
        timer_id = next(self._timer_ids)
        delay_ms = self._delay_for(handler)

        def fire() -> None:
            self._pending_background.pop(timer_id, None)
            task = loop.create_task(self._invoke(handler))
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)

        self._pending_background[timer_id] = loop.call_later(delay_ms / 1000, fire)
        logger.debug(f"Background handler {handler.id} scheduled in {delay_ms}ms")

    def _cancel_background_timers(self) -> None:
        if self._pending_background:
            logger.debug(
                f"Cancelling {len(self._pending_background)} pending background handlers"
            )
        for handle in self._pending_background.values():
            handle.cancel()
        self._pending_background.clear()

    def _finish_cycle(self) -> None:
        self._settle_handle = None
        self._is_handling_resume = False
