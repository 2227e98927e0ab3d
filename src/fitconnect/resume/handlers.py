"""Resume handler primitives.

Defines priority tiers, the handler record registered with the
coordinator, and how each handler's start delay is resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Awaitable, Callable, Mapping, Union

HandlerFn = Callable[[], Union[Awaitable[Any], Any]]


class ResumePriority(IntEnum):
    """Execution tier for resume handlers. Lower values run first."""

    IMMEDIATE = 0
    FAST = 1
    BACKGROUND = 2

    @classmethod
    def parse(cls, value: "str | ResumePriority") -> "ResumePriority":
        """Accept ``"immediate" | "fast" | "background"`` or a member."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"Unknown resume priority: {value!r}") from None


# Staggered start times for background refreshes, by handler id.
DEFAULT_BACKGROUND_DELAYS_MS: dict[str, int] = {
    "session": 0,
    "viewRestore": 100,
    "subscription": 3000,
    "boost": 4000,
    "wearable": 5000,
    "sessionActivity": 6000,
}


@dataclass(frozen=True)
class ResumeHandler:
    """A unit of work run when the app comes back to the foreground.

    Attributes:
        id: Registry key. Registering the same id again replaces the entry.
        priority: Execution tier.
        handler: Zero-argument callable, sync or async.
        delay: Start delay override in milliseconds.
        web_only: Skip when running inside the native shell.
        native_only: Skip when running in a browser.
    """

    id: str
    priority: ResumePriority
    handler: HandlerFn
    delay: int | None = None
    web_only: bool = False
    native_only: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("ResumeHandler.id must be a non-empty string")
        object.__setattr__(self, "priority", ResumePriority.parse(self.priority))
        if self.delay is not None and self.delay < 0:
            raise ValueError(f"ResumeHandler.delay must be >= 0, got {self.delay}")

    def applies_to(self, native: bool) -> bool:
        """Whether the platform gates allow this handler to run."""
        if self.web_only and native:
            return False
        if self.native_only and not native:
            return False
        return True

    def effective_delay_ms(
        self,
        *,
        fast_default_ms: int = 100,
        background_default_ms: int = 3000,
        background_delays: Mapping[str, int] | None = None,
    ) -> int:
        if self.delay is not None:
            return self.delay
        if self.priority is ResumePriority.FAST:
            return fast_default_ms
        if self.priority is ResumePriority.BACKGROUND:
            table = (
                background_delays
                if background_delays is not None
                else DEFAULT_BACKGROUND_DELAYS_MS
            )
            return table.get(self.id, background_default_ms)
        return 0
