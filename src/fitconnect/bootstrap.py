"""Service wiring at app start.

Builds the one resume coordinator and the batch executor from Config,
resume.yaml and flags.yaml, so features receive ready objects instead
of reaching for module-level singletons.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from fitconnect.batch.executor import BatchExecutor, Invalidator, Notifier
from fitconnect.config import Config
from fitconnect.flags import FeatureFlags
from fitconnect.logging_config import setup_logging
from fitconnect.resume.coordinator import ResumeCoordinator
from fitconnect.resume.schedule import load_resume_schedule
from fitconnect.resume.signals import ResumeSignals
from fitconnect.session import SessionProvider, detect_native_shell
from fitconnect.store.base import TableStore
from fitconnect.store.json_store import JsonFileStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    coordinator: ResumeCoordinator
    signals: ResumeSignals
    executor: BatchExecutor
    flags: FeatureFlags
    store: TableStore

    async def aclose(self) -> None:
        self.signals.close()
        await self.coordinator.aclose()


def create_services(
    session: SessionProvider,
    *,
    user_agent: str | None = None,
    is_native_shell: Callable[[], bool] | None = None,
    store: TableStore | None = None,
    notifier: Notifier | None = None,
    invalidator: Invalidator | None = None,
) -> Services:
    """Set up logging, validate Config and build the app's coordination services.

    The platform comes from ``is_native_shell`` when given, otherwise from
    ``user_agent``.

    Raises:
        ConfigurationError: invalid timing or flag settings.
    """
    setup_logging()
    Config.validate()

    if is_native_shell is None:
        native = detect_native_shell(user_agent)

        def is_native_shell() -> bool:
            return native

    schedule = load_resume_schedule(Config.get_resume_schedule_path())
    flags = FeatureFlags.from_file(Config.get_flags_path())
    if store is None:
        store = JsonFileStore(Config.get_store_path())

    coordinator = ResumeCoordinator(
        is_native_shell=is_native_shell,
        background_delays=schedule,
    )
    signals = ResumeSignals(coordinator)
    executor = BatchExecutor(
        store,
        session,
        flags,
        notifier=notifier,
        invalidator=invalidator,
    )

    bulk = "enabled" if flags.is_enabled(Config.batch.feature_flag) else "disabled"
    logger.info(
        f"Services ready: {len(schedule)} scheduled background ids, "
        f"native shell {is_native_shell()}, bulk actions {bulk}"
    )
    return Services(
        coordinator=coordinator,
        signals=signals,
        executor=executor,
        flags=flags,
        store=store,
    )
