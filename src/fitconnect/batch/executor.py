"""Bulk client operation executor.

Applies one operation to each selected client in order. A failing client
never stops the rest of the batch; every client gets a result, and the
caller gets one summary, one notification and one cache refresh per call.

Notification and cache invalidation are delegated to async callables
injected at construction. The executor does not know about the UI.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from fitconnect.batch.operations import (
    INVALIDATION_TAGS,
    OPERATIONS,
    lookup_display_name,
)
from fitconnect.batch.types import (
    BatchOperationPayload,
    BatchOperationResult,
    BatchOperationSummary,
    BatchOperationType,
    parse_operation_data,
)
from fitconnect.config import Config
from fitconnect.exceptions import BatchOperationError, FeatureDisabledError
from fitconnect.flags import FeatureFlags
from fitconnect.session import Operator, SessionProvider, resolve_operator
from fitconnect.store.base import TableStore

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], Awaitable[None]]
Invalidator = Callable[[str], Awaitable[None]]

_SUCCESS_TEMPLATES: dict[BatchOperationType, str] = {
    BatchOperationType.ASSIGN_PLAN: "Plan assigned to {clients}",
    BatchOperationType.SEND_MESSAGE: "Message sent to {clients}",
    BatchOperationType.UPDATE_STATUS: "Status updated for {clients}",
    BatchOperationType.ADD_HABIT: "Habit added for {clients}",
    BatchOperationType.ADD_CHALLENGE: "Added {clients} to the challenge",
}


def _clients(count: int) -> str:
    return f"{count} client" if count == 1 else f"{count} clients"


def summary_message(op_type: BatchOperationType, summary: BatchOperationSummary) -> str:
    """User-facing text for the single outcome notification."""
    outcome = summary.outcome
    if outcome == "error":
        return f"Bulk action failed for {_clients(summary.failed)}"
    done = _SUCCESS_TEMPLATES[op_type].format(clients=_clients(summary.successful))
    if outcome == "partial":
        return f"{done}, failed for {_clients(summary.failed)}"
    return done


class BatchExecutor:
    """Runs bulk operations for the signed-in coach.

    Args:
        store: Table store the per-client mutations write to.
        session: Source of the signed-in user's id.
        flags: Feature flags; ``Config.batch.feature_flag`` must be enabled.
        notifier: ``async (kind, message)``; kind is success/error/partial.
        invalidator: ``async (tag)`` refreshing a cached collection.
        operation_timeout_ms: Per-client bound, 0 for none.
        audit: Write one ``audit_logs`` row per call.
    """

    def __init__(
        self,
        store: TableStore,
        session: SessionProvider,
        flags: FeatureFlags,
        *,
        notifier: Notifier | None = None,
        invalidator: Invalidator | None = None,
        feature_flag: str | None = None,
        operation_timeout_ms: int | None = None,
        unknown_name: str | None = None,
        audit: bool = True,
    ) -> None:
        cfg = Config.batch
        self._store = store
        self._session = session
        self._flags = flags
        self._notifier = notifier
        self._invalidator = invalidator
        self._feature_flag = feature_flag or cfg.feature_flag
        self._operation_timeout_ms = (
            cfg.operation_timeout_ms
            if operation_timeout_ms is None
            else operation_timeout_ms
        )
        self._unknown_name = unknown_name or cfg.unknown_name
        self._audit = audit

    async def execute(self, payload: BatchOperationPayload) -> BatchOperationSummary:
        """Apply ``payload`` to every target id.

        Raises:
            BatchPreconditionError: signed out, no coach profile, or bulk
                actions disabled. Nothing is processed in that case.
        """
        operator = await self._check_preconditions()

        logger.info(
            f"Bulk {payload.type.value} started by coach {operator.id}: "
            f"{len(payload.target_ids)} clients"
        )

        results: list[BatchOperationResult] = []
        for target_id in payload.target_ids:
            results.append(await self._process_one(operator, payload, target_id))

        summary = BatchOperationSummary.from_results(results)
        logger.info(
            f"Bulk {payload.type.value} finished: {summary.successful}/{summary.total} "
            f"succeeded, {summary.failed} failed"
        )

        await self._notify(summary.outcome, summary_message(payload.type, summary))
        for tag in INVALIDATION_TAGS[payload.type]:
            await self._invalidate(tag)
        if self._audit:
            await self._write_audit(operator, payload, summary)

        return summary

    async def _check_preconditions(self) -> Operator:
        operator = await resolve_operator(self._session, self._store)
        if not self._flags.is_enabled(self._feature_flag):
            raise FeatureDisabledError(self._feature_flag)
        return operator

    async def _process_one(
        self, operator: Operator, payload: BatchOperationPayload, target_id: str
    ) -> BatchOperationResult:
        display_name = await self._display_name(target_id)

        try:
            data = parse_operation_data(payload.type, payload.data)
            operation = OPERATIONS[payload.type](self._store, operator, target_id, data)
            if self._operation_timeout_ms > 0:
                await asyncio.wait_for(operation, self._operation_timeout_ms / 1000)
            else:
                await operation
        except asyncio.TimeoutError:
            logger.error(
                f"Bulk {payload.type.value} timed out for client {target_id} "
                f"({self._operation_timeout_ms}ms)"
            )
            return BatchOperationResult(
                target_id=target_id,
                success=False,
                display_name=display_name,
                error="The request timed out",
            )
        except BatchOperationError as e:
            logger.warning(f"Bulk {payload.type.value} rejected for client {target_id}: {e}")
            return BatchOperationResult(
                target_id=target_id,
                success=False,
                display_name=display_name,
                error=str(e),
            )
        except Exception as e:
            logger.exception(f"Bulk {payload.type.value} failed for client {target_id}")
            return BatchOperationResult(
                target_id=target_id,
                success=False,
                display_name=display_name,
                error=str(e) or type(e).__name__,
            )

        return BatchOperationResult(
            target_id=target_id, success=True, display_name=display_name
        )

    async def _display_name(self, target_id: str) -> str:
        """Best effort; a failed lookup never fails the client's operation."""
        try:
            return await lookup_display_name(self._store, target_id)
        except Exception as e:
            logger.warning(f"Display name lookup failed for client {target_id}: {e}")
            return self._unknown_name

    async def _notify(self, kind: str, message: str) -> None:
        if self._notifier is None:
            return
        try:
            await self._notifier(kind, message)
        except Exception:
            logger.warning(
                f"Failed to send bulk action notification: {message}", exc_info=True
            )

    async def _invalidate(self, tag: str) -> None:
        if self._invalidator is None:
            return
        try:
            await self._invalidator(tag)
        except Exception:
            logger.warning(f"Failed to invalidate cache tag: {tag}", exc_info=True)

    async def _write_audit(
        self,
        operator: Operator,
        payload: BatchOperationPayload,
        summary: BatchOperationSummary,
    ) -> None:
        try:
            await self._store.insert(
                "audit_logs",
                {
                    "actor_id": operator.user_id,
                    "action": f"BULK_{payload.type.value.upper()}",
                    "entity_type": "coach_clients",
                    "new_values": {
                        "count": summary.total,
                        "successful": summary.successful,
                        "failed": summary.failed,
                    },
                },
            )
        except Exception:
            logger.warning("Failed to write bulk action audit entry", exc_info=True)
