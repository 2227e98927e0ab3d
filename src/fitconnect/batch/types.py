"""Bulk client operation types.

``BatchOperationPayload.data`` arrives as the raw dict the UI sent. Each
operation type has its own data variant; ``parse_operation_data`` turns the
raw dict into that variant and is called once per client, so a missing
field fails every client of the batch with the same message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from fitconnect.exceptions import MissingFieldError


class BatchOperationType(str, Enum):
    ASSIGN_PLAN = "assign_plan"
    SEND_MESSAGE = "send_message"
    UPDATE_STATUS = "update_status"
    ADD_HABIT = "add_habit"
    ADD_CHALLENGE = "add_challenge"


@dataclass(frozen=True)
class AssignPlanData:
    plan_id: str
    start_date: str | None = None


@dataclass(frozen=True)
class SendMessageData:
    message: str


@dataclass(frozen=True)
class UpdateStatusData:
    status: str


@dataclass(frozen=True)
class AddHabitData:
    habit_template_id: str


@dataclass(frozen=True)
class AddChallengeData:
    challenge_id: str


OperationData = Union[
    AssignPlanData, SendMessageData, UpdateStatusData, AddHabitData, AddChallengeData
]


def _require_text(data: dict[str, Any], key: str, message: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise MissingFieldError(key, message)
    return value


def parse_operation_data(
    op_type: BatchOperationType, data: dict[str, Any]
) -> OperationData:
    """Build the typed data variant for ``op_type``.

    Raises:
        MissingFieldError: a field the operation needs is absent or blank.
    """
    if op_type is BatchOperationType.ASSIGN_PLAN:
        return AssignPlanData(
            plan_id=_require_text(data, "plan_id", "A plan must be selected"),
            start_date=data.get("start_date"),
        )
    if op_type is BatchOperationType.SEND_MESSAGE:
        return SendMessageData(
            message=_require_text(data, "message", "Message content is required")
        )
    if op_type is BatchOperationType.UPDATE_STATUS:
        return UpdateStatusData(
            status=_require_text(data, "status", "A status must be selected")
        )
    if op_type is BatchOperationType.ADD_HABIT:
        return AddHabitData(
            habit_template_id=_require_text(
                data, "habit_template_id", "A habit template must be selected"
            )
        )
    if op_type is BatchOperationType.ADD_CHALLENGE:
        return AddChallengeData(
            challenge_id=_require_text(data, "challenge_id", "A challenge must be selected")
        )
    raise ValueError(f"Unhandled batch operation type: {op_type!r}")


@dataclass
class BatchOperationPayload:
    """One bulk command issued from the UI.

    ``target_ids`` are processed in order and are not de-duplicated.
    """

    type: BatchOperationType
    target_ids: list[str]
    data: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.type = BatchOperationType(self.type)
        self.target_ids = list(self.target_ids)
        self.data = dict(self.data or {})


@dataclass(frozen=True)
class BatchOperationResult:
    target_id: str
    success: bool
    display_name: str | None = None
    error: str | None = None


@dataclass
class BatchOperationSummary:
    total: int
    successful: int
    failed: int
    results: list[BatchOperationResult] = field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[BatchOperationResult]) -> "BatchOperationSummary":
        successful = sum(1 for r in results if r.success)
        return cls(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            results=list(results),
        )

    @property
    def outcome(self) -> str:
        """``success`` | ``error`` | ``partial``"""
        if self.failed == 0:
            return "success"
        if self.successful == 0:
            return "error"
        return "partial"
