"""Single-client mutations behind each bulk operation type.

Every function applies one operation to one client and raises on
rejection; the executor turns raised errors into per-client results.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Awaitable, Callable

from fitconnect.batch.types import (
    AddChallengeData,
    AddHabitData,
    AssignPlanData,
    BatchOperationType,
    OperationData,
    SendMessageData,
    UpdateStatusData,
)
from fitconnect.exceptions import (
    AlreadyParticipatingError,
    DuplicateRowError,
    RelationshipNotFoundError,
    UnsupportedOperationError,
)
from fitconnect.session import Operator
from fitconnect.store.base import TableStore

Operation = Callable[[TableStore, Operator, str, OperationData], Awaitable[None]]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def lookup_display_name(store: TableStore, client_id: str) -> str:
    """Client's full name from their profile. Raises LookupError if absent."""
    profile = await store.maybe_single("client_profiles", id=client_id)
    if profile is None:
        raise LookupError(f"No client profile for '{client_id}'")

    name = " ".join(
        part for part in (profile.get("first_name"), profile.get("last_name")) if part
    )
    if not name:
        raise LookupError(f"Client profile '{client_id}' has no name")
    return name


async def assign_plan(
    store: TableStore, operator: Operator, client_id: str, data: AssignPlanData
) -> None:
    """Create the plan assignment, or reactivate an existing one."""
    existing = await store.maybe_single(
        "plan_assignments",
        coach_id=operator.id,
        client_id=client_id,
        plan_id=data.plan_id,
    )
    now = _now_iso()
    if existing is not None:
        await store.update(
            "plan_assignments",
            {"status": "active", "assigned_at": now, "start_date": data.start_date},
            id=existing["id"],
        )
        return

    await store.insert(
        "plan_assignments",
        {
            "coach_id": operator.id,
            "client_id": client_id,
            "plan_id": data.plan_id,
            "status": "active",
            "assigned_at": now,
            "start_date": data.start_date,
        },
    )


async def send_message(
    store: TableStore, operator: Operator, client_id: str, data: SendMessageData
) -> None:
    await store.insert(
        "messages",
        {
            "sender_id": operator.user_id,
            "receiver_id": client_id,
            "content": data.message,
            "metadata": {"source": "bulk_action"},
        },
    )


async def update_status(
    store: TableStore, operator: Operator, client_id: str, data: UpdateStatusData
) -> None:
    affected = await store.update(
        "coach_clients",
        {"status": data.status},
        coach_id=operator.id,
        client_id=client_id,
    )
    if affected == 0:
        raise RelationshipNotFoundError(operator.id, client_id)


async def add_habit(
    store: TableStore, operator: Operator, client_id: str, data: AddHabitData
) -> None:
    raise UnsupportedOperationError(
        BatchOperationType.ADD_HABIT.value,
        "Adding habits in bulk is not yet supported. Assign habits from each client's profile.",
    )


async def add_challenge(
    store: TableStore, operator: Operator, client_id: str, data: AddChallengeData
) -> None:
    existing = await store.maybe_single(
        "challenge_participants",
        challenge_id=data.challenge_id,
        client_id=client_id,
    )
    if existing is not None:
        raise AlreadyParticipatingError(client_id, data.challenge_id)

    try:
        await store.insert(
            "challenge_participants",
            {
                "challenge_id": data.challenge_id,
                "client_id": client_id,
                "status": "active",
                "current_progress": 0,
                "joined_at": _now_iso(),
            },
            unique_on=("challenge_id", "client_id"),
        )
    except DuplicateRowError as e:
        # enrolled by another writer after the check above
        raise AlreadyParticipatingError(client_id, data.challenge_id) from e


OPERATIONS: dict[BatchOperationType, Operation] = {
    BatchOperationType.ASSIGN_PLAN: assign_plan,
    BatchOperationType.SEND_MESSAGE: send_message,
    BatchOperationType.UPDATE_STATUS: update_status,
    BatchOperationType.ADD_HABIT: add_habit,
    BatchOperationType.ADD_CHALLENGE: add_challenge,
}

# Query caches to refresh after each operation type.
INVALIDATION_TAGS: dict[BatchOperationType, tuple[str, ...]] = {
    BatchOperationType.ASSIGN_PLAN: ("clients", "plan-assignments"),
    BatchOperationType.SEND_MESSAGE: ("messages",),
    BatchOperationType.UPDATE_STATUS: ("clients",),
    BatchOperationType.ADD_HABIT: ("clients",),
    BatchOperationType.ADD_CHALLENGE: ("challenges", "clients"),
}
