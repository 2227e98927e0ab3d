"""Signed-in user and operator (coach) resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from fitconnect.exceptions import NotAuthenticatedError, OperatorNotFoundError
from fitconnect.store.base import TableStore

logger = logging.getLogger(__name__)

NATIVE_SHELL_MARKER = "despia"


@runtime_checkable
class SessionProvider(Protocol):
    """Exposes the signed-in user's id. None when signed out."""

    @property
    def user_id(self) -> Optional[str]: ...


@dataclass
class StaticSession:
    """Fixed session, for scripts and tests."""

    user_id: Optional[str] = None


@dataclass(frozen=True)
class Operator:
    """The coach issuing a bulk action."""

    id: str
    user_id: str
    display_name: str = ""


async def resolve_operator(session: SessionProvider, store: TableStore) -> Operator:
    """Map the signed-in user to their coach profile.

    Raises:
        NotAuthenticatedError: nobody is signed in.
        OperatorNotFoundError: the user has no coach profile.
    """
    user_id = session.user_id
    if not user_id:
        raise NotAuthenticatedError()

    profile = await store.maybe_single("coach_profiles", user_id=user_id)
    if profile is None:
        logger.warning(f"No coach profile for user {user_id}")
        raise OperatorNotFoundError(user_id)

    return Operator(
        id=profile["id"],
        user_id=user_id,
        display_name=profile.get("display_name") or "",
    )


def detect_native_shell(user_agent: str | None) -> bool:
    """True when the user agent belongs to the native app shell."""
    if not user_agent:
        return False
    return NATIVE_SHELL_MARKER in user_agent.lower()
