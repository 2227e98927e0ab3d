"""Session and operator resolution tests"""

import pytest

from fitconnect.exceptions import NotAuthenticatedError, OperatorNotFoundError
from fitconnect.session import (
    Operator,
    SessionProvider,
    StaticSession,
    detect_native_shell,
    resolve_operator,
)
from fitconnect.store.memory import MemoryStore


@pytest.fixture
def store():
    return MemoryStore({
        "coach_profiles": [{"id": "coach-1", "user_id": "u1", "display_name": "Coach Kim"}],
    })


class TestResolveOperator:
    @pytest.mark.asyncio
    async def test_resolves_coach(self, store):
        operator = await resolve_operator(StaticSession("u1"), store)
        assert operator == Operator(id="coach-1", user_id="u1", display_name="Coach Kim")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [None, ""])
    async def test_signed_out(self, store, user_id):
        with pytest.raises(NotAuthenticatedError):
            await resolve_operator(StaticSession(user_id), store)

    @pytest.mark.asyncio
    async def test_no_coach_profile(self, store):
        with pytest.raises(OperatorNotFoundError) as exc_info:
            await resolve_operator(StaticSession("u2"), store)
        assert exc_info.value.user_id == "u2"

    def test_static_session_is_a_provider(self):
        assert isinstance(StaticSession("u1"), SessionProvider)


class TestDetectNativeShell:
    @pytest.mark.parametrize(
        "user_agent, expected",
        [
            ("Mozilla/5.0 (iPhone) AppleWebKit/605.1.15 Despia/2.1", True),
            ("mozilla/5.0 despia", True),
            ("Mozilla/5.0 (Macintosh) Safari/605.1.15", False),
            ("", False),
            (None, False),
        ],
    )
    def test_user_agents(self, user_agent, expected):
        assert detect_native_shell(user_agent) is expected
