"""Tests for resume/signals.py: visibility/focus wiring and the native focus quiet window."""

import asyncio

import pytest

from fitconnect.resume.coordinator import ResumeCoordinator
from fitconnect.resume.handlers import ResumeHandler
from fitconnect.resume.signals import ResumeSignals


def make_pair(native: bool, quiet_ms: int = 50, debounce_ms: int = 0):
    coord = ResumeCoordinator(
        is_native_shell=lambda: native,
        debounce_ms=debounce_ms,
        settle_ms=0,
        fast_delay_ms=0,
    )
    calls: list[str] = []
    coord.register_handler(ResumeHandler("refresh", "immediate", lambda: calls.append("refresh")))
    signals = ResumeSignals(coord, native_focus_quiet_ms=quiet_ms)
    return coord, signals, calls


class TestVisibility:
    @pytest.mark.asyncio
    async def test_visible_triggers_resume(self):
        _, signals, calls = make_pair(native=False)

        task = signals.on_visibility_change(True)
        assert task is not None
        assert await task is True
        assert calls == ["refresh"]

    @pytest.mark.asyncio
    async def test_hidden_is_ignored(self):
        _, signals, calls = make_pair(native=False)

        assert signals.on_visibility_change(False) is None
        await signals.wait_idle()
        assert calls == []


class TestFocus:
    @pytest.mark.asyncio
    async def test_browser_focus_triggers_directly(self):
        _, signals, calls = make_pair(native=False)

        task = signals.on_focus()
        assert task is not None
        await task
        assert calls == ["refresh"]

    @pytest.mark.asyncio
    async def test_native_focus_waits_for_quiet_window(self):
        _, signals, calls = make_pair(native=True, quiet_ms=50)

        assert signals.on_focus() is None
        assert signals.focus_pending is True
        await asyncio.sleep(0.02)
        assert calls == []

        await asyncio.sleep(0.06)
        await signals.wait_idle()
        assert calls == ["refresh"]
        assert signals.focus_pending is False

    @pytest.mark.asyncio
    async def test_chatty_native_focus_collapses_to_one(self):
        _, signals, calls = make_pair(native=True, quiet_ms=40)

        for _ in range(5):
            signals.on_focus()
            await asyncio.sleep(0.01)

        await asyncio.sleep(0.08)
        await signals.wait_idle()
        assert calls == ["refresh"]

    @pytest.mark.asyncio
    async def test_close_drops_pending_focus(self):
        _, signals, calls = make_pair(native=True, quiet_ms=20)

        signals.on_focus()
        signals.close()
        await asyncio.sleep(0.05)

        assert calls == []
        assert signals.focus_pending is False


class TestCombinedSignals:
    @pytest.mark.asyncio
    async def test_visibility_and_focus_for_same_resume_run_once(self):
        _, signals, calls = make_pair(native=True, quiet_ms=20, debounce_ms=2000)

        await signals.on_visibility_change(True)
        signals.on_focus()
        await asyncio.sleep(0.05)
        await signals.wait_idle()

        assert calls == ["refresh"]
