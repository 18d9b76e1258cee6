"""Unit tests for the reassertion loop."""

import asyncio

import pytest

from test_helpers import FakeScreensaver
from xees.daemon.reassert import ReassertionLoop, TickOutcome
from xees.daemon.state import SuppressionState


def make_loop(
    screensaver: FakeScreensaver, tick_interval: float = 0.02
) -> ReassertionLoop:
    return ReassertionLoop(
        SuppressionState(), screensaver, tick_interval, asyncio.Event()
    )


class TestTick:
    """Test what one tick does in each state."""

    @pytest.mark.asyncio
    async def test_tick_is_idle_while_enabled(self) -> None:
        """Test no tool call happens when suppression is off."""
        screensaver = FakeScreensaver()
        loop = make_loop(screensaver)

        assert await loop.tick() is TickOutcome.IDLE
        assert screensaver.probes == 0

    @pytest.mark.asyncio
    async def test_tick_deactivates_unlocked_screen(self) -> None:
        """Test an unlocked screen gets deactivated while disabled."""
        screensaver = FakeScreensaver(locked=False)
        loop = make_loop(screensaver)
        loop.state.disable(None)

        assert await loop.tick() is TickOutcome.DEACTIVATED
        assert screensaver.deactivations == 1

    @pytest.mark.asyncio
    async def test_tick_leaves_locked_screen_alone(self) -> None:
        """Test a manually locked screen is not unlocked."""
        screensaver = FakeScreensaver(locked=True)
        loop = make_loop(screensaver)
        loop.state.disable(None)

        assert await loop.tick() is TickOutcome.LOCKED
        assert screensaver.deactivations == 0

    @pytest.mark.asyncio
    async def test_tick_skips_deactivate_after_enable_during_probe(self) -> None:
        """Test an enable that lands mid-tick stops the deactivate call."""
        screensaver = FakeScreensaver()
        loop = make_loop(screensaver)
        loop.state.disable(None)
        screensaver.on_probe = loop.state.enable

        assert await loop.tick() is TickOutcome.IDLE
        assert screensaver.deactivations == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "screensaver",
        [FakeScreensaver(probe_error=True), FakeScreensaver(deactivate_error=True)],
    )
    async def test_tool_failure_skips_tick(self, screensaver: FakeScreensaver) -> None:
        """Test tool errors are reported as a failed tick, not raised."""
        loop = make_loop(screensaver)
        loop.state.disable(None)

        assert await loop.tick() is TickOutcome.FAILED
        assert loop.state.active is True


class TestRun:
    """Test the long-running loop."""

    @pytest.mark.asyncio
    async def test_run_keeps_deactivating_while_disabled(self) -> None:
        """Test the loop ticks repeatedly and stops on the event."""
        screensaver = FakeScreensaver()
        loop = make_loop(screensaver)
        loop.state.disable(None)

        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.15)
        loop.stop_event.set()
        await asyncio.wait_for(task, 1.0)

        assert screensaver.deactivations >= 2

    @pytest.mark.asyncio
    async def test_run_survives_tool_failures(self) -> None:
        """Test failing ticks do not end the loop."""
        screensaver = FakeScreensaver(probe_error=True)
        loop = make_loop(screensaver)
        loop.state.disable(None)

        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.1)
        screensaver.probe_error = False
        await asyncio.sleep(0.1)
        loop.stop_event.set()
        await asyncio.wait_for(task, 1.0)

        assert screensaver.probes >= 3
        assert screensaver.deactivations >= 1

    @pytest.mark.asyncio
    async def test_run_survives_unexpected_tick_error(self) -> None:
        """Test an error outside the tool taxonomy does not end the loop."""
        screensaver = FakeScreensaver()
        screensaver.next_lock_check_error = ProcessLookupError("child vanished during kill")
        loop = make_loop(screensaver)
        loop.state.disable(None)

        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.2)

        assert task.done() is False
        assert screensaver.deactivations >= 1

        loop.stop_event.set()
        await asyncio.wait_for(task, 1.0)
        assert task.exception() is None

    @pytest.mark.asyncio
    async def test_run_exits_when_shutdown_requested(self) -> None:
        """Test the shutdown flag ends the loop before any tool call."""
        screensaver = FakeScreensaver()
        loop = make_loop(screensaver)
        loop.state.disable(None)
        loop.state.request_shutdown()

        await asyncio.wait_for(loop.run(), 1.0)

        assert screensaver.probes == 0

    @pytest.mark.asyncio
    async def test_stop_event_interrupts_long_tick_wait(self) -> None:
        """Test shutdown is prompt even with a long tick interval."""
        loop = make_loop(FakeScreensaver(), tick_interval=60)

        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.05)
        loop.stop_event.set()

        await asyncio.wait_for(task, 1.0)
