"""Unit tests for the asyncio debouncer."""

import asyncio

import pytest

from parking_admin.infra.debounce import Debouncer


class TestDebouncer:
    """Tests for Debouncer."""

    @pytest.mark.asyncio
    async def test_fires_once_after_last_schedule(self) -> None:
        calls: list[int] = []

        async def callback() -> None:
            calls.append(1)

        debouncer = Debouncer(0.05, callback)
        debouncer.schedule()
        debouncer.schedule()
        debouncer.schedule()

        assert debouncer.pending
        await debouncer.join()

        assert calls == [1]
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_does_not_fire_before_delay(self) -> None:
        calls: list[int] = []

        async def callback() -> None:
            calls.append(1)

        debouncer = Debouncer(0.2, callback)
        debouncer.schedule()
        await asyncio.sleep(0.05)

        assert calls == []
        debouncer.close()

    @pytest.mark.asyncio
    async def test_reschedule_restarts_timer(self) -> None:
        calls: list[float] = []
        loop = asyncio.get_running_loop()

        async def callback() -> None:
            calls.append(loop.time())

        debouncer = Debouncer(0.1, callback)
        debouncer.schedule()
        await asyncio.sleep(0.06)
        rescheduled_at = loop.time()
        debouncer.schedule()
        await debouncer.join()

        assert len(calls) == 1
        assert calls[0] - rescheduled_at >= 0.09

    @pytest.mark.asyncio
    async def test_cancel_prevents_fire(self) -> None:
        calls: list[int] = []

        async def callback() -> None:
            calls.append(1)

        debouncer = Debouncer(0.02, callback)
        debouncer.schedule()
        debouncer.cancel()
        await asyncio.sleep(0.05)

        assert calls == []
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_close_refuses_new_schedules(self) -> None:
        calls: list[int] = []

        async def callback() -> None:
            calls.append(1)

        debouncer = Debouncer(0.01, callback)
        debouncer.close()
        debouncer.schedule()
        await asyncio.sleep(0.03)

        assert debouncer.closed
        assert not debouncer.pending
        assert calls == []

    @pytest.mark.asyncio
    async def test_schedule_does_not_cancel_running_callback(self) -> None:
        started = asyncio.Event()
        release = asyncio.Event()
        finished: list[int] = []

        async def callback() -> None:
            started.set()
            await release.wait()
            finished.append(1)

        debouncer = Debouncer(0.01, callback)
        debouncer.schedule()
        await started.wait()

        assert not debouncer.pending
        debouncer.schedule()
        release.set()
        await debouncer.join()

        assert finished == [1, 1]

    @pytest.mark.asyncio
    async def test_callback_exception_is_logged(self, caplog) -> None:
        async def callback() -> None:
            raise RuntimeError("boom")

        debouncer = Debouncer(0.01, callback)
        debouncer.schedule()
        await debouncer.join()

        assert "Debounced callback failed" in caplog.text

    @pytest.mark.asyncio
    async def test_join_without_schedule_returns(self) -> None:
        async def callback() -> None:
            pass

        await Debouncer(0.01, callback).join()
