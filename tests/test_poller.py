"""
Tests for periodic polling and cancellation.
"""

import asyncio

import pytest

from portal.utils.poller import Poller


class TestPoller:

    def test_interval_must_be_positive(self):
        async def fetch():
            return None

        with pytest.raises(ValueError):
            Poller(fetch, interval=0)

    async def test_delivers_results_in_order(self):
        counter = {"n": 0}
        seen = []
        done = asyncio.Event()

        async def fetch():
            counter["n"] += 1
            return counter["n"]

        def on_result(value):
            seen.append(value)
            if len(seen) == 3:
                done.set()

        poller = Poller(fetch, on_result=on_result, interval=0.01).start()
        await asyncio.wait_for(done.wait(), timeout=2)
        await poller.stop()

        assert seen[:3] == [1, 2, 3]
        assert poller.ticks >= 3
        assert poller.running is False

    async def test_stop_prevents_further_fetches(self):
        calls = []

        async def fetch():
            calls.append(1)
            return len(calls)

        poller = Poller(fetch, interval=0.01)
        async with poller:
            while not calls:
                await asyncio.sleep(0.005)

        count = len(calls)
        await asyncio.sleep(0.05)
        assert len(calls) == count
        assert poller.running is False

    async def test_stop_cancels_a_fetch_in_flight(self):
        started = asyncio.Event()
        finished = []

        async def fetch():
            started.set()
            await asyncio.sleep(10)
            finished.append(True)

        poller = Poller(fetch, interval=0.01).start()
        await asyncio.wait_for(started.wait(), timeout=2)
        await poller.stop()

        assert finished == []
        assert poller.ticks == 0

    async def test_errors_do_not_stop_polling(self):
        attempts = {"n": 0}
        errors = []
        results = []
        done = asyncio.Event()

        async def fetch():
            attempts["n"] += 1
            if attempts["n"] == 1:
                raise ConnectionError("offline")
            return attempts["n"]

        async def on_result(value):
            results.append(value)
            done.set()

        poller = Poller(fetch, on_result=on_result, on_error=errors.append, interval=0.01).start()
        await asyncio.wait_for(done.wait(), timeout=2)
        await poller.stop()

        assert poller.errors == 1
        assert isinstance(errors[0], ConnectionError)
        assert results[0] == 2

    async def test_cannot_start_twice(self):
        async def fetch():
            return None

        poller = Poller(fetch, interval=1).start()
        try:
            with pytest.raises(RuntimeError):
                poller.start()
        finally:
            await poller.stop()

    async def test_stop_before_start_is_a_no_op(self):
        async def fetch():
            return None

        await Poller(fetch, interval=1).stop()

    async def test_delayed_first_tick(self):
        calls = []

        async def fetch():
            calls.append(1)

        poller = Poller(fetch, interval=5, run_immediately=False).start()
        await asyncio.sleep(0.02)
        await poller.stop()

        assert calls == []

    async def test_poll_once(self):
        async def fetch():
            return "ok"

        poller = Poller(fetch, interval=1)
        assert await poller.poll_once() == "ok"
        assert poller.last_result == "ok"
        assert poller.ticks == 1
