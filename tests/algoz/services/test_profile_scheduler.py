from __future__ import annotations

import asyncio
from typing import Callable

import pytest
from algoz.schemas.realtime import ProfileSnapshot, ProfileUpdateMessage
from algoz.services.profile_scheduler import ProfileUpdateScheduler, RecurringTimer


class FakeSource:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.fail_next = 0
        self.gate: asyncio.Event | None = None

    async def fetch_profile(self, handle: str) -> ProfileSnapshot:
        self.calls.append(handle)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_next:
            self.fail_next -= 1
            raise RuntimeError("codeforces down")
        return ProfileSnapshot(rating=1500 + len(self.calls), profile_data={"handle": handle})


class FakeStore:
    def __init__(self) -> None:
        self.saved: list[tuple[int, str, ProfileSnapshot]] = []

    def save_snapshot(self, user_id: int, handle: str, snapshot: ProfileSnapshot) -> ProfileSnapshot:
        self.saved.append((user_id, handle, snapshot))
        return snapshot


class FakeBroadcaster:
    def __init__(self) -> None:
        self.messages: list[ProfileUpdateMessage] = []

    async def broadcast(self, message: ProfileUpdateMessage) -> int:
        self.messages.append(message)
        return 1


async def _wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


def _scheduler(interval: float = 0.02, fire_immediately: bool = False):
    source, store, broadcaster = FakeSource(), FakeStore(), FakeBroadcaster()
    scheduler = ProfileUpdateScheduler(
        source=source,
        store=store,
        broadcaster=broadcaster,
        interval=interval,
        fire_immediately=fire_immediately,
    )
    return scheduler, source, store, broadcaster


@pytest.mark.asyncio
async def test_restart_keeps_a_single_registration_per_user():
    scheduler, source, _store, _broadcaster = _scheduler(interval=0.02)
    first = scheduler.start(1, "alice")
    second = scheduler.start(1, "alice_alt")

    assert scheduler.tracked_users == [1]
    assert scheduler.handle_for(1) == "alice_alt"
    assert not first.timer.active
    assert second.timer.active

    await _wait_for(lambda: len(source.calls) >= 2)
    assert set(source.calls) == {"alice_alt"}
    await scheduler.shutdown()


@pytest.mark.asyncio
async def test_ticks_store_then_broadcast_to_everyone():
    scheduler, _source, store, broadcaster = _scheduler(interval=0.01)
    scheduler.start(5, "tourist")

    await _wait_for(lambda: len(broadcaster.messages) >= 2)
    await scheduler.shutdown()

    message = broadcaster.messages[0]
    assert message.user_id == 5
    assert message.handle == "tourist"
    assert message.data in [saved for _uid, _handle, saved in store.saved]
    assert len(store.saved) >= len(broadcaster.messages)


@pytest.mark.asyncio
async def test_first_tick_waits_one_interval_by_default():
    scheduler, source, _store, _broadcaster = _scheduler(interval=10)
    scheduler.start(1, "alice")
    await asyncio.sleep(0.05)
    assert source.calls == []
    await scheduler.shutdown()


@pytest.mark.asyncio
async def test_fire_immediately_runs_first_tick_right_away():
    scheduler, source, _store, broadcaster = _scheduler(interval=10, fire_immediately=True)
    scheduler.start(1, "alice")
    await _wait_for(lambda: len(broadcaster.messages) == 1)
    assert source.calls == ["alice"]
    await scheduler.shutdown()


@pytest.mark.asyncio
async def test_failed_tick_is_skipped_and_timer_keeps_running():
    scheduler, source, store, broadcaster = _scheduler(interval=0.01)
    source.fail_next = 1
    scheduler.start(2, "bob")

    await _wait_for(lambda: len(broadcaster.messages) >= 1)
    await scheduler.shutdown()

    assert len(source.calls) >= 2
    # The failed fetch wrote nothing and broadcast nothing.
    assert len(store.saved) <= len(source.calls) - 1
    assert len(broadcaster.messages) <= len(store.saved)
    assert scheduler.tracked_users == []


@pytest.mark.asyncio
async def test_run_tick_reports_store_failures():
    scheduler, _source, store, broadcaster = _scheduler()

    def broken_save(*_args):  # noqa: ANN002, ANN202
        raise RuntimeError("db locked")

    store.save_snapshot = broken_save  # type: ignore[method-assign]
    assert await scheduler.run_tick(3, "carol") is False
    assert broadcaster.messages == []


@pytest.mark.asyncio
async def test_stop_prevents_further_ticks():
    scheduler, source, _store, _broadcaster = _scheduler(interval=0.01)
    scheduler.start(1, "alice")
    await _wait_for(lambda: len(source.calls) >= 1)

    assert scheduler.stop(1) is True
    await _wait_for(lambda: scheduler.pending_ticks == 0)
    seen = len(source.calls)
    await asyncio.sleep(0.05)

    assert len(source.calls) == seen
    assert not scheduler.is_tracking(1)
    assert scheduler.stop(1) is False


@pytest.mark.asyncio
async def test_stop_does_not_cancel_a_tick_already_in_flight():
    scheduler, source, store, broadcaster = _scheduler(interval=10, fire_immediately=True)
    source.gate = asyncio.Event()
    scheduler.start(1, "alice")
    await _wait_for(lambda: source.calls == ["alice"])

    scheduler.stop(1)
    assert scheduler.pending_ticks == 1
    source.gate.set()

    await _wait_for(lambda: scheduler.pending_ticks == 0)
    assert len(store.saved) == 1
    assert len(broadcaster.messages) == 1


@pytest.mark.asyncio
async def test_shutdown_cancels_in_flight_ticks():
    scheduler, source, store, broadcaster = _scheduler(interval=10, fire_immediately=True)
    source.gate = asyncio.Event()
    scheduler.start(1, "alice")
    scheduler.start(2, "bob")
    await _wait_for(lambda: len(source.calls) == 2)

    await scheduler.shutdown()

    assert scheduler.tracked_users == []
    assert scheduler.pending_ticks == 0
    assert store.saved == []
    assert broadcaster.messages == []


@pytest.mark.asyncio
async def test_refresh_now_only_for_tracked_users():
    scheduler, _source, _store, broadcaster = _scheduler(interval=10)
    assert await scheduler.refresh_now(9) is False

    scheduler.start(9, "dave")
    assert await scheduler.refresh_now(9) is True
    assert broadcaster.messages[-1].handle == "dave"
    await scheduler.shutdown()


@pytest.mark.asyncio
async def test_recurring_timer_rearms_until_cancelled():
    fired: list[int] = []
    timer = RecurringTimer(0.01, lambda: fired.append(1))
    timer.start()
    await _wait_for(lambda: len(fired) >= 3)
    timer.cancel()
    count = len(fired)
    await asyncio.sleep(0.04)
    assert len(fired) == count
    assert timer.fire_count == count
    assert not timer.active


@pytest.mark.asyncio
async def test_recurring_timer_survives_callback_errors():
    calls: list[int] = []

    def flaky() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise ValueError("first call fails")

    timer = RecurringTimer(0.01, flaky)
    timer.start()
    await _wait_for(lambda: len(calls) >= 2)
    timer.cancel()


@pytest.mark.asyncio
async def test_tick_writes_snapshot_to_sql_store_and_broadcasts_it(db_session):
    from contextlib import contextmanager

    from algoz.services.codeforces_profiles import SqlProfileStore

    @contextmanager
    def factory():
        yield db_session

    class StubSource:
        async def fetch_profile(self, handle: str) -> ProfileSnapshot:
            assert handle == "tourist"
            return ProfileSnapshot(rating=1500, max_rating=1600, rank="expert", problems_solved=120)

    store = SqlProfileStore(factory)
    broadcaster = FakeBroadcaster()
    scheduler = ProfileUpdateScheduler(
        source=StubSource(), store=store, broadcaster=broadcaster, interval=10
    )
    scheduler.start(11, "tourist")

    assert await scheduler.refresh_now(11) is True
    await scheduler.shutdown()

    expected = ProfileSnapshot(rating=1500, max_rating=1600, rank="expert", problems_solved=120)
    assert store.load_snapshot(11) == expected
    (message,) = broadcaster.messages
    assert message.data == expected
    assert message.handle == "tourist"
