"""Recurring Codeforces profile refresh per tracked user.

Each tracked user owns exactly one :class:`TrackingRegistration` holding the
handle and a cancellable timer. A tick fetches the profile, overwrites the
stored snapshot and broadcasts a ``codeforces_profile_update`` envelope.

Everything here runs on the event loop thread; ``start``/``stop`` are plain
synchronous calls so no tick can interleave with a restart. Cancelling a timer
does not cancel a tick that is already in flight; that tick may still write and
broadcast once after ``stop``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from fastapi.concurrency import run_in_threadpool

from algoz.core.settings import settings
from algoz.schemas.realtime import ProfileSnapshot, ProfileUpdateMessage

logger = logging.getLogger(__name__)


class ProfileSource(Protocol):
    async def fetch_profile(self, handle: str) -> ProfileSnapshot: ...


class ProfileStore(Protocol):
    def save_snapshot(
        self, user_id: int, handle: str, snapshot: ProfileSnapshot
    ) -> ProfileSnapshot: ...


class Broadcaster(Protocol):
    async def broadcast(self, message: ProfileUpdateMessage) -> int: ...


class RecurringTimer:
    """Fixed-interval timer on the running loop that re-arms before each callback."""

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._interval = interval
        self._callback = callback
        self._loop = loop or asyncio.get_running_loop()
        self._handle: asyncio.Handle | None = None
        self._cancelled = False
        self.fire_count = 0

    @property
    def active(self) -> bool:
        return not self._cancelled

    def start(self, *, immediate: bool = False) -> None:
        if immediate:
            self._handle = self._loop.call_soon(self._fire)
        else:
            self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval, self._fire)
        self.fire_count += 1
        try:
            self._callback()
        except Exception:
            logger.exception("Recurring timer callback failed")

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


@dataclass
class TrackingRegistration:
    user_id: int
    handle: str
    timer: RecurringTimer


class ProfileUpdateScheduler:
    def __init__(
        self,
        *,
        source: ProfileSource,
        store: ProfileStore,
        broadcaster: Broadcaster,
        interval: Optional[float] = None,
        fire_immediately: Optional[bool] = None,
    ) -> None:
        self._source = source
        self._store = store
        self._broadcaster = broadcaster
        self._interval = (
            interval if interval is not None else settings.profile_refresh_interval_seconds
        )
        self._fire_immediately = (
            fire_immediately
            if fire_immediately is not None
            else settings.profile_refresh_fire_immediately
        )
        self._registrations: dict[int, TrackingRegistration] = {}
        self._inflight: set[asyncio.Task] = set()

    # ---------- registration ----------

    def start(self, user_id: int, handle: str) -> TrackingRegistration:
        """Replace any existing registration for `user_id` and arm a new timer."""
        self.stop(user_id)
        timer = RecurringTimer(self._interval, lambda: self._spawn_tick(user_id, handle))
        registration = TrackingRegistration(user_id=user_id, handle=handle, timer=timer)
        self._registrations[user_id] = registration
        timer.start(immediate=self._fire_immediately)
        logger.info(
            "Started real-time updates for Codeforces profile %s (user %s, every %ss)",
            handle,
            user_id,
            self._interval,
        )
        return registration

    def stop(self, user_id: int) -> bool:
        registration = self._registrations.pop(user_id, None)
        if registration is None:
            return False
        registration.timer.cancel()
        logger.info("Stopped real-time updates for user %s", user_id)
        return True

    def is_tracking(self, user_id: int) -> bool:
        return user_id in self._registrations

    def handle_for(self, user_id: int) -> str | None:
        registration = self._registrations.get(user_id)
        return registration.handle if registration else None

    @property
    def tracked_users(self) -> list[int]:
        return list(self._registrations)

    @property
    def pending_ticks(self) -> int:
        return len(self._inflight)

    # ---------- ticks ----------

    def _spawn_tick(self, user_id: int, handle: str) -> None:
        task = asyncio.get_running_loop().create_task(
            self.run_tick(user_id, handle), name=f"profile-refresh-{user_id}"
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def run_tick(self, user_id: int, handle: str) -> bool:
        """Fetch, store and broadcast one refresh. Returns False when the tick was skipped."""
        logger.debug("Refreshing Codeforces profile for user %s, handle: %s", user_id, handle)
        try:
            snapshot = await self._source.fetch_profile(handle)
            stored = await run_in_threadpool(self._store.save_snapshot, user_id, handle, snapshot)
        except Exception:
            logger.exception("Error updating Codeforces profile for %s (user %s)", handle, user_id)
            return False

        try:
            await self._broadcaster.broadcast(
                ProfileUpdateMessage(user_id=user_id, handle=handle, data=stored)
            )
        except Exception:
            logger.exception("Failed to broadcast profile update for user %s", user_id)
            return False
        logger.info("Successfully updated Codeforces profile for %s", handle)
        return True

    async def refresh_now(self, user_id: int) -> bool:
        """Run one tick immediately for a tracked user (the timer keeps its schedule)."""
        registration = self._registrations.get(user_id)
        if registration is None:
            return False
        return await self.run_tick(user_id, registration.handle)

    async def shutdown(self) -> None:
        """Cancel every timer and any refresh still in flight."""
        for user_id in list(self._registrations):
            self.stop(user_id)
        tasks = list(self._inflight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Profile update scheduler stopped (%d in-flight refreshes cancelled)", len(tasks))


__all__ = ["ProfileUpdateScheduler", "RecurringTimer", "TrackingRegistration"]
