"""
Tracking session: polls the location feed for one pet and records history.

Lifecycle is IDLE -> RUNNING -> STOPPED. A stopped session is never
restarted; a new session is built instead, so a stale timer can never come
back to life.
"""

import asyncio
import contextlib
import inspect
import logging
import time
from typing import Any, Callable, List, Optional

from pettrack.schemas.location_history import HistoryEntryCreate
from pettrack.schemas.tracking import LocationFix, SessionState, TrackingSessionState
from pettrack.services.history_service import StoreError
from pettrack.services.location_feed_service import FeedUnavailableError, LocationFeedService
from pettrack.services.sampling_policy import SamplingPolicy

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30.0

HistoryWriter = Callable[[int, HistoryEntryCreate], Any]
Observer = Callable[[TrackingSessionState], None]


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class SessionStateError(Exception):
    """Raised on an illegal lifecycle call, e.g. starting a stopped session."""


class TrackingSession:
    """
    Periodic poll of one tracked entity.

    Each tick polls the feed, updates the transient session state, asks the
    sampling policy whether the fix goes to history and notifies observers.
    Ticks never overlap, and once `stop()` returns no poll result is applied
    and nothing more is written.

    The history writer may be a plain callable or a coroutine function; an
    awaited write that is under way when `stop()` is called is finished
    before `stop()` returns.
    """

    def __init__(
        self,
        pet_id: int,
        tracked_entity_id: str,
        feed: LocationFeedService,
        history_writer: HistoryWriter,
        policy: Optional[SamplingPolicy] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Callable[[], int] = _wall_clock_ms,
    ):
        self.pet_id = pet_id
        self.tracked_entity_id = tracked_entity_id
        self._feed = feed
        self._history_writer = history_writer
        self._policy = policy or SamplingPolicy()
        self._poll_interval = poll_interval
        self._clock = clock

        self._state = SessionState.IDLE
        self._status = TrackingSessionState()
        self._observers: List[Observer] = []
        self._task: Optional[asyncio.Task] = None
        self._pending_write: Optional[asyncio.Future] = None
        self._poll_in_flight = False

    @property
    def state(self) -> SessionState:
        return self._state

    def snapshot(self) -> TrackingSessionState:
        """Copy of the current session state."""
        return self._status.model_copy()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer called with a state snapshot after every poll.

        Returns:
            Callable removing the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._observers.remove(observer)

        return unsubscribe

    def start(self) -> None:
        """
        Start polling: one poll right away, then one every poll interval.

        Must be called from a running event loop.

        Raises:
            SessionStateError: If the session is not idle
        """
        if self._state is not SessionState.IDLE:
            raise SessionStateError(
                f"Cannot start a {self._state.value} tracking session for pet {self.pet_id}"
            )

        self._state = SessionState.RUNNING
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"tracking-pet-{self.pet_id}"
        )
        logger.info(
            "Started tracking pet %s (device %s, every %.0fs)",
            self.pet_id,
            self.tracked_entity_id,
            self._poll_interval,
        )

    async def stop(self) -> None:
        """
        Stop polling and drop all observers. A no-op unless running.
        """
        if self._state is not SessionState.RUNNING:
            return

        self._state = SessionState.STOPPED
        self._observers.clear()

        pending_write = self._pending_write
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if pending_write is not None:
            try:
                await pending_write
            except StoreError as e:
                logger.error(
                    "Could not persist location of pet %s while stopping: %s", self.pet_id, str(e)
                )

        logger.info("Stopped tracking pet %s", self.pet_id)

    async def _run(self) -> None:
        """Poll loop. Only `stop()` ends it."""
        loop = asyncio.get_running_loop()
        try:
            while self._state is SessionState.RUNNING:
                started = loop.time()
                await self.poll_once()
                elapsed = loop.time() - started
                await asyncio.sleep(max(0.0, self._poll_interval - elapsed))
        except asyncio.CancelledError:
            logger.debug("Tracking task cancelled for pet %s", self.pet_id)
            raise

    async def poll_once(self) -> bool:
        """
        Poll the feed once and apply the result.

        Returns:
            True if a result was applied; False if the session is not running,
            a poll was already in flight, or the session stopped mid-poll
        """
        if self._state is not SessionState.RUNNING:
            return False
        if self._poll_in_flight:
            logger.debug("Poll already in flight for pet %s, skipping tick", self.pet_id)
            return False

        self._poll_in_flight = True
        try:
            try:
                fix = await self._feed.poll_latest(self.tracked_entity_id)
            except FeedUnavailableError as e:
                error: Optional[str] = str(e)
                fix = None
            except Exception as e:  # pylint: disable=broad-except
                logger.exception("Unexpected error polling feed for pet %s", self.pet_id)
                error = f"Unexpected error: {str(e)}"
                fix = None
            else:
                error = None if fix is not None else "No location data available"

            # stop() may have run while the poll was awaited
            if self._state is not SessionState.RUNNING:
                logger.debug("Discarding poll result for stopped session of pet %s", self.pet_id)
                return False

            if fix is None:
                self._mark_offline(error or "No location data available")
            else:
                return await self._apply_fix(fix)
            return True
        finally:
            self._poll_in_flight = False

    def _mark_offline(self, message: str) -> None:
        logger.warning("Device for pet %s unavailable: %s", self.pet_id, message)
        self._status.device_online = False
        self._status.last_error = message
        self._notify()

    async def _apply_fix(self, fix: LocationFix) -> bool:
        status = self._status
        now_ms = self._clock()

        status.last_reported_coordinate = fix.coordinates
        status.last_reported_at_ms = now_ms
        status.device_online = True
        status.last_error = None
        if fix.battery_percent is not None:
            status.battery_percent = fix.battery_percent

        # Wall clock may step back; history must not
        captured_at_ms = now_ms
        if status.last_persisted_at_ms is not None:
            captured_at_ms = max(now_ms, status.last_persisted_at_ms)

        if self._policy.should_persist(
            fix.coordinates,
            captured_at_ms,
            status.last_persisted_coordinate,
            status.last_persisted_at_ms,
        ):
            entry = HistoryEntryCreate(coordinates=fix.coordinates, captured_at_ms=captured_at_ms)
            try:
                await self._persist(entry)
            except StoreError as e:
                if self._state is not SessionState.RUNNING:
                    return False
                logger.error("Could not persist location of pet %s: %s", self.pet_id, str(e))
                status.last_error = str(e)
            else:
                if self._state is not SessionState.RUNNING:
                    return False
                status.last_persisted_coordinate = fix.coordinates
                status.last_persisted_at_ms = captured_at_ms

        self._notify()
        return True

    async def _persist(self, entry: HistoryEntryCreate) -> None:
        result = self._history_writer(self.pet_id, entry)
        if not inspect.isawaitable(result):
            return

        write = asyncio.ensure_future(result)
        self._pending_write = write
        try:
            # Cancelling the poll must not abandon a write stop() waits for
            await asyncio.shield(write)
        finally:
            if self._pending_write is write:
                self._pending_write = None

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Tracking observer failed for pet %s", self.pet_id)
