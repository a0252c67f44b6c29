"""
Registry of running tracking sessions, one per pet.
"""

import asyncio
import logging
from typing import Dict, Optional

from pettrack.core.config import settings
from pettrack.db.database import SessionFactory, SessionLocal, session_scope
from pettrack.schemas.location_history import HistoryEntry, HistoryEntryCreate
from pettrack.schemas.tracking import SessionState
from pettrack.services.history_service import history_service
from pettrack.services.location_feed_service import LocationFeedService, location_feed_service
from pettrack.services.sampling_policy import SamplingPolicy
from pettrack.services.tracking_session import TrackingSession

logger = logging.getLogger(__name__)


class TrackingManager:
    """
    Keeps at most one running TrackingSession per pet.

    Sessions write history through their own short-lived database sessions,
    since they outlive the request that started them. Writes run in a worker
    thread so a slow database does not block the event loop.
    """

    def __init__(
        self,
        feed: LocationFeedService = location_feed_service,
        session_factory: SessionFactory = SessionLocal,
    ):
        self.feed = feed
        self.session_factory = session_factory
        self._sessions: Dict[int, TrackingSession] = {}

    def _append_history(self, pet_id: int, entry: HistoryEntryCreate) -> HistoryEntry:
        with session_scope(self.session_factory) as db:
            return history_service.append(db, pet_id, entry)

    async def _write_history(self, pet_id: int, entry: HistoryEntryCreate) -> HistoryEntry:
        return await asyncio.to_thread(self._append_history, pet_id, entry)

    async def start_tracking(self, pet_id: int, tracked_entity_id: str) -> TrackingSession:
        """
        Start tracking a pet, or return its session if already running.

        A running session polling another device is replaced by a new one.
        """
        session = self._sessions.get(pet_id)
        if session is not None and session.state is SessionState.RUNNING:
            if session.tracked_entity_id == tracked_entity_id:
                return session
            logger.info(
                "Device of pet %s changed from %s to %s, restarting tracking",
                pet_id,
                session.tracked_entity_id,
                tracked_entity_id,
            )
            await self.stop_tracking(pet_id)

        session = TrackingSession(
            pet_id=pet_id,
            tracked_entity_id=tracked_entity_id,
            feed=self.feed,
            history_writer=self._write_history,
            policy=SamplingPolicy.from_settings(),
            poll_interval=settings.TRACKING_POLL_INTERVAL_SECONDS,
        )
        session.start()
        self._sessions[pet_id] = session
        return session

    async def retarget(self, pet_id: int, tracked_entity_id: str) -> Optional[TrackingSession]:
        """
        Point a running session at the pet's current device.

        Returns:
            The running session, or None if the pet is not tracked
        """
        session = self._sessions.get(pet_id)
        if session is None or session.state is not SessionState.RUNNING:
            return None
        return await self.start_tracking(pet_id, tracked_entity_id)

    async def stop_tracking(self, pet_id: int) -> bool:
        """
        Stop tracking a pet.

        Returns:
            True if a session was stopped, False if none was registered
        """
        session = self._sessions.pop(pet_id, None)
        if session is None:
            return False
        await session.stop()
        return True

    def get_session(self, pet_id: int) -> Optional[TrackingSession]:
        return self._sessions.get(pet_id)

    @property
    def active_count(self) -> int:
        return sum(
            1 for session in self._sessions.values() if session.state is SessionState.RUNNING
        )

    async def stop_all(self) -> None:
        """Stop every session; used at application shutdown."""
        pet_ids = list(self._sessions)
        for pet_id in pet_ids:
            await self.stop_tracking(pet_id)
        if pet_ids:
            logger.info("Stopped %d tracking sessions", len(pet_ids))


# Singleton instance for dependency injection
tracking_manager = TrackingManager()
