import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.orm import Session, sessionmaker

from pettrack.models.location_history import LocationHistoryEntry
from pettrack.models.pet import Pet
from pettrack.models.user import User
from pettrack.schemas.geo import Coordinates
from pettrack.schemas.tracking import LocationFix, SessionState
from pettrack.services.tracking_manager import TrackingManager


def create_test_pet(db: Session, name: str) -> Pet:
    """Helper function to create an owner and a pet"""
    user = User(username=f"owner-of-{name.lower()}")
    db.add(user)
    db.commit()
    pet = Pet(owner_id=user.id, name=name)
    db.add(pet)
    db.commit()
    db.refresh(pet)
    return pet


@pytest.fixture
def feed():
    feed = MagicMock()
    feed.poll_latest = AsyncMock(
        return_value=LocationFix(coordinates=Coordinates(latitude=14.6037, longitude=121.3084))
    )
    return feed


@pytest.fixture
def manager(db: Session, feed):
    return TrackingManager(feed=feed, session_factory=sessionmaker(bind=db.get_bind()))


async def wait_until(predicate, timeout: float = 2.0):
    """Yield to the loop until the predicate holds; history writes run in a thread"""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate() and loop.time() < deadline:
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_start_tracking_writes_history(db: Session, manager: TrackingManager):
    """Test that a started session persists its first fix to the database"""
    pet = create_test_pet(db, "Bantay")

    session = await manager.start_tracking(pet.id, "collar-1")
    await wait_until(lambda: session.snapshot().last_persisted_at_ms is not None)

    assert session.state is SessionState.RUNNING
    rows = db.query(LocationHistoryEntry).filter_by(pet_id=pet.id).all()
    assert len(rows) == 1
    assert rows[0].latitude == 14.6037

    await manager.stop_all()


@pytest.mark.asyncio
async def test_start_tracking_is_idempotent(db: Session, manager: TrackingManager, feed):
    """Test that starting a tracked pet returns the running session"""
    pet = create_test_pet(db, "Bantay")

    first = await manager.start_tracking(pet.id, "collar-1")
    second = await manager.start_tracking(pet.id, "collar-1")
    await wait_until(lambda: first.snapshot().last_persisted_at_ms is not None)

    assert first is second
    assert manager.active_count == 1
    feed.poll_latest.assert_awaited_once_with("collar-1")

    await manager.stop_all()


@pytest.mark.asyncio
async def test_start_tracking_with_new_device_replaces_session(
    db: Session, manager: TrackingManager, feed
):
    """Test that a pet given another device is polled on that device"""
    pet = create_test_pet(db, "Bantay")

    first = await manager.start_tracking(pet.id, "collar-old")
    await wait_until(lambda: first.snapshot().last_persisted_at_ms is not None)
    second = await manager.start_tracking(pet.id, "collar-new")
    await wait_until(lambda: feed.poll_latest.await_count == 2)

    assert first is not second
    assert first.state is SessionState.STOPPED
    assert second.state is SessionState.RUNNING
    assert second.tracked_entity_id == "collar-new"
    assert manager.get_session(pet.id) is second
    assert manager.active_count == 1
    feed.poll_latest.assert_awaited_with("collar-new")

    await manager.stop_all()


@pytest.mark.asyncio
async def test_retarget(db: Session, manager: TrackingManager):
    pet = create_test_pet(db, "Bantay")

    assert await manager.retarget(pet.id, "collar-1") is None
    assert manager.get_session(pet.id) is None

    first = await manager.start_tracking(pet.id, "collar-1")
    assert await manager.retarget(pet.id, "collar-1") is first

    second = await manager.retarget(pet.id, "collar-2")
    assert second is not first
    assert second.tracked_entity_id == "collar-2"

    await manager.stop_all()


@pytest.mark.asyncio
async def test_restart_builds_new_session(db: Session, manager: TrackingManager):
    """Test that tracking again after a stop uses a fresh session"""
    pet = create_test_pet(db, "Bantay")

    first = await manager.start_tracking(pet.id, "collar-1")
    await wait_until(lambda: first.snapshot().last_persisted_at_ms is not None)
    assert await manager.stop_tracking(pet.id) is True
    second = await manager.start_tracking(pet.id, "collar-1")

    assert first is not second
    assert first.state is SessionState.STOPPED
    assert second.state is SessionState.RUNNING

    await manager.stop_all()


@pytest.mark.asyncio
async def test_tracks_several_pets(db: Session, manager: TrackingManager):
    bantay = create_test_pet(db, "Bantay")
    whiskers = create_test_pet(db, "Whiskers")

    first = await manager.start_tracking(bantay.id, "collar-1")
    second = await manager.start_tracking(whiskers.id, "collar-2")
    await wait_until(
        lambda: first.snapshot().last_persisted_at_ms is not None
        and second.snapshot().last_persisted_at_ms is not None
    )

    assert manager.active_count == 2
    assert db.query(LocationHistoryEntry).count() == 2

    await manager.stop_all()

    assert manager.active_count == 0
    assert manager.get_session(bantay.id) is None


@pytest.mark.asyncio
async def test_stop_untracked_pet(manager: TrackingManager):
    assert await manager.stop_tracking(12345) is False
