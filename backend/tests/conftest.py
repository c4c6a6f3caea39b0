"""Shared test fixtures and helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import pytest

from scheduler.core.cache import DirectoryCache
from scheduler.core.config import Settings
from scheduler.models import Meeting, Room, VideoAccount
from scheduler.services import (
    AccountCapacityService,
    ConflictDetectionService,
    ConflictRevalidationService,
    InMemoryMeetingStore,
    ResourceDirectory,
    RoomAvailabilityService,
)

# Far enough in the future that slot searches never hit "now"
DAY = datetime(2030, 1, 15, tzinfo=timezone.utc)


def at(hour: int, minute: int = 0, day: datetime = DAY) -> datetime:
    return day.replace(hour=hour, minute=minute)


class Catalog:
    """Populates an in-memory store with rooms, accounts and bookings."""

    def __init__(self, store: InMemoryMeetingStore) -> None:
        self.store = store

    def room(
        self,
        name: str,
        capacity: int = 10,
        location: Optional[str] = None,
        is_active: bool = True,
    ) -> Room:
        return self.store.add_room(
            Room(name=name, capacity=capacity, location=location, is_active=is_active)
        )

    def account(self, ref: str, max_concurrent_meetings: int = 2) -> VideoAccount:
        return self.store.add_video_account(
            VideoAccount(external_account_ref=ref, max_concurrent_meetings=max_concurrent_meetings)
        )

    def meeting(
        self,
        starts_at: Optional[datetime],
        duration_minutes: Optional[int] = 60,
        *,
        title: str = "Booked",
        meeting_type: str = "offline",
        is_video_meeting: Optional[bool] = None,
        room_id: Optional[UUID] = None,
        video_account_id: Optional[UUID] = None,
        participants: str = "",
        deleted: bool = False,
    ) -> Meeting:
        return self.store.add_meeting(
            Meeting.booked(
                starts_at,
                duration_minutes,
                title=title,
                room_id=room_id,
                video_account_id=video_account_id,
                participants=participants,
                meeting_type=meeting_type,
                is_video_meeting=(
                    video_account_id is not None if is_video_meeting is None else is_video_meeting
                ),
                deleted_at=DAY - timedelta(days=1) if deleted else None,
            )
        )


class FailingStore(InMemoryMeetingStore):
    """Store whose backend is unreachable."""

    async def get_room(self, room_id):
        raise ConnectionError("store down")

    async def list_rooms(self, active_only: bool = True):
        raise ConnectionError("store down")

    async def list_video_accounts(self, active_only: bool = True):
        raise TimeoutError("store timed out")

    async def find_meetings(self, **filters):
        raise ConnectionError("store down")


@pytest.fixture
def store() -> InMemoryMeetingStore:
    return InMemoryMeetingStore()


@pytest.fixture
def catalog(store: InMemoryMeetingStore) -> Catalog:
    return Catalog(store)


@pytest.fixture
def directory(store: InMemoryMeetingStore) -> ResourceDirectory:
    return ResourceDirectory(store)


@pytest.fixture
def account_cache() -> DirectoryCache:
    return DirectoryCache(ttl_seconds=300)


@pytest.fixture
def room_service(directory: ResourceDirectory) -> RoomAvailabilityService:
    return RoomAvailabilityService(directory)


@pytest.fixture
def account_service(
    directory: ResourceDirectory, account_cache: DirectoryCache
) -> AccountCapacityService:
    return AccountCapacityService(directory, cache=account_cache)


@pytest.fixture
def config() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def conflict_service(
    room_service: RoomAvailabilityService,
    account_service: AccountCapacityService,
    config: Settings,
) -> ConflictDetectionService:
    return ConflictDetectionService(room_service, account_service, config=config)


@pytest.fixture
def revalidation_service(conflict_service: ConflictDetectionService) -> ConflictRevalidationService:
    return ConflictRevalidationService(conflict_service)
