from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from scheduler.core.cache import DirectoryCache, get_account_cache
from scheduler.db import engine
from scheduler.services import (
    AccountCapacityService,
    ConflictDetectionService,
    ConflictRevalidationService,
    MeetingStore,
    ResourceDirectory,
    RoomAvailabilityService,
    SqlMeetingStore,
)


@lru_cache
def get_store() -> MeetingStore:
    return SqlMeetingStore(engine)


def get_directory(store: MeetingStore = Depends(get_store)) -> ResourceDirectory:
    return ResourceDirectory(store)


def get_room_service(
    directory: ResourceDirectory = Depends(get_directory),
) -> RoomAvailabilityService:
    return RoomAvailabilityService(directory)


def get_account_service(
    directory: ResourceDirectory = Depends(get_directory),
    cache: DirectoryCache = Depends(get_account_cache),
) -> AccountCapacityService:
    return AccountCapacityService(directory, cache=cache)


def get_conflict_service(
    rooms: RoomAvailabilityService = Depends(get_room_service),
    accounts: AccountCapacityService = Depends(get_account_service),
) -> ConflictDetectionService:
    return ConflictDetectionService(rooms, accounts)


def get_revalidation_service(
    conflicts: ConflictDetectionService = Depends(get_conflict_service),
) -> ConflictRevalidationService:
    return ConflictRevalidationService(conflicts)


RoomServiceDep = Annotated[RoomAvailabilityService, Depends(get_room_service)]
AccountServiceDep = Annotated[AccountCapacityService, Depends(get_account_service)]
ConflictServiceDep = Annotated[ConflictDetectionService, Depends(get_conflict_service)]
RevalidationServiceDep = Annotated[ConflictRevalidationService, Depends(get_revalidation_service)]
DirectoryDep = Annotated[ResourceDirectory, Depends(get_directory)]
