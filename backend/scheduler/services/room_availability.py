"""
Room availability checks, alternative room lookup and room scoring.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional
from uuid import UUID

from scheduler.core.async_utils import gather_limited
from scheduler.core.config import settings
from scheduler.core.exceptions import InvalidInputError
from scheduler.core.intervals import TimeRange, ensure_valid, hours_between, overlaps
from scheduler.schemas import (
    RoomAvailabilityResult,
    RoomRead,
    RoomUtilization,
    ScheduledMeeting,
)
from scheduler.services.directory import ResourceDirectory

logger = logging.getLogger(__name__)

# Returns None for rooms that must not be offered at all
RoomScorer = Callable[[RoomRead, int, Optional[str]], Optional[float]]


def _same_location(room: RoomRead, preferred_location: Optional[str]) -> bool:
    if not preferred_location or not room.location:
        return False
    return room.location.strip().casefold() == preferred_location.strip().casefold()


def default_room_score(
    room: RoomRead,
    participant_count: int,
    preferred_location: Optional[str] = None,
) -> Optional[float]:
    """
    Capacity fit plus a flat location bonus.

    Fit is ``participants / capacity`` scaled to 100, so an exact match
    scores 100 and larger rooms score progressively less. Rooms that are
    too small are excluded.
    """
    if room.capacity < participant_count:
        return None
    score = 100.0 * participant_count / room.capacity
    if _same_location(room, preferred_location):
        score += settings.LOCATION_MATCH_BONUS
    return score


class RoomAvailabilityService:
    def __init__(
        self,
        directory: ResourceDirectory,
        scorer: RoomScorer = default_room_score,
        max_concurrent: int = settings.MAX_CONCURRENT_LOOKUPS,
    ) -> None:
        self.directory = directory
        self.scorer = scorer
        self.max_concurrent = max_concurrent

    async def get_room_conflicts(
        self,
        room_id: UUID,
        time_range: TimeRange,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> list[ScheduledMeeting]:
        candidates = await self.directory.meetings_near(
            time_range, room_id=room_id, exclude_meeting_id=exclude_meeting_id
        )
        return [m for m in candidates if overlaps(m.time_range, time_range)]

    async def check_room_availability(
        self,
        room_id: UUID,
        time_range: TimeRange,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> RoomAvailabilityResult:
        ensure_valid(time_range)
        await self.directory.get_room(room_id)

        conflicts = await self.get_room_conflicts(room_id, time_range, exclude_meeting_id)
        alternatives: list[RoomRead] = []
        if conflicts:
            alternatives = await self.find_available_rooms(time_range, exclude_meeting_id)
            logger.info(
                f"Room {room_id} has {len(conflicts)} conflict(s); "
                f"{len(alternatives)} alternative room(s) free"
            )

        return RoomAvailabilityResult(
            is_available=not conflicts,
            conflicting_meetings=conflicts,
            alternative_rooms=alternatives,
        )

    async def find_available_rooms(
        self,
        time_range: TimeRange,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> list[RoomRead]:
        """Active rooms with no booking in ``time_range``, in catalog order."""
        ensure_valid(time_range)
        rooms = await self.directory.list_active_rooms()
        conflicts = await gather_limited(
            (self.get_room_conflicts(room.id, time_range, exclude_meeting_id) for room in rooms),
            max_concurrent=self.max_concurrent,
        )
        return [room for room, found in zip(rooms, conflicts) if not found]

    def rank_rooms(
        self,
        rooms: list[RoomRead],
        participant_count: int,
        preferred_location: Optional[str] = None,
    ) -> list[RoomRead]:
        """Best-scoring rooms first; ties keep the incoming order."""
        scored = []
        for room in rooms:
            score = self.scorer(room, participant_count, preferred_location)
            if score is not None:
                scored.append((score, room))
        scored.sort(key=lambda item: item[0], reverse=True)
        return [room for _, room in scored]

    async def find_optimal_rooms(
        self,
        time_range: TimeRange,
        participant_count: int,
        preferred_location: Optional[str] = None,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> list[RoomRead]:
        if participant_count < 1:
            raise InvalidInputError("participant_count must be greater than 0")
        available = await self.find_available_rooms(time_range, exclude_meeting_id)
        return self.rank_rooms(available, participant_count, preferred_location)

    async def get_room_utilization(
        self,
        room_id: UUID,
        period_start,
        period_end,
    ) -> RoomUtilization:
        period = TimeRange.checked(period_start, period_end)
        await self.directory.get_room(room_id)

        meetings = await self.directory.meetings_starting_in(period, room_id=room_id)
        booked_minutes = sum(
            (m.ends_at - m.starts_at).total_seconds() / 60 for m in meetings
        )
        booked_hours = booked_minutes / 60
        total_hours = hours_between(period.start, period.end)

        return RoomUtilization(
            room_id=room_id,
            booked_hours=round(booked_hours, 2),
            meeting_count=len(meetings),
            total_hours=round(total_hours, 2),
            utilization_percentage=round(booked_hours / total_hours * 100, 2),
        )
