from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query

from scheduler.api.deps import RoomServiceDep
from scheduler.core.intervals import TimeRange
from scheduler.schemas import RoomAvailabilityResult, RoomRead, RoomUtilization

router = APIRouter()


@router.get("/", response_model=List[RoomRead], summary="List rooms")
async def list_rooms(rooms: RoomServiceDep) -> List[RoomRead]:
    return await rooms.directory.list_active_rooms()


@router.get(
    "/available",
    response_model=List[RoomRead],
    summary="Rooms free for a time range",
)
async def find_available_rooms(
    rooms: RoomServiceDep,
    start: datetime = Query(..., description="Range start (ISO format)"),
    end: datetime = Query(..., description="Range end (ISO format)"),
    exclude_meeting_id: Optional[UUID] = None,
) -> List[RoomRead]:
    return await rooms.find_available_rooms(TimeRange.checked(start, end), exclude_meeting_id)


@router.get(
    "/optimal",
    response_model=List[RoomRead],
    summary="Free rooms ranked by fit",
)
async def find_optimal_rooms(
    rooms: RoomServiceDep,
    start: datetime = Query(..., description="Range start (ISO format)"),
    end: datetime = Query(..., description="Range end (ISO format)"),
    participant_count: int = Query(..., ge=1),
    preferred_location: Optional[str] = None,
    exclude_meeting_id: Optional[UUID] = None,
) -> List[RoomRead]:
    return await rooms.find_optimal_rooms(
        TimeRange.checked(start, end),
        participant_count,
        preferred_location,
        exclude_meeting_id,
    )


@router.get(
    "/{room_id}/availability",
    response_model=RoomAvailabilityResult,
    summary="Check a room for a time range",
)
async def check_room_availability(
    room_id: UUID,
    rooms: RoomServiceDep,
    start: datetime = Query(..., description="Range start (ISO format)"),
    end: datetime = Query(..., description="Range end (ISO format)"),
    exclude_meeting_id: Optional[UUID] = Query(
        default=None, description="Meeting being edited, ignored when looking for conflicts"
    ),
) -> RoomAvailabilityResult:
    return await rooms.check_room_availability(
        room_id, TimeRange.checked(start, end), exclude_meeting_id
    )


@router.get(
    "/{room_id}/utilization",
    response_model=RoomUtilization,
    summary="Room utilization for a period",
)
async def get_room_utilization(
    room_id: UUID,
    rooms: RoomServiceDep,
    from_date: datetime = Query(..., alias="from", description="Period start (ISO format)"),
    to_date: datetime = Query(..., alias="to", description="Period end (ISO format)"),
) -> RoomUtilization:
    return await rooms.get_room_utilization(room_id, from_date, to_date)
