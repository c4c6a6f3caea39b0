from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RoomRead(BaseModel):
    id: UUID
    name: str = Field(max_length=255)
    capacity: int = Field(default=1, ge=1)
    location: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)

    model_config = ConfigDict(from_attributes=True, frozen=True)


class RoomAvailabilityResult(BaseModel):
    is_available: bool
    conflicting_meetings: list["ScheduledMeeting"] = Field(default_factory=list)
    alternative_rooms: list[RoomRead] = Field(default_factory=list)


class RoomUtilization(BaseModel):
    """Booked share of a room over a reporting period."""

    room_id: UUID
    booked_hours: float = Field(default=0.0, description="Total booked time in hours")
    meeting_count: int = Field(default=0, description="Meetings starting in the period")
    total_hours: float = Field(default=0.0, description="Length of the period in hours")
    utilization_percentage: float = Field(default=0.0, description="Booked share, 2 decimals")


from .meeting import ScheduledMeeting  # noqa: E402

RoomAvailabilityResult.model_rebuild()
