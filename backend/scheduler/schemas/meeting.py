from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scheduler.core.intervals import TimeRange, to_utc

from .conflict import MeetingType


class ScheduledMeeting(BaseModel):
    """Read model of an existing booking."""

    id: UUID
    title: str
    starts_at: datetime
    ends_at: datetime
    participants: List[str] = Field(default_factory=list)
    room_id: Optional[UUID] = None
    video_account_id: Optional[UUID] = None
    meeting_type: Optional[str] = None
    is_video_meeting: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.starts_at, self.ends_at)


class MeetingFormData(BaseModel):
    """Proposed meeting submitted for validation."""

    title: str = Field(default="", max_length=255)
    starts_at: datetime
    duration_minutes: int = Field(gt=0)
    meeting_type: MeetingType
    room_id: Optional[UUID] = None
    # None means "whatever the meeting type needs"
    is_video_meeting: Optional[bool] = None
    participants: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    preferred_location: Optional[str] = None
    # Set when editing, so the meeting never conflicts with itself
    meeting_id: Optional[UUID] = None

    @field_validator("starts_at")
    @classmethod
    def normalize_start(cls, value: datetime) -> datetime:
        return to_utc(value)

    @field_validator("participants")
    @classmethod
    def strip_participants(cls, value: List[str]) -> List[str]:
        return [p.strip() for p in value if p and p.strip()]

    @property
    def time_range(self) -> TimeRange:
        return TimeRange.from_duration(self.starts_at, self.duration_minutes)

    @property
    def participant_count(self) -> int:
        # Organizer included
        return len(self.participants) + 1
