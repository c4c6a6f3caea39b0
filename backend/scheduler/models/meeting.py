from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from scheduler.core.intervals import to_utc, utcnow


class Meeting(SQLModel, table=True):
    """Booked meeting. Written by the booking layer, only read by the core.

    ``ends_at`` is stored next to ``starts_at`` so overlap filtering can run
    in SQL; use ``Meeting.booked()`` to derive it from a duration.
    """

    __tablename__ = "meetings"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    starts_at: Optional[datetime] = Field(default=None, index=True)
    ends_at: Optional[datetime] = Field(default=None, index=True)
    # Comma-separated participant emails
    participants: str = Field(default="")
    meeting_type: str = Field(default="offline", max_length=20)
    is_video_meeting: bool = Field(default=False)
    room_id: Optional[UUID] = Field(
        default=None, foreign_key="rooms.id", nullable=True, index=True
    )
    video_account_id: Optional[UUID] = Field(
        default=None, foreign_key="video_accounts.id", nullable=True, index=True
    )
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    deleted_at: Optional[datetime] = Field(default=None, nullable=True)

    @classmethod
    def booked(
        cls,
        starts_at: Optional[datetime],
        duration_minutes: Optional[int],
        **fields,
    ) -> "Meeting":
        ends_at = None
        if starts_at is not None:
            starts_at = to_utc(starts_at)
            if duration_minutes is not None:
                ends_at = starts_at + timedelta(minutes=duration_minutes)
        return cls(starts_at=starts_at, ends_at=ends_at, **fields)

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.starts_at is None or self.ends_at is None:
            return None
        return int((to_utc(self.ends_at) - to_utc(self.starts_at)).total_seconds() // 60)
