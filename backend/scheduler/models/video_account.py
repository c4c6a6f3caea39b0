from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from scheduler.core.config import settings
from scheduler.core.intervals import utcnow


class VideoAccount(SQLModel, table=True):
    """Third-party video-conferencing account that hosts remote sessions.

    Only the concurrency cap is stored. The current load is always
    recomputed from the meetings booked against the account.
    """

    __tablename__ = "video_accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    external_account_ref: str = Field(max_length=255)
    max_concurrent_meetings: int = Field(default=settings.DEFAULT_MAX_CONCURRENT_MEETINGS, ge=1)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    deleted_at: Optional[datetime] = Field(default=None, nullable=True)
