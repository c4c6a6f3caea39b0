from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .conflict import ConflictResult
from .meeting import ScheduledMeeting


class VideoAccountRead(BaseModel):
    id: UUID
    external_account_ref: str
    max_concurrent_meetings: int = Field(default=2, ge=1)
    is_active: bool = True

    model_config = ConfigDict(from_attributes=True, frozen=True)


class VideoCapacityResult(BaseModel):
    """Aggregate and per-account video capacity for one time range."""

    has_available_account: bool
    total_accounts: int = 0
    total_max_concurrent: int = 0
    current_total_usage: int = 0
    available_slots: int = 0
    suggested_account: Optional[VideoAccountRead] = None
    conflicting_meetings: list[ScheduledMeeting] = Field(default_factory=list)


class AccountLoadInfo(BaseModel):
    account_id: UUID
    current_load: int
    max_capacity: int
    utilization_percentage: int


class CacheStats(BaseModel):
    size: int
    last_updated: Optional[datetime] = None
    is_expired: bool


class CapacityStatus(BaseModel):
    """Fleet-wide video capacity snapshot."""

    total_accounts: int
    total_capacity: int
    current_usage: int
    available_slots: int
    utilization_percentage: float


class MeetingRevalidation(BaseModel):
    meeting_id: UUID
    title: str
    starts_at: datetime
    result: ConflictResult


class RevalidationReport(BaseModel):
    """Outcome of re-checking upcoming video meetings against fresh account data."""

    checked: int
    skipped: int = 0
    conflicted: list[MeetingRevalidation] = Field(default_factory=list)
