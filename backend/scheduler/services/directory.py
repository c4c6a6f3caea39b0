"""Resource directory: read pass-through to the meeting store."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from scheduler.core.exceptions import ResourceNotFoundError, UpstreamUnavailableError
from scheduler.core.intervals import TimeRange, to_utc
from scheduler.models import Meeting
from scheduler.schemas import RoomRead, ScheduledMeeting, VideoAccountRead
from scheduler.services.store import MeetingStore

logger = logging.getLogger(__name__)

UPSTREAM_ERRORS = (SQLAlchemyError, ConnectionError, TimeoutError, OSError)


def to_scheduled(meeting: Meeting) -> Optional[ScheduledMeeting]:
    """Read model for a stored meeting, or ``None`` when its times are unusable."""
    if meeting.starts_at is None or meeting.ends_at is None:
        logger.warning(f"Skipping meeting {meeting.id}: missing start or end")
        return None
    starts_at, ends_at = to_utc(meeting.starts_at), to_utc(meeting.ends_at)
    if ends_at <= starts_at:
        logger.warning(f"Skipping meeting {meeting.id}: end is not after start")
        return None
    return ScheduledMeeting(
        id=meeting.id,
        title=meeting.title,
        starts_at=starts_at,
        ends_at=ends_at,
        participants=[p.strip() for p in (meeting.participants or "").split(",") if p.strip()],
        room_id=meeting.room_id,
        video_account_id=meeting.video_account_id,
        meeting_type=meeting.meeting_type,
        is_video_meeting=meeting.is_video_meeting,
    )



class ResourceDirectory:
    """Catalog of bookable rooms and video accounts plus their bookings.

    Store failures surface as ``UpstreamUnavailableError`` and are never
    retried here.
    """

    def __init__(self, store: MeetingStore) -> None:
        self.store = store

    @asynccontextmanager
    async def _upstream(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except UPSTREAM_ERRORS as exc:
            logger.error(f"Store call {operation} failed: {exc}", exc_info=True)
            raise UpstreamUnavailableError(f"Unable to {operation}: store unavailable") from exc

    async def list_active_rooms(self) -> list[RoomRead]:
        async with self._upstream("list rooms"):
            rooms = await self.store.list_rooms(active_only=True)
        return [RoomRead.model_validate(room) for room in rooms]

    async def get_room(self, room_id: UUID) -> RoomRead:
        async with self._upstream("load room"):
            room = await self.store.get_room(room_id)
        if room is None:
            raise ResourceNotFoundError("Room", room_id)
        return RoomRead.model_validate(room)

    async def list_active_video_accounts(self) -> list[VideoAccountRead]:
        async with self._upstream("list video accounts"):
            accounts = await self.store.list_video_accounts(active_only=True)
        return [VideoAccountRead.model_validate(account) for account in accounts]

    async def meetings_near(self, time_range: TimeRange, **filters) -> list[ScheduledMeeting]:
        """Meetings overlapping ``time_range``; filters go to the store as is."""
        return await self._meetings(overlapping=time_range, **filters)

    async def meetings_starting_in(
        self, period: TimeRange, room_id: Optional[UUID] = None
    ) -> list[ScheduledMeeting]:
        return await self._meetings(starting_in=period, room_id=room_id)

    async def upcoming_video_meetings(self, period: TimeRange) -> list[ScheduledMeeting]:
        return await self._meetings(starting_in=period, video_only=True)

    async def _meetings(self, **filters) -> list[ScheduledMeeting]:
        async with self._upstream("load meetings"):
            rows = await self.store.find_meetings(**filters)
        scheduled = (to_scheduled(row) for row in rows)
        return [meeting for meeting in scheduled if meeting is not None]

