"""Persistence collaborator consumed by the scheduling core."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from scheduler.core.intervals import TimeRange, to_utc
from scheduler.models import Meeting, Room, VideoAccount


class MeetingStore(ABC):
    """Read-only access to rooms, video accounts and booked meetings.

    Implement this ABC to plug in a storage backend. The core never writes
    through it. Backends may raise ``ConnectionError``, ``TimeoutError``,
    ``OSError`` or ``SQLAlchemyError`` when unreachable.
    """

    @abstractmethod
    async def get_room(self, room_id: UUID) -> Optional[Room]:
        """Get a room by ID, or ``None`` if it doesn't exist or was deleted."""
        ...

    @abstractmethod
    async def list_rooms(self, active_only: bool = True) -> list[Room]:
        """List rooms ordered by name."""
        ...

    @abstractmethod
    async def list_video_accounts(self, active_only: bool = True) -> list[VideoAccount]:
        """List video accounts in the order they were registered."""
        ...

    @abstractmethod
    async def find_meetings(
        self,
        *,
        overlapping: Optional[TimeRange] = None,
        starting_in: Optional[TimeRange] = None,
        room_id: Optional[UUID] = None,
        video_account_id: Optional[UUID] = None,
        exclude_meeting_id: Optional[UUID] = None,
        video_only: bool = False,
    ) -> list[Meeting]:
        """Non-deleted meetings matching every given filter.

        ``overlapping`` keeps meetings with ``starts_at < end`` and
        ``ends_at > start``; ``starting_in`` keeps meetings whose start falls
        in the half-open period. Rows missing a start or end are returned
        regardless of the time filters so callers can report them.
        """
        ...


def _in_time(
    meeting: Meeting,
    overlapping: Optional[TimeRange],
    starting_in: Optional[TimeRange],
) -> bool:
    if meeting.starts_at is None or meeting.ends_at is None:
        return True
    starts_at, ends_at = to_utc(meeting.starts_at), to_utc(meeting.ends_at)
    if overlapping and not (starts_at < overlapping.end and ends_at > overlapping.start):
        return False
    if starting_in and not (starting_in.start <= starts_at < starting_in.end):
        return False
    return True


class InMemoryMeetingStore(MeetingStore):
    """Dict-based in-memory store for development and testing."""

    def __init__(self) -> None:
        self._rooms: dict[UUID, Room] = {}
        self._accounts: dict[UUID, VideoAccount] = {}
        self._meetings: dict[UUID, Meeting] = {}

    def add_room(self, room: Room) -> Room:
        self._rooms[room.id] = room
        return room

    def add_video_account(self, account: VideoAccount) -> VideoAccount:
        self._accounts[account.id] = account
        return account

    def add_meeting(self, meeting: Meeting) -> Meeting:
        self._meetings[meeting.id] = meeting
        return meeting

    def remove_meeting(self, meeting_id: UUID) -> bool:
        return self._meetings.pop(meeting_id, None) is not None

    async def get_room(self, room_id: UUID) -> Optional[Room]:
        room = self._rooms.get(room_id)
        if room is None or room.deleted_at is not None:
            return None
        return room

    async def list_rooms(self, active_only: bool = True) -> list[Room]:
        rooms = [
            room
            for room in self._rooms.values()
            if room.deleted_at is None and (room.is_active or not active_only)
        ]
        return sorted(rooms, key=lambda room: room.name)

    async def list_video_accounts(self, active_only: bool = True) -> list[VideoAccount]:
        return [
            account
            for account in self._accounts.values()
            if account.deleted_at is None and (account.is_active or not active_only)
        ]

    async def find_meetings(
        self,
        *,
        overlapping: Optional[TimeRange] = None,
        starting_in: Optional[TimeRange] = None,
        room_id: Optional[UUID] = None,
        video_account_id: Optional[UUID] = None,
        exclude_meeting_id: Optional[UUID] = None,
        video_only: bool = False,
    ) -> list[Meeting]:
        result = []
        for meeting in self._meetings.values():
            if meeting.deleted_at is not None:
                continue
            if exclude_meeting_id and meeting.id == exclude_meeting_id:
                continue
            if room_id and meeting.room_id != room_id:
                continue
            if video_account_id and meeting.video_account_id != video_account_id:
                continue
            if video_only and not meeting.is_video_meeting:
                continue
            if _in_time(meeting, overlapping, starting_in):
                result.append(meeting)
        return result
