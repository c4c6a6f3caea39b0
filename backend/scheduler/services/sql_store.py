"""SQLModel-backed implementation of the meeting store."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.engine import Engine
from sqlmodel import Session, and_, or_, select

from scheduler.core.intervals import TimeRange
from scheduler.models import Meeting, Room, VideoAccount
from scheduler.services.store import MeetingStore


class SqlMeetingStore(MeetingStore):
    """Runs each query in the threadpool with its own short-lived session,
    so concurrent lookups never share a session."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    async def get_room(self, room_id: UUID) -> Optional[Room]:
        def query() -> Optional[Room]:
            with Session(self._engine) as session:
                room = session.get(Room, room_id)
                if room is None or room.deleted_at is not None:
                    return None
                return room

        return await run_in_threadpool(query)

    async def list_rooms(self, active_only: bool = True) -> list[Room]:
        def query() -> list[Room]:
            statement = select(Room).where(Room.deleted_at == None)  # noqa: E711
            if active_only:
                statement = statement.where(Room.is_active == True)  # noqa: E712
            with Session(self._engine) as session:
                return list(session.exec(statement.order_by(Room.name)).all())

        return await run_in_threadpool(query)

    async def list_video_accounts(self, active_only: bool = True) -> list[VideoAccount]:
        def query() -> list[VideoAccount]:
            statement = select(VideoAccount).where(VideoAccount.deleted_at == None)  # noqa: E711
            if active_only:
                statement = statement.where(VideoAccount.is_active == True)  # noqa: E712
            statement = statement.order_by(VideoAccount.created_at, VideoAccount.id)
            with Session(self._engine) as session:
                return list(session.exec(statement).all())

        return await run_in_threadpool(query)

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
        in_time = []
        if overlapping:
            in_time += [Meeting.starts_at < overlapping.end, Meeting.ends_at > overlapping.start]
        if starting_in:
            in_time += [Meeting.starts_at >= starting_in.start, Meeting.starts_at < starting_in.end]

        filters = [Meeting.deleted_at == None]  # noqa: E711
        if in_time:
            filters.append(
                or_(
                    Meeting.starts_at == None,  # noqa: E711
                    Meeting.ends_at == None,  # noqa: E711
                    and_(*in_time),
                )
            )
        if room_id:
            filters.append(Meeting.room_id == room_id)
        if video_account_id:
            filters.append(Meeting.video_account_id == video_account_id)
        if exclude_meeting_id:
            filters.append(Meeting.id != exclude_meeting_id)
        if video_only:
            filters.append(Meeting.is_video_meeting == True)  # noqa: E712

        def query() -> list[Meeting]:
            statement = select(Meeting).where(*filters).order_by(Meeting.starts_at)
            with Session(self._engine) as session:
                return list(session.exec(statement).all())

        return await run_in_threadpool(query)
