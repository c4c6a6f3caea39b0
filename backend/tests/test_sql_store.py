"""Tests for SqlMeetingStore against in-memory SQLite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from scheduler.core.intervals import TimeRange
from scheduler.models import Meeting, Room, VideoAccount
from scheduler.services import ResourceDirectory, RoomAvailabilityService, SqlMeetingStore
from tests.conftest import DAY, at


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


def add(engine, *rows) -> None:
    with Session(engine, expire_on_commit=False) as session:
        session.add_all(rows)
        session.commit()


class TestSqlMeetingStore:
    async def test_rooms_ordered_by_name_without_deleted(self, engine) -> None:
        add(
            engine,
            Room(name="Zeta"),
            Room(name="Alpha"),
            Room(name="Gone", deleted_at=DAY),
            Room(name="Closed", is_active=False),
        )
        store = SqlMeetingStore(engine)

        assert [room.name for room in await store.list_rooms()] == ["Alpha", "Zeta"]
        assert [room.name for room in await store.list_rooms(active_only=False)] == [
            "Alpha",
            "Closed",
            "Zeta",
        ]

    async def test_get_room(self, engine) -> None:
        room = Room(name="Alpha")
        gone = Room(name="Gone", deleted_at=DAY)
        add(engine, room, gone)
        store = SqlMeetingStore(engine)

        assert (await store.get_room(room.id)).name == "Alpha"
        assert await store.get_room(gone.id) is None

    async def test_video_accounts_in_registration_order(self, engine) -> None:
        add(
            engine,
            VideoAccount(external_account_ref="first", created_at=DAY),
            VideoAccount(external_account_ref="second", created_at=DAY + timedelta(seconds=1)),
            VideoAccount(external_account_ref="off", is_active=False),
        )
        store = SqlMeetingStore(engine)

        accounts = await store.list_video_accounts()

        assert [a.external_account_ref for a in accounts] == ["first", "second"]

    async def test_find_meetings_filters(self, engine) -> None:
        room = Room(name="Alpha")
        other = Room(name="Beta")
        inside = Meeting.booked(at(10), 60, title="inside", room_id=room.id)
        excluded = Meeting.booked(at(10), 60, title="excluded", room_id=room.id)
        add(
            engine,
            room,
            other,
            inside,
            excluded,
            Meeting.booked(at(12), 60, title="too late", room_id=room.id),
            Meeting.booked(at(8), 60, title="too early", room_id=room.id),
            Meeting.booked(at(10), 60, title="other room", room_id=other.id),
            Meeting.booked(at(10), 60, title="deleted", room_id=room.id, deleted_at=DAY),
            Meeting.booked(None, 60, title="no start", room_id=room.id),
        )
        store = SqlMeetingStore(engine)

        meetings = await store.find_meetings(
            overlapping=TimeRange(at(9), at(12)),
            room_id=room.id,
            exclude_meeting_id=excluded.id,
        )

        assert sorted(m.title for m in meetings) == ["inside", "no start"]

    async def test_long_booking_that_started_earlier_overlaps(self, engine) -> None:
        room = Room(name="Alpha")
        offsite = Meeting.booked(at(2) - timedelta(days=1), 48 * 60, title="offsite", room_id=room.id)
        add(engine, room, offsite)
        store = SqlMeetingStore(engine)

        meetings = await store.find_meetings(overlapping=TimeRange(at(9), at(10)), room_id=room.id)

        assert [m.title for m in meetings] == ["offsite"]

    async def test_times_come_back_aware_utc(self, engine) -> None:
        plus_two = timezone(timedelta(hours=2))
        add(engine, Meeting.booked(datetime(2030, 1, 15, 12, tzinfo=plus_two), 30, title="sync"))
        store = SqlMeetingStore(engine)

        [meeting] = await store.find_meetings(overlapping=TimeRange(at(10), at(11)))

        assert meeting.starts_at == at(10)
        assert meeting.ends_at == at(10, 30)
        assert meeting.duration_minutes == 30

    async def test_upcoming_video_meetings(self, engine) -> None:
        add(
            engine,
            Meeting.booked(at(10), 60, title="video", is_video_meeting=True),
            Meeting.booked(at(10), 60, title="in person"),
            Meeting.booked(at(9), 120, title="already running", is_video_meeting=True),
        )
        directory = ResourceDirectory(SqlMeetingStore(engine))

        meetings = await directory.upcoming_video_meetings(TimeRange(at(9, 30), at(12)))

        assert [m.title for m in meetings] == ["video"]
        assert meetings[0].is_video_meeting is True

    async def test_availability_end_to_end(self, engine) -> None:
        busy = Room(name="Busy", capacity=4)
        free = Room(name="Free", capacity=4)
        add(
            engine,
            busy,
            free,
            Meeting.booked(at(10), 30, title="standup", room_id=busy.id),
        )
        service = RoomAvailabilityService(ResourceDirectory(SqlMeetingStore(engine)))

        result = await service.check_room_availability(busy.id, TimeRange(at(10), at(11)))

        assert result.is_available is False
        assert [room.name for room in result.alternative_rooms] == ["Free"]
