"""Tests for ConflictDetectionService.validate_meeting."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from scheduler.core.config import Settings
from scheduler.core.exceptions import ResourceNotFoundError
from scheduler.schemas import (
    ConflictSeverity,
    ConflictType,
    MeetingFormData,
    MeetingType,
    SuggestionType,
)
from scheduler.services import (
    AccountCapacityService,
    ConflictDetectionService,
    RoomAvailabilityService,
)
from tests.conftest import Catalog, at


def form(meeting_type: MeetingType, **overrides) -> MeetingFormData:
    data = {
        "title": "Planning",
        "starts_at": at(10),
        "duration_minutes": 60,
        "meeting_type": meeting_type,
    }
    data.update(overrides)
    return MeetingFormData(**data)


class TestMeetingTypeRequirements:
    async def test_offline_without_room_blocks(
        self, conflict_service: ConflictDetectionService
    ) -> None:
        result = await conflict_service.validate_meeting(form(MeetingType.OFFLINE))

        assert len(result.conflicts) == 1
        assert result.conflicts[0].type == ConflictType.MISSING_ROOM
        assert result.conflicts[0].severity == ConflictSeverity.ERROR
        assert result.can_submit is False

    async def test_hybrid_without_room_warns(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        for ref in ("zoom-1", "zoom-2", "zoom-3"):
            catalog.account(ref)

        result = await conflict_service.validate_meeting(form(MeetingType.HYBRID))

        assert len(result.conflicts) == 1
        assert result.conflicts[0].type == ConflictType.MISSING_ROOM
        assert result.conflicts[0].severity == ConflictSeverity.WARNING
        assert result.can_submit is True

    async def test_missing_room_suggests_best_room_then_online(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        catalog.room("Large", capacity=20)
        small = catalog.room("Small", capacity=3)

        result = await conflict_service.validate_meeting(
            form(MeetingType.OFFLINE, participants=["a@example.com", "b@example.com"])
        )

        assert [s.type for s in result.suggestions] == [
            SuggestionType.ROOM_CHANGE,
            SuggestionType.TYPE_CHANGE,
        ]
        assert result.suggestions[0].action.field == "room_id"
        assert result.suggestions[0].action.value == small.id
        assert result.suggestions[0].priority == 2
        assert result.suggestions[1].action.value == MeetingType.ONLINE
        assert result.suggestions[1].action.additional_changes["room_id"] is None

    async def test_online_meeting_with_free_accounts(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        for ref in ("zoom-1", "zoom-2", "zoom-3"):
            catalog.account(ref)

        result = await conflict_service.validate_meeting(form(MeetingType.ONLINE))

        assert result.conflicts == []
        assert result.suggestions == []
        assert result.can_submit is True


class TestRoomConflicts:
    async def test_booked_room(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        conference_a = catalog.room("Conference A", capacity=10)
        conference_b = catalog.room("Conference B", capacity=8)
        catalog.meeting(at(10), 60, room_id=conference_a.id)

        result = await conflict_service.validate_meeting(
            form(
                MeetingType.OFFLINE,
                starts_at=at(10, 30),
                room_id=conference_a.id,
                participants=["a@example.com", "b@example.com"],
            )
        )

        assert result.can_submit is False
        assert len(result.conflicts) == 1
        conflict = result.conflicts[0]
        assert conflict.type == ConflictType.ROOM_CONFLICT
        assert conflict.severity == ConflictSeverity.ERROR
        assert conflict.affected_resource == str(conference_a.id)
        assert len(conflict.conflicting_meetings) == 1
        assert conflict.suggestions == ["Use Conference B instead"]

        room_change, time_change = result.suggestions
        assert room_change.id == "suggestion-1"
        assert room_change.type == SuggestionType.ROOM_CHANGE
        assert room_change.priority == 1
        assert room_change.action.value == conference_b.id
        assert time_change.id == "suggestion-2"
        assert time_change.type == SuggestionType.TIME_CHANGE
        assert time_change.priority == 2
        # Nearest free slot starts when the existing booking ends
        assert time_change.action.value == at(11)

    async def test_editing_meeting_does_not_conflict_with_itself(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        room = catalog.room("Conference A")
        own = catalog.meeting(at(10), 60, room_id=room.id)
        request = form(MeetingType.OFFLINE, room_id=room.id, meeting_id=own.id)

        first = await conflict_service.validate_meeting(request)
        second = await conflict_service.validate_meeting(request)

        assert first.conflicts == []
        assert first.can_submit is True
        assert second == first

    async def test_offset_start_is_compared_in_utc(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        room = catalog.room("Conference A")
        catalog.meeting(at(10), 60, room_id=room.id)
        # 12:30 at UTC+02:00 is 10:30 UTC
        starts_at = datetime(2030, 1, 15, 12, 30, tzinfo=timezone(timedelta(hours=2)))

        result = await conflict_service.validate_meeting(
            form(MeetingType.OFFLINE, starts_at=starts_at, room_id=room.id)
        )

        assert [c.type for c in result.conflicts] == [ConflictType.ROOM_CONFLICT]
        assert result.suggestions[-1].action.value == at(11)

    async def test_unknown_room_propagates(
        self, conflict_service: ConflictDetectionService
    ) -> None:
        with pytest.raises(ResourceNotFoundError):
            await conflict_service.validate_meeting(form(MeetingType.OFFLINE, room_id=uuid4()))


class TestCapacityConflicts:
    async def test_accounts_at_capacity(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        account = catalog.account("zoom-1", max_concurrent_meetings=1)
        catalog.meeting(at(10), 60, video_account_id=account.id)

        result = await conflict_service.validate_meeting(form(MeetingType.ONLINE))

        assert result.can_submit is False
        assert [c.type for c in result.conflicts] == [ConflictType.ZOOM_CAPACITY]
        assert result.conflicts[0].severity == ConflictSeverity.ERROR

        time_change, type_change = result.suggestions
        assert time_change.type == SuggestionType.TIME_CHANGE
        assert time_change.priority == 3
        assert time_change.action.value == at(11)
        assert time_change.action.additional_changes == {"video_account_id": account.id}
        assert type_change.type == SuggestionType.TYPE_CHANGE
        assert type_change.priority == 4
        assert type_change.action.value == MeetingType.OFFLINE

    async def test_no_accounts_configured(
        self, conflict_service: ConflictDetectionService
    ) -> None:
        result = await conflict_service.validate_meeting(form(MeetingType.ONLINE))

        assert result.can_submit is False
        assert "No video-conferencing accounts" in result.conflicts[0].message
        assert [s.type for s in result.suggestions] == [SuggestionType.TYPE_CHANGE]

    async def test_offline_meeting_can_opt_into_video(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        room = catalog.room("Conference A")

        result = await conflict_service.validate_meeting(
            form(MeetingType.OFFLINE, room_id=room.id, is_video_meeting=True)
        )

        assert [c.type for c in result.conflicts] == [ConflictType.ZOOM_CAPACITY]

    async def test_low_capacity_warning(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        busy = catalog.account("zoom-1", max_concurrent_meetings=1)
        catalog.account("zoom-2", max_concurrent_meetings=1)
        catalog.meeting(at(10), 60, video_account_id=busy.id)

        result = await conflict_service.validate_meeting(form(MeetingType.ONLINE))

        assert result.can_submit is True
        assert len(result.conflicts) == 1
        assert result.conflicts[0].type == ConflictType.ZOOM_CAPACITY
        assert result.conflicts[0].severity == ConflictSeverity.WARNING
        assert result.suggestions == []


class TestParticipantOverlap:
    async def test_busy_participant_warns(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        room = catalog.room("Conference A")
        other = catalog.room("Conference B")
        catalog.meeting(
            at(10, 30), 30, room_id=other.id, participants="Alice@example.com, bob@example.com"
        )

        result = await conflict_service.validate_meeting(
            form(MeetingType.OFFLINE, room_id=room.id, participants=["alice@example.com"])
        )

        assert result.can_submit is True
        assert len(result.conflicts) == 1
        assert result.conflicts[0].type == ConflictType.OVERLAP
        assert result.conflicts[0].severity == ConflictSeverity.WARNING
        assert "alice@example.com" in result.conflicts[0].message

    async def test_check_can_be_disabled(
        self,
        catalog: Catalog,
        room_service: RoomAvailabilityService,
        account_service: AccountCapacityService,
    ) -> None:
        service = ConflictDetectionService(
            room_service,
            account_service,
            config=Settings(_env_file=None, CHECK_PARTICIPANT_OVERLAP=False),
        )
        room = catalog.room("Conference A")
        catalog.meeting(at(10), 60, participants="alice@example.com")

        result = await service.validate_meeting(
            form(MeetingType.OFFLINE, room_id=room.id, participants=["alice@example.com"])
        )

        assert result.conflicts == []


class TestSuggestionRanking:
    async def test_sorted_by_priority_with_ids_in_generation_order(
        self, catalog: Catalog, conflict_service: ConflictDetectionService
    ) -> None:
        busy_room = catalog.room("Conference A")
        catalog.room("Conference B")
        account = catalog.account("zoom-1", max_concurrent_meetings=1)
        catalog.meeting(at(10), 60, room_id=busy_room.id, video_account_id=account.id)

        result = await conflict_service.validate_meeting(
            form(MeetingType.HYBRID, room_id=busy_room.id)
        )

        assert [c.type for c in result.conflicts] == [
            ConflictType.ROOM_CONFLICT,
            ConflictType.ZOOM_CAPACITY,
        ]
        assert [s.priority for s in result.suggestions] == [1, 2, 3, 4]
        assert [s.id for s in result.suggestions] == [
            "suggestion-1",
            "suggestion-2",
            "suggestion-3",
            "suggestion-4",
        ]

    async def test_suggestions_are_capped(
        self,
        catalog: Catalog,
        room_service: RoomAvailabilityService,
        account_service: AccountCapacityService,
    ) -> None:
        service = ConflictDetectionService(
            room_service,
            account_service,
            config=Settings(_env_file=None, MAX_SUGGESTIONS=1),
        )
        busy_room = catalog.room("Conference A")
        catalog.room("Conference B")
        catalog.meeting(at(10), 60, room_id=busy_room.id)

        result = await service.validate_meeting(form(MeetingType.OFFLINE, room_id=busy_room.id))

        assert len(result.suggestions) == 1
        assert result.suggestions[0].priority == 1
