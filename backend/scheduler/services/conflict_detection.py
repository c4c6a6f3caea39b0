"""
Conflict detection for a proposed meeting.

Each ``validate_meeting`` call is independent: structural rules run first,
then the room, video capacity and participant checks run concurrently,
and finally every conflict is turned into ranked remediation suggestions.
Errors accumulate instead of short-circuiting so the caller gets the full
picture in one round trip.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Awaitable, Callable, Iterator, Optional, TypeVar

from scheduler.core.config import Settings, settings
from scheduler.core.intervals import TimeRange, overlaps, utcnow
from scheduler.schemas import (
    ConflictInfo,
    ConflictResult,
    ConflictSeverity,
    ConflictSuggestion,
    ConflictType,
    MeetingFormData,
    MeetingType,
    RoomRead,
    SuggestionAction,
    SuggestionType,
)
from scheduler.services.account_capacity import AccountCapacityService
from scheduler.services.meeting_rules import requires_video_account, validate_room_requirement
from scheduler.services.room_availability import RoomAvailabilityService

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUGGESTION_PRIORITIES: dict[tuple[ConflictType, SuggestionType], int] = {
    (ConflictType.ROOM_CONFLICT, SuggestionType.ROOM_CHANGE): 1,
    (ConflictType.ROOM_CONFLICT, SuggestionType.TIME_CHANGE): 2,
    (ConflictType.MISSING_ROOM, SuggestionType.ROOM_CHANGE): 2,
    (ConflictType.ZOOM_CAPACITY, SuggestionType.TIME_CHANGE): 3,
}
TYPE_CHANGE_PRIORITY = 4


@dataclass
class _Findings:
    conflicts: list[ConflictInfo] = field(default_factory=list)
    alternative_rooms: list[RoomRead] = field(default_factory=list)


@dataclass
class _Draft:
    type: SuggestionType
    description: str
    action: SuggestionAction
    priority: int


def _clock(moment) -> str:
    return moment.strftime("%H:%M")


class ConflictDetectionService:
    def __init__(
        self,
        rooms: RoomAvailabilityService,
        accounts: AccountCapacityService,
        config: Settings = settings,
    ) -> None:
        self.rooms = rooms
        self.accounts = accounts
        self.config = config

    async def validate_meeting(self, form: MeetingFormData) -> ConflictResult:
        time_range = form.time_range

        conflicts = validate_room_requirement(form.meeting_type, form.room_id)

        checks = []
        if form.room_id:
            checks.append(self._check_room(form, time_range))
        if requires_video_account(form.meeting_type, form.is_video_meeting):
            checks.append(self._check_capacity(form, time_range))
        if self.config.CHECK_PARTICIPANT_OVERLAP and form.participants:
            checks.append(self._check_participants(form, time_range))

        alternatives: list[RoomRead] = []
        for findings in await asyncio.gather(*checks):
            conflicts.extend(findings.conflicts)
            alternatives.extend(findings.alternative_rooms)

        suggestions = await self._suggest(form, time_range, conflicts, alternatives)
        can_submit = not any(c.severity == ConflictSeverity.ERROR for c in conflicts)

        logger.info(
            f"Validated {form.meeting_type.value} meeting at {time_range.start.isoformat()}: "
            f"{len(conflicts)} conflict(s), {len(suggestions)} suggestion(s), can_submit={can_submit}"
        )
        return ConflictResult(conflicts=conflicts, can_submit=can_submit, suggestions=suggestions)

    async def _check_room(self, form: MeetingFormData, time_range: TimeRange) -> _Findings:
        result = await self.rooms.check_room_availability(form.room_id, time_range, form.meeting_id)
        if result.is_available:
            return _Findings()

        count = len(result.conflicting_meetings)
        conflict = ConflictInfo(
            type=ConflictType.ROOM_CONFLICT,
            severity=ConflictSeverity.ERROR,
            message=(
                f"This room is already booked for {count} meeting{'s' if count > 1 else ''} "
                "during this time."
            ),
            affected_resource=str(form.room_id),
            conflicting_meetings=result.conflicting_meetings,
            suggestions=[
                f"Use {room.name} instead"
                for room in result.alternative_rooms[: self.config.MAX_ROOM_SUGGESTIONS]
            ],
        )
        return _Findings(conflicts=[conflict], alternative_rooms=result.alternative_rooms)

    async def _check_capacity(self, form: MeetingFormData, time_range: TimeRange) -> _Findings:
        result = await self.accounts.check_concurrent_meeting_capacity(time_range, form.meeting_id)

        if not result.has_available_account:
            if result.total_accounts == 0:
                message = "No video-conferencing accounts are configured. Please contact your administrator."
            else:
                message = (
                    f"All video-conferencing accounts are at capacity "
                    f"({result.current_total_usage}/{result.total_max_concurrent} meetings). "
                    "Please choose a different time."
                )
            conflict = ConflictInfo(
                type=ConflictType.ZOOM_CAPACITY,
                severity=ConflictSeverity.ERROR,
                message=message,
                conflicting_meetings=result.conflicting_meetings,
            )
            return _Findings(conflicts=[conflict])

        if (
            result.available_slots <= self.config.LOW_CAPACITY_THRESHOLD
            and result.total_accounts > 1
        ):
            conflict = ConflictInfo(
                type=ConflictType.ZOOM_CAPACITY,
                severity=ConflictSeverity.WARNING,
                message=(
                    f"Video-conferencing capacity is running low. "
                    f"Only {result.available_slots} slot(s) remaining."
                ),
            )
            return _Findings(conflicts=[conflict])

        return _Findings()

    async def _check_participants(self, form: MeetingFormData, time_range: TimeRange) -> _Findings:
        wanted = {p.casefold() for p in form.participants}
        candidates = await self.rooms.directory.meetings_near(
            time_range, exclude_meeting_id=form.meeting_id
        )

        busy: set[str] = set()
        clashing = []
        for meeting in candidates:
            if not overlaps(meeting.time_range, time_range):
                continue
            shared = wanted.intersection(p.casefold() for p in meeting.participants)
            if shared:
                busy.update(shared)
                clashing.append(meeting)

        if not clashing:
            return _Findings()

        conflict = ConflictInfo(
            type=ConflictType.OVERLAP,
            severity=ConflictSeverity.WARNING,
            message=(
                f"{len(busy)} participant(s) already booked during this time: "
                f"{', '.join(sorted(busy))}"
            ),
            conflicting_meetings=clashing,
        )
        return _Findings(conflicts=[conflict])

    def _slot_offsets(self) -> Iterator[timedelta]:
        """+step, -step, +2*step, ... up to the search window."""
        step = self.config.SLOT_SEARCH_STEP_MINUTES
        for minutes in range(step, self.config.SLOT_SEARCH_WINDOW_MINUTES + 1, step):
            yield timedelta(minutes=minutes)
            yield timedelta(minutes=-minutes)

    async def _nearest_slot(
        self,
        time_range: TimeRange,
        lookup: Callable[[TimeRange], Awaitable[Optional[T]]],
    ) -> Optional[tuple[TimeRange, T]]:
        earliest = utcnow()
        for offset in self._slot_offsets():
            candidate = time_range.shifted(offset)
            if candidate.start < earliest:
                continue
            found = await lookup(candidate)
            if found is not None:
                return candidate, found
        return None

    async def _suggest(
        self,
        form: MeetingFormData,
        time_range: TimeRange,
        conflicts: list[ConflictInfo],
        alternatives: list[RoomRead],
    ) -> list[ConflictSuggestion]:
        drafts: list[_Draft] = []
        for conflict in conflicts:
            if conflict.type == ConflictType.ROOM_CONFLICT:
                drafts.extend(await self._room_conflict_drafts(form, time_range, alternatives))
            elif conflict.type == ConflictType.MISSING_ROOM:
                drafts.extend(await self._missing_room_drafts(form, time_range))
            elif (
                conflict.type == ConflictType.ZOOM_CAPACITY
                and conflict.severity == ConflictSeverity.ERROR
            ):
                drafts.extend(await self._capacity_drafts(form, time_range))

        suggestions = [
            ConflictSuggestion(
                id=f"suggestion-{index}",
                type=draft.type,
                description=draft.description,
                action=draft.action,
                priority=draft.priority,
            )
            for index, draft in enumerate(drafts, start=1)
        ]
        suggestions.sort(key=lambda s: s.priority)
        return suggestions[: self.config.MAX_SUGGESTIONS]

    async def _room_conflict_drafts(
        self,
        form: MeetingFormData,
        time_range: TimeRange,
        alternatives: list[RoomRead],
    ) -> list[_Draft]:
        drafts = []
        ranked = self.rooms.rank_rooms(alternatives, form.participant_count, form.preferred_location)
        for room in ranked[: self.config.MAX_ROOM_SUGGESTIONS]:
            drafts.append(
                _Draft(
                    type=SuggestionType.ROOM_CHANGE,
                    description=f"Use {room.name} (capacity: {room.capacity})",
                    action=SuggestionAction(field="room_id", value=room.id),
                    priority=SUGGESTION_PRIORITIES[(ConflictType.ROOM_CONFLICT, SuggestionType.ROOM_CHANGE)],
                )
            )

        async def room_free(candidate: TimeRange) -> Optional[bool]:
            found = await self.rooms.get_room_conflicts(form.room_id, candidate, form.meeting_id)
            return None if found else True

        slot = await self._nearest_slot(time_range, room_free)
        if slot:
            candidate, _ = slot
            drafts.append(
                _Draft(
                    type=SuggestionType.TIME_CHANGE,
                    description=f"Move to {_clock(candidate.start)}-{_clock(candidate.end)} (room is free)",
                    action=SuggestionAction(field="starts_at", value=candidate.start),
                    priority=SUGGESTION_PRIORITIES[(ConflictType.ROOM_CONFLICT, SuggestionType.TIME_CHANGE)],
                )
            )
        return drafts

    async def _missing_room_drafts(self, form: MeetingFormData, time_range: TimeRange) -> list[_Draft]:
        drafts = []
        optimal = await self.rooms.find_optimal_rooms(
            time_range, form.participant_count, form.preferred_location, form.meeting_id
        )
        if optimal:
            room = optimal[0]
            drafts.append(
                _Draft(
                    type=SuggestionType.ROOM_CHANGE,
                    description=f"Book {room.name} (capacity: {room.capacity})",
                    action=SuggestionAction(field="room_id", value=room.id),
                    priority=SUGGESTION_PRIORITIES[(ConflictType.MISSING_ROOM, SuggestionType.ROOM_CHANGE)],
                )
            )
        drafts.append(
            _Draft(
                type=SuggestionType.TYPE_CHANGE,
                description="Change to online meeting (no room required)",
                action=SuggestionAction(
                    field="meeting_type",
                    value=MeetingType.ONLINE,
                    additional_changes={"room_id": None, "is_video_meeting": True},
                ),
                priority=TYPE_CHANGE_PRIORITY,
            )
        )
        return drafts

    async def _capacity_drafts(self, form: MeetingFormData, time_range: TimeRange) -> list[_Draft]:
        drafts = []

        async def account_free(candidate: TimeRange):
            result = await self.accounts.check_concurrent_meeting_capacity(candidate, form.meeting_id)
            return result.suggested_account

        slot = await self._nearest_slot(time_range, account_free)
        if slot:
            candidate, account = slot
            drafts.append(
                _Draft(
                    type=SuggestionType.TIME_CHANGE,
                    description=(
                        f"Move to {_clock(candidate.start)}-{_clock(candidate.end)} "
                        f"(video account {account.external_account_ref} available)"
                    ),
                    action=SuggestionAction(
                        field="starts_at",
                        value=candidate.start,
                        additional_changes={"video_account_id": account.id},
                    ),
                    priority=SUGGESTION_PRIORITIES[(ConflictType.ZOOM_CAPACITY, SuggestionType.TIME_CHANGE)],
                )
            )

        if form.meeting_type in (MeetingType.ONLINE, MeetingType.HYBRID):
            drafts.append(
                _Draft(
                    type=SuggestionType.TYPE_CHANGE,
                    description="Change to offline meeting (no video account required)",
                    action=SuggestionAction(
                        field="meeting_type",
                        value=MeetingType.OFFLINE,
                        additional_changes={"is_video_meeting": False, "room_id": form.room_id},
                    ),
                    priority=TYPE_CHANGE_PRIORITY,
                )
            )
        return drafts
