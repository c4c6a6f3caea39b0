"""Per meeting-type resource requirements.

The rules are data: adding a meeting type means adding a row to
``MEETING_TYPE_RULES``. Evaluating them does no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID

from scheduler.schemas import ConflictInfo, ConflictSeverity, ConflictType, MeetingType


@dataclass(frozen=True)
class MeetingTypeRule:
    # Severity of the conflict raised when no room is selected; None = room not needed
    missing_room_severity: Optional[ConflictSeverity]
    requires_video: bool
    missing_room_message: str = ""
    missing_room_hints: tuple[str, ...] = ()


MEETING_TYPE_RULES: dict[MeetingType, MeetingTypeRule] = {
    MeetingType.OFFLINE: MeetingTypeRule(
        missing_room_severity=ConflictSeverity.ERROR,
        requires_video=False,
        missing_room_message="Offline meetings require a physical room to be selected.",
        missing_room_hints=(
            "Select a meeting room from the available options",
            "Consider changing to online meeting if no room is needed",
        ),
    ),
    MeetingType.HYBRID: MeetingTypeRule(
        missing_room_severity=ConflictSeverity.WARNING,
        requires_video=True,
        missing_room_message=(
            "Hybrid meetings typically require a physical room for in-person participants."
        ),
        missing_room_hints=(
            "Select a meeting room for in-person participants",
            "Consider changing to online meeting if all participants will be remote",
        ),
    ),
    MeetingType.ONLINE: MeetingTypeRule(
        missing_room_severity=None,
        requires_video=True,
    ),
}


def _rule_for(meeting_type: Union[MeetingType, str]) -> Optional[MeetingTypeRule]:
    try:
        return MEETING_TYPE_RULES.get(MeetingType(meeting_type))
    except ValueError:
        return None


def invalid_type_conflict(meeting_type: object) -> ConflictInfo:
    return ConflictInfo(
        type=ConflictType.INVALID_TYPE,
        severity=ConflictSeverity.ERROR,
        message=f"Invalid meeting type: {meeting_type}",
        suggestions=["Select a valid meeting type (offline, hybrid, or online)"],
    )


def validate_room_requirement(
    meeting_type: Union[MeetingType, str],
    room_id: Optional[UUID] = None,
) -> list[ConflictInfo]:
    rule = _rule_for(meeting_type)
    if rule is None:
        return [invalid_type_conflict(meeting_type)]
    if room_id or rule.missing_room_severity is None:
        return []
    return [
        ConflictInfo(
            type=ConflictType.MISSING_ROOM,
            severity=rule.missing_room_severity,
            message=rule.missing_room_message,
            suggestions=list(rule.missing_room_hints),
        )
    ]


def requires_video_account(
    meeting_type: Union[MeetingType, str],
    is_video_meeting: Optional[bool] = None,
) -> bool:
    """Explicit flag wins; otherwise the meeting type decides."""
    if is_video_meeting is not None:
        return is_video_meeting
    rule = _rule_for(meeting_type)
    return bool(rule and rule.requires_video)
