from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MeetingType(str, Enum):
    OFFLINE = "offline"
    HYBRID = "hybrid"
    ONLINE = "online"


class ConflictType(str, Enum):
    ROOM_CONFLICT = "room_conflict"
    ZOOM_CAPACITY = "zoom_capacity"
    MISSING_ROOM = "missing_room"
    INVALID_TYPE = "invalid_type"
    OVERLAP = "overlap"


class ConflictSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class SuggestionType(str, Enum):
    TIME_CHANGE = "time_change"
    ROOM_CHANGE = "room_change"
    TYPE_CHANGE = "type_change"


class ConflictInfo(BaseModel):
    type: ConflictType
    severity: ConflictSeverity
    message: str
    affected_resource: Optional[str] = None
    conflicting_meetings: List["ScheduledMeeting"] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class SuggestionAction(BaseModel):
    field: str
    value: Any = None
    additional_changes: Dict[str, Any] = Field(default_factory=dict)


class ConflictSuggestion(BaseModel):
    id: str
    type: SuggestionType
    description: str
    action: SuggestionAction
    # Lower number wins
    priority: int


class ConflictResult(BaseModel):
    conflicts: List[ConflictInfo] = Field(default_factory=list)
    can_submit: bool
    suggestions: List[ConflictSuggestion] = Field(default_factory=list)


from .meeting import ScheduledMeeting  # noqa: E402

ConflictInfo.model_rebuild()
