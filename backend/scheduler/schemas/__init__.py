from .conflict import (
    ConflictInfo,
    ConflictResult,
    ConflictSeverity,
    ConflictSuggestion,
    ConflictType,
    MeetingType,
    SuggestionAction,
    SuggestionType,
)
from .meeting import MeetingFormData, ScheduledMeeting
from .room import RoomAvailabilityResult, RoomRead, RoomUtilization
from .video_account import (
    AccountLoadInfo,
    CacheStats,
    CapacityStatus,
    MeetingRevalidation,
    RevalidationReport,
    VideoAccountRead,
    VideoCapacityResult,
)

__all__ = [
    "AccountLoadInfo",
    "CacheStats",
    "CapacityStatus",
    "ConflictInfo",
    "ConflictResult",
    "ConflictSeverity",
    "ConflictSuggestion",
    "ConflictType",
    "MeetingFormData",
    "MeetingRevalidation",
    "MeetingType",
    "RevalidationReport",
    "RoomAvailabilityResult",
    "RoomRead",
    "RoomUtilization",
    "ScheduledMeeting",
    "SuggestionAction",
    "SuggestionType",
    "VideoAccountRead",
    "VideoCapacityResult",
]
