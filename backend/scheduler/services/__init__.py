from .account_capacity import AccountCapacityService
from .conflict_detection import ConflictDetectionService
from .directory import ResourceDirectory
from .meeting_rules import MEETING_TYPE_RULES, requires_video_account, validate_room_requirement
from .room_availability import RoomAvailabilityService, default_room_score
from .revalidation import ConflictRevalidationService
from .sql_store import SqlMeetingStore
from .store import InMemoryMeetingStore, MeetingStore

__all__ = [
    "AccountCapacityService",
    "ConflictDetectionService",
    "ConflictRevalidationService",
    "InMemoryMeetingStore",
    "MEETING_TYPE_RULES",
    "MeetingStore",
    "ResourceDirectory",
    "RoomAvailabilityService",
    "SqlMeetingStore",
    "default_room_score",
    "requires_video_account",
    "validate_room_requirement",
]
