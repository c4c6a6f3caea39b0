from .meeting import Meeting
from .room import Room
from .video_account import VideoAccount

__all__ = [
    "Meeting",
    "Room",
    "VideoAccount",
]
