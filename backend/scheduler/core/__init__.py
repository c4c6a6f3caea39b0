from .config import settings
from .exceptions import (
    ConflictDetectionError,
    InvalidInputError,
    ProviderNetworkError,
    ResourceNotFoundError,
    UpstreamUnavailableError,
)
from .intervals import TimeRange, overlaps

__all__ = [
    "settings",
    "ConflictDetectionError",
    "InvalidInputError",
    "ProviderNetworkError",
    "ResourceNotFoundError",
    "TimeRange",
    "UpstreamUnavailableError",
    "overlaps",
]
