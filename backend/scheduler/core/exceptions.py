"""Error taxonomy shared by the conflict detection core."""

from __future__ import annotations

from typing import Literal

ErrorType = Literal["validation", "resource", "network"]


class ConflictDetectionError(Exception):
    """Base error raised by the scheduling core.

    Args:
        message: Human readable description
        type: Which layer failed (``validation``, ``resource`` or ``network``)
        recoverable: Whether the caller may simply retry
    """

    code = "CONFLICT_DETECTION_ERROR"

    def __init__(
        self,
        message: str,
        type: ErrorType = "validation",
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = type
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, object]:
        return {
            "detail": self.message,
            "code": self.code,
            "type": self.type,
            "recoverable": self.recoverable,
        }


class ResourceNotFoundError(ConflictDetectionError):
    code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource: str, resource_id: object) -> None:
        super().__init__(
            f"{resource} with ID {resource_id} not found",
            type="resource",
            recoverable=False,
        )
        self.resource = resource
        self.resource_id = resource_id


class UpstreamUnavailableError(ConflictDetectionError):
    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, message: str = "Persistence backend is unavailable") -> None:
        super().__init__(message, type="resource", recoverable=True)


class InvalidInputError(ConflictDetectionError):
    code = "INVALID_INPUT"

    def __init__(self, message: str) -> None:
        super().__init__(message, type="validation", recoverable=False)


class ProviderNetworkError(ConflictDetectionError):
    """Transport failure reported by the video-conferencing provider."""

    code = "PROVIDER_NETWORK"

    def __init__(self, message: str) -> None:
        super().__init__(message, type="network", recoverable=True)
