from __future__ import annotations

from fastapi import APIRouter

from scheduler.api.deps import ConflictServiceDep
from scheduler.schemas import ConflictResult, MeetingFormData

router = APIRouter()


@router.post(
    "/validate",
    response_model=ConflictResult,
    summary="Validate a proposed meeting",
)
async def validate_meeting(
    payload: MeetingFormData,
    conflicts: ConflictServiceDep,
) -> ConflictResult:
    """Report conflicts, whether the meeting can be submitted, and ranked fixes."""
    return await conflicts.validate_meeting(payload)
