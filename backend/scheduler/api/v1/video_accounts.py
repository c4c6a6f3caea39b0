from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from scheduler.api.deps import AccountServiceDep, RevalidationServiceDep
from scheduler.core.config import settings
from scheduler.core.intervals import TimeRange
from scheduler.schemas import (
    AccountLoadInfo,
    CacheStats,
    CapacityStatus,
    RevalidationReport,
    VideoAccountRead,
    VideoCapacityResult,
)

router = APIRouter()


def _optional_range(start: Optional[datetime], end: Optional[datetime]) -> Optional[TimeRange]:
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start and end must be given together",
        )
    return TimeRange.checked(start, end)


@router.get("/", response_model=List[VideoAccountRead], summary="List video accounts")
async def list_video_accounts(accounts: AccountServiceDep) -> List[VideoAccountRead]:
    return await accounts.get_available_accounts()


@router.get(
    "/capacity",
    response_model=VideoCapacityResult,
    summary="Concurrent meeting capacity for a time range",
)
async def check_capacity(
    accounts: AccountServiceDep,
    start: datetime = Query(..., description="Range start (ISO format)"),
    end: datetime = Query(..., description="Range end (ISO format)"),
    exclude_meeting_id: Optional[UUID] = None,
) -> VideoCapacityResult:
    return await accounts.check_concurrent_meeting_capacity(
        TimeRange.checked(start, end), exclude_meeting_id
    )


@router.get(
    "/load-balancing",
    response_model=List[AccountLoadInfo],
    summary="Account load, least utilized first",
)
async def get_load_balancing(
    accounts: AccountServiceDep,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[AccountLoadInfo]:
    return await accounts.get_account_load_balancing(_optional_range(start, end))


@router.get(
    "/least-loaded",
    response_model=Optional[VideoAccountRead],
    summary="Least loaded account",
)
async def get_least_loaded(
    accounts: AccountServiceDep,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Optional[VideoAccountRead]:
    return await accounts.get_least_loaded_account(_optional_range(start, end))


@router.get(
    "/capacity-status",
    response_model=CapacityStatus,
    summary="Fleet-wide capacity totals",
)
async def get_capacity_status(
    accounts: AccountServiceDep,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> CapacityStatus:
    return await accounts.get_capacity_status(_optional_range(start, end))


@router.post(
    "/revalidate",
    response_model=RevalidationReport,
    summary="Refresh the account roster and re-check upcoming video meetings",
)
async def revalidate_upcoming(
    revalidation: RevalidationServiceDep,
    horizon_days: int = Query(settings.REVALIDATION_HORIZON_DAYS, ge=1, le=365),
) -> RevalidationReport:
    return await revalidation.revalidate_upcoming_video_meetings(horizon_days)


@router.get("/cache", response_model=CacheStats, summary="Account cache statistics")
def get_cache_stats(accounts: AccountServiceDep) -> CacheStats:
    return accounts.get_cache_stats()


@router.delete("/cache", response_model=CacheStats, summary="Clear account cache")
def clear_cache(accounts: AccountServiceDep) -> CacheStats:
    accounts.clear_cache()
    return accounts.get_cache_stats()
