"""
Video account capacity tracking and load-balanced account selection.

The account roster is cached; the load of each account is not. Load is
recomputed from the booked meetings on every call so capacity decisions
never rely on stale counts.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from scheduler.core.async_utils import gather_limited
from scheduler.core.cache import DirectoryCache
from scheduler.core.config import settings
from scheduler.core.intervals import TimeRange, ensure_valid, overlaps, utcnow
from scheduler.schemas import (
    AccountLoadInfo,
    CacheStats,
    CapacityStatus,
    ScheduledMeeting,
    VideoAccountRead,
    VideoCapacityResult,
)
from scheduler.services.directory import ResourceDirectory

logger = logging.getLogger(__name__)


def utilization(load: int, capacity: int) -> int:
    if capacity <= 0:
        return 100
    return round(load / capacity * 100)


def current_window() -> TimeRange:
    """One-minute window starting now, used when no range is given."""
    now = utcnow()
    return TimeRange(now, now + timedelta(minutes=1))


class AccountCapacityService:
    def __init__(
        self,
        directory: ResourceDirectory,
        cache: Optional[DirectoryCache] = None,
        max_concurrent: int = settings.MAX_CONCURRENT_LOOKUPS,
    ) -> None:
        self.directory = directory
        self.cache = cache if cache is not None else DirectoryCache(settings.ACCOUNT_CACHE_TTL_SECONDS)
        self.max_concurrent = max_concurrent

    async def get_available_accounts(self) -> list[VideoAccountRead]:
        cached = self.cache.get()
        if cached is not None:
            return cached

        accounts = await self.directory.list_active_video_accounts()
        self.cache.set(accounts)
        logger.info(f"Refreshed video account cache: {len(accounts)} accounts found")
        return list(accounts)

    async def concurrent_meetings(
        self,
        account_id: UUID,
        time_range: TimeRange,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> list[ScheduledMeeting]:
        candidates = await self.directory.meetings_near(
            time_range, video_account_id=account_id, exclude_meeting_id=exclude_meeting_id
        )
        return [m for m in candidates if overlaps(m.time_range, time_range)]

    async def count_concurrent_meetings(
        self,
        account_id: UUID,
        time_range: TimeRange,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> int:
        ensure_valid(time_range)
        return len(await self.concurrent_meetings(account_id, time_range, exclude_meeting_id))

    async def _loads(
        self,
        accounts: list[VideoAccountRead],
        time_range: TimeRange,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> list[list[ScheduledMeeting]]:
        return await gather_limited(
            (self.concurrent_meetings(a.id, time_range, exclude_meeting_id) for a in accounts),
            max_concurrent=self.max_concurrent,
        )

    async def check_concurrent_meeting_capacity(
        self,
        time_range: TimeRange,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> VideoCapacityResult:
        ensure_valid(time_range)
        accounts = await self.get_available_accounts()
        if not accounts:
            return VideoCapacityResult(has_available_account=False)

        loads = await self._loads(accounts, time_range, exclude_meeting_id)
        counts = [len(meetings) for meetings in loads]

        total_max = sum(a.max_concurrent_meetings for a in accounts)
        usage = sum(counts)

        # Per-account gate: an account at its own cap cannot take the meeting
        qualifying = [
            (utilization(count, account.max_concurrent_meetings), index, account)
            for index, (account, count) in enumerate(zip(accounts, counts))
            if count < account.max_concurrent_meetings
        ]
        suggested = min(qualifying, key=lambda item: (item[0], item[1]))[2] if qualifying else None

        return VideoCapacityResult(
            has_available_account=suggested is not None,
            total_accounts=len(accounts),
            total_max_concurrent=total_max,
            current_total_usage=usage,
            available_slots=total_max - usage,
            suggested_account=suggested,
            conflicting_meetings=[m for meetings in loads for m in meetings],
        )

    async def find_available_account(
        self,
        time_range: TimeRange,
        exclude_meeting_id: Optional[UUID] = None,
    ) -> Optional[VideoAccountRead]:
        """Account a new booking in ``time_range`` should be placed on."""
        result = await self.check_concurrent_meeting_capacity(time_range, exclude_meeting_id)
        return result.suggested_account

    async def _ranked_loads(
        self,
        time_range: Optional[TimeRange],
    ) -> list[tuple[AccountLoadInfo, VideoAccountRead]]:
        time_range = ensure_valid(time_range) if time_range else current_window()
        accounts = await self.get_available_accounts()
        loads = await self._loads(accounts, time_range)

        ranked = [
            (
                AccountLoadInfo(
                    account_id=account.id,
                    current_load=len(meetings),
                    max_capacity=account.max_concurrent_meetings,
                    utilization_percentage=utilization(len(meetings), account.max_concurrent_meetings),
                ),
                account,
            )
            for account, meetings in zip(accounts, loads)
        ]
        # Stable sort: ties keep catalog order
        return sorted(ranked, key=lambda item: item[0].utilization_percentage)

    async def get_account_load_balancing(
        self,
        time_range: Optional[TimeRange] = None,
    ) -> list[AccountLoadInfo]:
        """Load of every account in ``time_range`` (default: right now), least utilized first."""
        return [info for info, _ in await self._ranked_loads(time_range)]

    async def get_least_loaded_account(
        self,
        time_range: Optional[TimeRange] = None,
    ) -> Optional[VideoAccountRead]:
        ranked = await self._ranked_loads(time_range)
        return ranked[0][1] if ranked else None

    async def get_capacity_status(self, time_range: Optional[TimeRange] = None) -> CapacityStatus:
        """Totals across all active accounts for ``time_range`` (default: right now)."""
        ranked = await self._ranked_loads(time_range)
        capacity = sum(info.max_capacity for info, _ in ranked)
        usage = sum(info.current_load for info, _ in ranked)
        return CapacityStatus(
            total_accounts=len(ranked),
            total_capacity=capacity,
            current_usage=usage,
            available_slots=capacity - usage,
            utilization_percentage=round(usage / capacity * 100, 2) if capacity else 0.0,
        )

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> CacheStats:
        return CacheStats(**self.cache.stats())
