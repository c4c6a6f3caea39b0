"""
Re-check already booked video meetings after the account roster changed.

Removing or shrinking a video account can leave upcoming bookings without
capacity. ``revalidate_upcoming_video_meetings`` drops the cached roster,
then runs every upcoming video meeting back through ``validate_meeting``
and reports the ones that now have conflicts.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from pydantic import ValidationError

from scheduler.core.config import settings
from scheduler.core.exceptions import InvalidInputError, ResourceNotFoundError
from scheduler.core.intervals import TimeRange, utcnow
from scheduler.schemas import (
    MeetingFormData,
    MeetingRevalidation,
    RevalidationReport,
    ScheduledMeeting,
)
from scheduler.services.conflict_detection import ConflictDetectionService

logger = logging.getLogger(__name__)


def to_form(meeting: ScheduledMeeting) -> MeetingFormData:
    """Form data that re-submits ``meeting`` as an edit of itself."""
    return MeetingFormData(
        meeting_id=meeting.id,
        title=meeting.title,
        starts_at=meeting.starts_at,
        duration_minutes=int((meeting.ends_at - meeting.starts_at).total_seconds() // 60),
        meeting_type=meeting.meeting_type,
        room_id=meeting.room_id,
        is_video_meeting=True,
        participants=meeting.participants,
    )


class ConflictRevalidationService:
    def __init__(self, conflicts: ConflictDetectionService) -> None:
        self.conflicts = conflicts

    async def revalidate_upcoming_video_meetings(
        self, horizon_days: int = settings.REVALIDATION_HORIZON_DAYS
    ) -> RevalidationReport:
        accounts = self.conflicts.accounts
        accounts.clear_cache()

        now = utcnow()
        period = TimeRange.checked(now, now + timedelta(days=horizon_days))
        meetings = await accounts.directory.upcoming_video_meetings(period)

        report = RevalidationReport(checked=0)
        for meeting in meetings:
            try:
                result = await self.conflicts.validate_meeting(to_form(meeting))
            except (ValidationError, InvalidInputError, ResourceNotFoundError) as exc:
                logger.warning(f"Cannot revalidate meeting {meeting.id}: {exc}")
                report.skipped += 1
                continue

            report.checked += 1
            if result.conflicts:
                report.conflicted.append(
                    MeetingRevalidation(
                        meeting_id=meeting.id,
                        title=meeting.title,
                        starts_at=meeting.starts_at,
                        result=result,
                    )
                )

        logger.info(
            f"Revalidated {report.checked} upcoming video meeting(s): "
            f"{len(report.conflicted)} with conflicts, {report.skipped} skipped"
        )
        return report
