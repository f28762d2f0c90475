import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from ..schemas.commitment import Countdown
from ..schemas.notification import Recurrence, ScheduledNotification
from ..schemas.profile import NotificationSettings
from ..utils.ids import generate_id
from .countdown import DAY_MS, MILESTONES, get_remaining_days, now_ms

log = logging.getLogger(__name__)

CHANNEL_ID = "project1356-countdown"
APP_TITLE = "Project 1356"
MILESTONE_TITLE = "Milestone"
WEEK_MS = 7 * DAY_MS


class NotificationScheduler(Protocol):
    async def schedule_at(
        self,
        at: int,
        title: str,
        message: str,
        recurrence: Optional[Recurrence] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> ScheduledNotification:
        ...

    async def cancel_all(self) -> None:
        ...


class InMemoryNotificationScheduler:
    """Records scheduled notifications instead of delivering them."""

    def __init__(self) -> None:
        self._scheduled: List[ScheduledNotification] = []
        self._lock = asyncio.Lock()

    async def schedule_at(
        self,
        at: int,
        title: str,
        message: str,
        recurrence: Optional[Recurrence] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> ScheduledNotification:
        notification = ScheduledNotification(
            id=generate_id(),
            at=at,
            title=title,
            message=message,
            recurrence=recurrence,
            payload={"channelId": CHANNEL_ID, **(payload or {})},
        )
        async with self._lock:
            self._scheduled.append(notification)
        return notification

    async def cancel_all(self) -> None:
        async with self._lock:
            self._scheduled.clear()

    async def list(self) -> List[ScheduledNotification]:
        async with self._lock:
            return sorted(self._scheduled, key=lambda item: item.at)


def daily_message(remaining_days: int) -> str:
    return f"Day {remaining_days} of your countdown remains."


def milestone_message(milestone: int) -> str:
    return f"{milestone} days remaining in your countdown."


async def schedule_daily_reminder(
    scheduler: NotificationScheduler,
    countdown: Countdown,
    now: Optional[int] = None,
    recurrence: Recurrence = "day",
) -> ScheduledNotification:
    current = now_ms() if now is None else now
    remaining = get_remaining_days(countdown, current)
    offset = WEEK_MS if recurrence == "week" else DAY_MS
    return await scheduler.schedule_at(
        current + offset,
        APP_TITLE,
        daily_message(remaining),
        recurrence=recurrence,
        payload={"type": "daily_reminder", "screen": "Countdown"},
    )


async def _schedule_thresholds(
    scheduler: NotificationScheduler,
    countdown: Countdown,
    thresholds: List[int],
    current: int,
    kind: str,
) -> List[ScheduledNotification]:
    remaining = get_remaining_days(countdown, current)
    scheduled: List[ScheduledNotification] = []
    for threshold in thresholds:
        if remaining < threshold:
            continue
        fire_at = current + (remaining - threshold) * DAY_MS
        scheduled.append(
            await scheduler.schedule_at(
                fire_at,
                MILESTONE_TITLE,
                milestone_message(threshold),
                payload={"type": kind, "milestone": threshold, "screen": "Countdown"},
            )
        )
    return scheduled


async def schedule_milestones(
    scheduler: NotificationScheduler,
    countdown: Countdown,
    now: Optional[int] = None,
) -> List[ScheduledNotification]:
    current = now_ms() if now is None else now
    return await _schedule_thresholds(scheduler, countdown, list(MILESTONES), current, "milestone")


async def apply_settings(
    scheduler: NotificationScheduler,
    countdown: Countdown,
    settings: NotificationSettings,
    now: Optional[int] = None,
) -> List[ScheduledNotification]:
    current = now_ms() if now is None else now
    await scheduler.cancel_all()
    if not settings.enabled:
        log.info("Notifications disabled; cleared schedule")
        return []

    scheduled: List[ScheduledNotification] = []
    if settings.frequency == "custom":
        custom_days = [day for day in settings.customDays or [] if day not in MILESTONES]
        scheduled.extend(await _schedule_thresholds(scheduler, countdown, custom_days, current, "custom_day"))
    else:
        recurrence: Recurrence = "week" if settings.frequency == "weekly" else "day"
        scheduled.append(await schedule_daily_reminder(scheduler, countdown, current, recurrence))
    scheduled.extend(await schedule_milestones(scheduler, countdown, current))
    log.info("Scheduled %d notifications (%s)", len(scheduled), settings.frequency)
    return scheduled
