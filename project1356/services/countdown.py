"""Countdown arithmetic over epoch-millisecond instants.

Every function takes an optional ``now`` so callers can pin the clock;
when omitted the current wall-clock time is used.
"""

import asyncio
import math
import time
from typing import AsyncIterator, Optional

from ..errors import IntegrityFailure
from ..schemas.commitment import Countdown, CountdownStatus

DAY_MS = 24 * 60 * 60 * 1000
INTEGRITY_TOLERANCE_MS = 1000
MILESTONES = (1000, 500, 100, 30, 7, 1)


def now_ms() -> int:
    return int(time.time() * 1000)


def _resolve(now: Optional[int]) -> int:
    return now_ms() if now is None else now


def create_countdown(duration_days: int, now: Optional[int] = None) -> Countdown:
    start_date = _resolve(now)
    return Countdown(
        startDate=start_date,
        durationDays=duration_days,
        endDate=start_date + duration_days * DAY_MS,
    )


def get_remaining_days(countdown: Countdown, now: Optional[int] = None) -> int:
    remaining_ms = countdown.endDate - _resolve(now)
    if remaining_ms <= 0:
        return 0
    # A partially elapsed day still counts as a full day remaining.
    return math.ceil(remaining_ms / DAY_MS)


def is_complete(countdown: Countdown, now: Optional[int] = None) -> bool:
    return _resolve(now) >= countdown.endDate


def validate_integrity(countdown: Countdown) -> bool:
    expected_end = countdown.startDate + countdown.durationDays * DAY_MS
    return abs(countdown.endDate - expected_end) < INTEGRITY_TOLERANCE_MS


def ensure_integrity(countdown: Countdown) -> Countdown:
    if not validate_integrity(countdown):
        raise IntegrityFailure(
            f"Countdown endDate {countdown.endDate} does not match startDate "
            f"{countdown.startDate} + {countdown.durationDays} days"
        )
    return countdown


def get_progress(countdown: Countdown, now: Optional[int] = None) -> int:
    elapsed = _resolve(now) - countdown.startDate
    total = countdown.endDate - countdown.startDate
    if total <= 0:
        return 100
    progress = min(100.0, max(0.0, elapsed / total * 100))
    # Half rounds up, as the mobile client displays it.
    return int(math.floor(progress + 0.5))


def check_milestone(countdown: Countdown, threshold: int, now: Optional[int] = None) -> bool:
    return get_remaining_days(countdown, now) == threshold


def get_next_milestone(remaining_days: int) -> Optional[int]:
    for milestone in MILESTONES:
        if remaining_days >= milestone:
            return milestone
    return None


def countdown_status(countdown: Countdown, now: Optional[int] = None) -> CountdownStatus:
    current = _resolve(now)
    remaining = get_remaining_days(countdown, current)
    return CountdownStatus(
        remainingDays=remaining,
        isComplete=is_complete(countdown, current),
        progress=get_progress(countdown, current),
        valid=validate_integrity(countdown),
        nextMilestone=get_next_milestone(remaining),
    )


async def watch_countdown(
    countdown: Countdown,
    interval_seconds: float = 60.0,
    limit: Optional[int] = None,
) -> AsyncIterator[CountdownStatus]:
    # Read-only; safe to cancel between ticks.
    sent = 0
    while True:
        yield countdown_status(countdown)
        sent += 1
        if limit is not None and sent >= limit:
            return
        await asyncio.sleep(interval_seconds)
