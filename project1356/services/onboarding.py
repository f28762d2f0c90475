import logging
from typing import List, Optional

from ..errors import SetupValidationError
from ..schemas.commitment import Goal, UserCommitment
from ..schemas.profile import AppState
from ..utils.ids import generate_id
from .countdown import create_countdown, now_ms
from .notifications import NotificationScheduler, schedule_daily_reminder, schedule_milestones
from .rule_engine import categorize
from .storage import StorageService

log = logging.getLogger(__name__)


def draft_goals(count: int) -> List[Goal]:
    if count < 1:
        raise SetupValidationError("Please enter a valid number of goals (at least 1).")
    return [Goal(id=generate_id(), title="", detail="", locked=True) for _ in range(count)]


def _validate_setup(goal_count: int, duration_days: int, goals: List[Goal]) -> None:
    if goal_count < 1:
        raise SetupValidationError("Please enter a valid number of goals (at least 1).")
    if duration_days < 1:
        raise SetupValidationError("Please enter a valid number of days (at least 1).")
    if len(goals) != goal_count:
        raise SetupValidationError(f"Expected {goal_count} goals, got {len(goals)}.")
    if any(not goal.title.strip() for goal in goals):
        raise SetupValidationError("Please provide a title for all goals.")
    ids = [goal.id for goal in goals]
    if len(set(ids)) != len(ids):
        raise SetupValidationError("Goal ids must be unique.")


async def complete_setup(
    storage: StorageService,
    scheduler: NotificationScheduler,
    goal_count: int,
    duration_days: int,
    goals: List[Goal],
    now: Optional[int] = None,
) -> UserCommitment:
    _validate_setup(goal_count, duration_days, goals)
    current = now_ms() if now is None else now
    categorization = categorize(goal_count, duration_days)
    countdown = create_countdown(duration_days, current)
    commitment = UserCommitment(
        mode=categorization.mode,
        goalCount=goal_count,
        durationDays=duration_days,
        goals=[goal.model_copy(update={"title": goal.title.strip(), "detail": goal.detail.strip()}) for goal in goals],
        countdown=countdown,
        createdAt=current,
    )
    await storage.save_commitment(commitment)
    await storage.save_app_state(AppState(isOnboarded=True, commitment=commitment))
    await schedule_daily_reminder(scheduler, countdown, current)
    await schedule_milestones(scheduler, countdown, current)
    log.info("Commitment created: %s, %d goals over %d days", commitment.mode.value, goal_count, duration_days)
    return commitment
