import logging
from typing import Any, Dict, List, Optional, Tuple

from ..config import MaskingPolicy
from ..errors import CommitmentMissingError, GoalNotFoundError, SetupValidationError
from ..schemas.commitment import Goal, UserCommitment
from ..utils.ids import generate_id
from ..utils.strings import mask_partial
from .storage import StorageService

log = logging.getLogger(__name__)

MAIN_GOAL_LIMIT = 6
GOAL_ICONS = ["🎯", "🌟", "💎", "🔥", "⚡", "🌱", "🚀", "💫", "🎨", "🔮"]
EDITABLE_FIELDS = {"title", "detail", "icon", "imageUrl", "customDays"}


def split_goals(goals: List[Goal]) -> Tuple[List[Goal], List[Goal]]:
    return list(goals[:MAIN_GOAL_LIMIT]), list(goals[MAIN_GOAL_LIMIT:])


def display_title(goal: Goal, index: int, policy: MaskingPolicy = "placeholder") -> str:
    if not goal.locked:
        return goal.title
    if policy == "partial":
        return mask_partial(goal.title)
    return f"Goal {index + 1} (locked)"


def display_icon(goal: Goal, index: int) -> str:
    return goal.icon or GOAL_ICONS[index % len(GOAL_ICONS)]


def present_goals(goals: List[Goal], policy: MaskingPolicy = "placeholder") -> List[Dict[str, Any]]:
    presented: List[Dict[str, Any]] = []
    for index, goal in enumerate(goals):
        presented.append(
            {
                "id": goal.id,
                "title": display_title(goal, index, policy),
                "detail": None if goal.locked else goal.detail,
                "locked": goal.locked,
                "icon": display_icon(goal, index),
                "imageUrl": None if goal.locked else goal.imageUrl,
                "customDays": goal.customDays,
                "main": index < MAIN_GOAL_LIMIT,
            }
        )
    return presented


async def _require_commitment(storage: StorageService) -> UserCommitment:
    commitment = await storage.load_commitment()
    if not commitment:
        raise CommitmentMissingError("No commitment found. Please set up your commitment first.")
    return commitment


def _index_of(goals: List[Goal], goal_id: str) -> int:
    for index, goal in enumerate(goals):
        if goal.id == goal_id:
            return index
    raise GoalNotFoundError(f"Goal {goal_id} not found")


async def add_goal(
    storage: StorageService,
    title: str,
    detail: str = "",
    locked: bool = True,
    image_url: Optional[str] = None,
    custom_days: Optional[int] = None,
    icon: Optional[str] = None,
) -> UserCommitment:
    if not title or not title.strip():
        raise SetupValidationError("Please enter a goal title.")
    commitment = await _require_commitment(storage)
    goal = Goal(
        id=generate_id(),
        title=title.strip(),
        detail=(detail or "").strip(),
        locked=locked,
        icon=icon,
        imageUrl=image_url,
        customDays=custom_days,
    )
    goals = list(commitment.goals) + [goal]
    updated = commitment.model_copy(update={"goals": goals, "goalCount": len(goals)})
    await storage.save_commitment(updated)
    log.info("Added goal %s (%d total)", goal.id, len(goals))
    return updated


async def update_goal(storage: StorageService, goal_id: str, updates: Dict[str, Any]) -> UserCommitment:
    unknown = set(updates) - EDITABLE_FIELDS
    if unknown:
        raise SetupValidationError(f"Cannot update goal fields: {', '.join(sorted(unknown))}")
    if "title" in updates and not str(updates["title"] or "").strip():
        raise SetupValidationError("Please enter a goal title.")
    commitment = await _require_commitment(storage)
    goals = list(commitment.goals)
    index = _index_of(goals, goal_id)
    merged = {**goals[index].model_dump(), **updates}
    if "title" in updates:
        merged["title"] = str(updates["title"]).strip()
    goals[index] = Goal.model_validate(merged)
    updated = commitment.model_copy(update={"goals": goals})
    await storage.save_commitment(updated)
    return updated


async def set_goal_locked(storage: StorageService, goal_id: str, locked: bool) -> UserCommitment:
    commitment = await _require_commitment(storage)
    goals = list(commitment.goals)
    index = _index_of(goals, goal_id)
    goals[index] = goals[index].model_copy(update={"locked": locked})
    updated = commitment.model_copy(update={"goals": goals})
    await storage.save_commitment(updated)
    log.info("Goal %s %s", goal_id, "locked" if locked else "unlocked")
    return updated
