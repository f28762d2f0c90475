import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from project1356.errors import SetupValidationError
from project1356.schemas.commitment import CommitmentMode
from project1356.services.countdown import DAY_MS, validate_integrity
from project1356.services.notifications import InMemoryNotificationScheduler
from project1356.services.onboarding import complete_setup, draft_goals
from project1356.services.storage import InMemoryKeyValueStore, StorageService

START = 1_700_000_000_000


def _titled(count: int):
    return [goal.model_copy(update={"title": f"Goal {idx}"}) for idx, goal in enumerate(draft_goals(count))]


def test_draft_goals_are_blank_locked_and_unique():
    goals = draft_goals(6)
    assert len(goals) == 6
    assert all(goal.locked and goal.title == "" for goal in goals)
    assert len({goal.id for goal in goals}) == 6
    with pytest.raises(SetupValidationError):
        draft_goals(0)


@pytest.mark.asyncio
async def test_complete_setup_persists_and_schedules():
    storage = StorageService(InMemoryKeyValueStore())
    scheduler = InMemoryNotificationScheduler()
    commitment = await complete_setup(storage, scheduler, 6, 1356, _titled(6), now=START)

    assert commitment.mode == CommitmentMode.TEAM_MODE
    assert commitment.countdown.endDate == START + 1356 * DAY_MS
    assert validate_integrity(commitment.countdown)
    assert await storage.load_commitment() == commitment

    state = await storage.load_app_state()
    assert state.isOnboarded is True
    assert state.commitment == commitment

    scheduled = await scheduler.list()
    kinds = [item.payload["type"] for item in scheduled]
    assert kinds.count("daily_reminder") == 1
    assert kinds.count("milestone") == 6


@pytest.mark.asyncio
async def test_complete_setup_validation():
    storage = StorageService(InMemoryKeyValueStore())
    scheduler = InMemoryNotificationScheduler()
    cases = [
        (0, 10, []),
        (2, 0, _titled(2)),
        (3, 10, _titled(2)),
        (1, 10, draft_goals(1)),
    ]
    for goal_count, duration_days, goals in cases:
        with pytest.raises(SetupValidationError):
            await complete_setup(storage, scheduler, goal_count, duration_days, goals)
    assert await storage.load_commitment() is None
    assert await scheduler.list() == []
