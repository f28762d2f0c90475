import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from project1356.schemas.commitment import CommitmentMode
from project1356.services.rule_engine import categorize, get_mode_display_name


def test_categorize_decision_table():
    cases = [
        (6, 1356, CommitmentMode.TEAM_MODE, "GLOBAL_SHARED", "CANONICAL"),
        (6, 200, CommitmentMode.STRUCTURED_SOLO, "USER_DEFINED", "DISCIPLINED_VARIANT"),
        (3, 100, CommitmentMode.FLEXIBLE_SOLO, "USER_DEFINED", "ADAPTIVE_VARIANT"),
        (7, 1356, CommitmentMode.FLEXIBLE_SOLO, "USER_DEFINED", "ADAPTIVE_VARIANT"),
        (0, 0, CommitmentMode.FLEXIBLE_SOLO, "USER_DEFINED", "ADAPTIVE_VARIANT"),
    ]
    for goal_count, duration_days, mode, deadline, alignment in cases:
        result = categorize(goal_count, duration_days)
        assert result.mode == mode
        assert result.deadlineType == deadline
        assert result.philosophyAlignment == alignment
        assert result.description


def test_team_mode_description_mentions_shared_deadline():
    assert "global deadline" in categorize(6, 1356).description


def test_mode_display_names():
    assert get_mode_display_name(CommitmentMode.TEAM_MODE) == "Team Mode"
    assert get_mode_display_name(CommitmentMode.STRUCTURED_SOLO) == "Structured Solo"
    assert get_mode_display_name(CommitmentMode.FLEXIBLE_SOLO) == "Flexible Solo"
    assert get_mode_display_name("FLEXIBLE_SOLO") == "Flexible Solo"
