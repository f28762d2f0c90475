from ..schemas.commitment import CategorizationResult, CommitmentMode

CANONICAL_GOAL_COUNT = 6
CANONICAL_DURATION_DAYS = 1356


def _is_canonical_count(goal_count: int) -> bool:
    return goal_count == CANONICAL_GOAL_COUNT


def _is_canonical_duration(duration_days: int) -> bool:
    return duration_days == CANONICAL_DURATION_DAYS


def categorize(goal_count: int, duration_days: int) -> CategorizationResult:
    if _is_canonical_count(goal_count) and _is_canonical_duration(duration_days):
        return CategorizationResult(
            mode=CommitmentMode.TEAM_MODE,
            deadlineType="GLOBAL_SHARED",
            philosophyAlignment="CANONICAL",
            description=(
                "You have chosen the canonical commitment: exactly 6 goals over exactly 1356 days. "
                "You share the global deadline with others who made the same choice. "
                "This represents alignment with the original Project 1356 philosophy."
            ),
        )

    if _is_canonical_count(goal_count):
        return CategorizationResult(
            mode=CommitmentMode.STRUCTURED_SOLO,
            deadlineType="USER_DEFINED",
            philosophyAlignment="DISCIPLINED_VARIANT",
            description=(
                "You have chosen structured commitment: 6 goals with a custom time horizon. "
                "This indicates disciplined structure while maintaining flexibility in duration."
            ),
        )

    return CategorizationResult(
        mode=CommitmentMode.FLEXIBLE_SOLO,
        deadlineType="USER_DEFINED",
        philosophyAlignment="ADAPTIVE_VARIANT",
        description=(
            "You have chosen flexible commitment: a custom number of goals with a custom duration. "
            "This indicates an exploratory or adaptive commitment style."
        ),
    )


def get_mode_display_name(mode: CommitmentMode) -> str:
    return CommitmentMode(mode).value.replace("_", " ").title()
