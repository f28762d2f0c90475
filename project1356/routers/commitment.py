from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from ..errors import CommitmentMissingError, GoalNotFoundError, IntegrityFailure
from ..runtime import Runtime, get_runtime
from ..schemas.commitment import Goal, UserCommitment
from ..services.app_state import load_app_state
from ..services.countdown import countdown_status, ensure_integrity, watch_countdown
from ..services.goals import add_goal, present_goals, set_goal_locked, update_goal
from ..services.onboarding import complete_setup, draft_goals
from ..services.rule_engine import categorize, get_mode_display_name
from ..utils.ids import generate_id

router = APIRouter(prefix="", tags=["commitment"])


def _require_int(body: Dict[str, Any], *keys: str) -> int:
    for key in keys:
        value = body.get(key)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError) as error:
            raise HTTPException(status_code=422, detail=f"{keys[0]} must be an integer") from error
    raise HTTPException(status_code=422, detail=f"{keys[0]} required")


def _commitment_view(runtime: Runtime, commitment: UserCommitment) -> Dict[str, Any]:
    return {
        "mode": commitment.mode,
        "modeDisplayName": get_mode_display_name(commitment.mode),
        "goalCount": commitment.goalCount,
        "durationDays": commitment.durationDays,
        "createdAt": commitment.createdAt,
        "countdown": commitment.countdown,
        "goals": present_goals(commitment.goals, runtime.settings.masking_policy),
    }


@router.post("/commitment/categorize")
async def categorize_endpoint(body: Dict[str, Any]) -> Dict[str, Any]:
    goal_count = _require_int(body, "goalCount", "goal_count")
    duration_days = _require_int(body, "durationDays", "duration_days")
    result = categorize(goal_count, duration_days)
    return {**result.model_dump(), "displayName": get_mode_display_name(result.mode)}


@router.post("/onboarding/draft")
async def draft_endpoint(body: Dict[str, Any]) -> List[Goal]:
    try:
        return draft_goals(_require_int(body, "goalCount", "goal_count"))
    except ValueError as error:
        raise HTTPException(status_code=422, detail=str(error)) from error


@router.post("/onboarding/complete")
async def complete_endpoint(body: Dict[str, Any], runtime: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    goal_count = _require_int(body, "goalCount", "goal_count")
    duration_days = _require_int(body, "durationDays", "duration_days")
    try:
        goals = [Goal(**{**goal, "id": goal.get("id") or generate_id()}) for goal in body.get("goals") or []]
        commitment = await complete_setup(runtime.storage, runtime.scheduler, goal_count, duration_days, goals)
    except (AttributeError, TypeError, ValueError, ValidationError) as error:
        raise HTTPException(status_code=422, detail=str(error)) from error
    return _commitment_view(runtime, commitment)


@router.get("/app-state")
async def app_state_endpoint(runtime: Runtime = Depends(get_runtime)) -> Any:
    return await load_app_state(runtime.storage)


@router.get("/countdown")
async def countdown_endpoint(runtime: Runtime = Depends(get_runtime)) -> Any:
    commitment = await runtime.storage.load_commitment()
    if not commitment:
        raise HTTPException(status_code=404, detail="No commitment found")
    return countdown_status(commitment.countdown)


@router.get("/countdown/watch")
async def watch_countdown_endpoint(
    limit: Optional[int] = Query(default=None, ge=1),
    runtime: Runtime = Depends(get_runtime),
) -> StreamingResponse:
    """Stream countdown status as NDJSON, one line per poll interval."""
    commitment = await runtime.storage.load_commitment()
    if not commitment:
        raise HTTPException(status_code=404, detail="No commitment found")
    try:
        ensure_integrity(commitment.countdown)
    except IntegrityFailure as error:
        raise HTTPException(status_code=409, detail=str(error)) from error

    async def _lines() -> AsyncIterator[str]:
        async for status in watch_countdown(commitment.countdown, runtime.settings.poll_interval_seconds, limit):
            yield status.model_dump_json() + "\n"

    return StreamingResponse(
        _lines(),
        media_type="application/x-ndjson",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/goals")
async def list_goals_endpoint(runtime: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    commitment = await runtime.storage.load_commitment()
    if not commitment:
        raise HTTPException(status_code=404, detail="No commitment found")
    return _commitment_view(runtime, commitment)


@router.post("/goals")
async def add_goal_endpoint(body: Dict[str, Any], runtime: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    try:
        commitment = await add_goal(
            runtime.storage,
            title=body.get("title") or "",
            detail=body.get("detail") or "",
            locked=bool(body.get("locked", True)),
            image_url=body.get("imageUrl"),
            custom_days=body.get("customDays"),
            icon=body.get("icon"),
        )
    except CommitmentMissingError as error:
        raise HTTPException(status_code=404, detail=str(error)) from error
    except (ValueError, ValidationError) as error:
        raise HTTPException(status_code=422, detail=str(error)) from error
    return _commitment_view(runtime, commitment)


@router.patch("/goals/{goal_id}")
async def update_goal_endpoint(goal_id: str, body: Dict[str, Any], runtime: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    try:
        commitment = await update_goal(runtime.storage, goal_id, body)
    except (CommitmentMissingError, GoalNotFoundError) as error:
        raise HTTPException(status_code=404, detail=str(error)) from error
    except (ValueError, ValidationError) as error:
        raise HTTPException(status_code=422, detail=str(error)) from error
    return _commitment_view(runtime, commitment)


@router.post("/goals/{goal_id}/lock")
async def lock_goal_endpoint(goal_id: str, body: Dict[str, Any], runtime: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    if "locked" not in body:
        raise HTTPException(status_code=400, detail="locked required")
    try:
        commitment = await set_goal_locked(runtime.storage, goal_id, bool(body["locked"]))
    except (CommitmentMissingError, GoalNotFoundError) as error:
        raise HTTPException(status_code=404, detail=str(error)) from error
    return _commitment_view(runtime, commitment)
