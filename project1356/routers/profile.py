from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from ..runtime import Runtime, get_runtime
from ..schemas.profile import NotificationSettings, UserProfile
from ..services.notifications import apply_settings

router = APIRouter(prefix="", tags=["profile"])


@router.get("/profile")
async def get_profile(runtime: Runtime = Depends(get_runtime)) -> Any:
    profile = await runtime.storage.load_profile()
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("/profile")
async def put_profile(body: Dict[str, Any], runtime: Runtime = Depends(get_runtime)) -> Any:
    name = str(body.get("name") or "").strip()
    if not name:
        raise HTTPException(status_code=422, detail="Name is required.")
    country = str(body.get("country") or "").strip() or None
    try:
        profile = UserProfile(name=name, age=body.get("age"), country=country)
    except ValidationError as error:
        raise HTTPException(status_code=422, detail=str(error)) from error
    await runtime.storage.save_profile(profile)
    return profile


@router.get("/settings/notifications")
async def get_notification_settings(runtime: Runtime = Depends(get_runtime)) -> Any:
    return await runtime.storage.load_notification_settings() or NotificationSettings()


@router.put("/settings/notifications")
async def put_notification_settings(body: Dict[str, Any], runtime: Runtime = Depends(get_runtime)) -> Any:
    try:
        settings = NotificationSettings(**body)
    except ValidationError as error:
        raise HTTPException(status_code=422, detail=str(error)) from error
    await runtime.storage.save_notification_settings(settings)
    commitment = await runtime.storage.load_commitment()
    scheduled = await apply_settings(runtime.scheduler, commitment.countdown, settings) if commitment else []
    return {"settings": settings, "scheduled": len(scheduled)}
