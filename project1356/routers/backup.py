from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ..errors import CorruptBackupError, EncryptionFailure
from ..runtime import Runtime, get_runtime
from ..services.encryption import export_backup, import_backup

router = APIRouter(prefix="/backup", tags=["backup"])


@router.post("/export")
async def export_endpoint(runtime: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    try:
        data = await export_backup(runtime.storage, runtime.settings.export_version)
    except EncryptionFailure as error:
        raise HTTPException(status_code=500, detail=str(error)) from error
    return {"data": data}


@router.post("/import")
async def import_endpoint(body: Dict[str, Any], runtime: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    data = body.get("data")
    if not isinstance(data, str) or not data.strip():
        raise HTTPException(status_code=400, detail="data required")
    try:
        bundle = await import_backup(runtime.storage, data)
    except CorruptBackupError as error:
        raise HTTPException(status_code=400, detail={"reason": error.reason, "message": error.message}) from error
    return {
        "version": bundle.version,
        "exportedAt": bundle.exportedAt,
        "restored": {
            "commitment": bundle.commitment is not None,
            "profile": bundle.profile is not None,
            "settings": bundle.settings is not None,
        },
    }
