from typing import Optional

from fastapi import FastAPI

from .config import Settings, configure_logging, load_settings
from .routers.backup import router as backup_router
from .routers.commitment import router as commitment_router
from .routers.profile import router as profile_router
from .runtime import build_runtime


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    resolved = settings or load_settings()
    configure_logging(resolved)
    app = FastAPI(title="Project 1356 Service", version="1.0.0")
    app.state.runtime = build_runtime(resolved)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(commitment_router)
    app.include_router(profile_router)
    app.include_router(backup_router)
    return app


app = create_app()
