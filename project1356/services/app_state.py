import logging
from typing import Literal, Optional

from pydantic import BaseModel

from ..errors import IntegrityFailure
from ..schemas.profile import AppState
from .countdown import ensure_integrity
from .storage import StorageService

log = logging.getLogger(__name__)

InitialRoute = Literal["Splash", "Countdown"]


class LoadedAppState(BaseModel):
    initialRoute: InitialRoute
    appState: Optional[AppState] = None


async def load_app_state(storage: StorageService) -> LoadedAppState:
    try:
        # Import and goal edits write only the commitment record, so check it as well.
        commitment = await storage.load_commitment()
        if commitment:
            ensure_integrity(commitment.countdown)
        state = await storage.load_app_state()
        if not state or not state.isOnboarded or not state.commitment:
            return LoadedAppState(initialRoute="Splash")
        ensure_integrity(state.commitment.countdown)
        return LoadedAppState(initialRoute="Countdown", appState=state)
    except IntegrityFailure as failure:
        # Fail closed: wipe local data and restart onboarding.
        log.warning("Countdown integrity check failed: %s", failure)
        await storage.clear_all()
        return LoadedAppState(initialRoute="Splash")
    except Exception:
        log.exception("Failed to load app state")
        return LoadedAppState(initialRoute="Splash")
