from dataclasses import dataclass

from fastapi import Request

from .config import Settings
from .services.notifications import InMemoryNotificationScheduler, NotificationScheduler
from .services.storage import StorageService, build_store


@dataclass
class Runtime:
    settings: Settings
    storage: StorageService
    scheduler: NotificationScheduler


def build_runtime(settings: Settings) -> Runtime:
    return Runtime(
        settings=settings,
        storage=StorageService(build_store(settings.storage_path)),
        scheduler=InMemoryNotificationScheduler(),
    )


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime
