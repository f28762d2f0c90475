import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..schemas.commitment import UserCommitment
from ..schemas.profile import AppState, NotificationSettings, OnboardingState, UserProfile
from .countdown import now_ms

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

STORAGE_KEYS = {
    "APP_STATE": "@project1356:app_state",
    "COMMITMENT": "@project1356:commitment",
    "ONBOARDING": "@project1356:onboarding",
    "PROFILE": "@project1356:profile",
    "NOTIFICATION_SETTINGS": "@project1356:notification_settings",
}

SAVED_AT_FIELD = "_savedAt"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def delete_many(self, keys: Iterable[str]) -> None:
        ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._store: Dict[str, str] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._store[key] = value

    async def delete_many(self, keys: Iterable[str]) -> None:
        async with self._lock:
            for key in keys:
                self._store.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._store)


class JsonFileKeyValueStore:
    """Key-value store persisted as a single JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not hold an object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f)
        tmp_path.replace(self.path)

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            data[key] = value
            await asyncio.to_thread(self._write, data)

    async def delete_many(self, keys: Iterable[str]) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            for key in keys:
                data.pop(key, None)
            await asyncio.to_thread(self._write, data)


def build_store(storage_path: Optional[str]) -> KeyValueStore:
    if storage_path:
        return JsonFileKeyValueStore(Path(storage_path))
    return InMemoryKeyValueStore()


class StorageService:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def _save(self, key: str, record: BaseModel, extra: Optional[Dict[str, Any]] = None) -> None:
        try:
            data = record.model_dump(mode="json")
            if extra:
                data.update(extra)
            await self.store.set(key, json.dumps(data))
        except Exception:
            log.exception("Failed to save %s", key)
            raise

    async def _load(self, key: str, model: Type[M]) -> Optional[M]:
        try:
            raw = await self.store.get(key)
            if not raw:
                return None
            data = json.loads(raw)
            if isinstance(data, dict):
                data.pop(SAVED_AT_FIELD, None)
            return model.model_validate(data)
        except (ValueError, ValidationError, OSError):
            log.exception("Failed to load %s", key)
            return None

    async def save_app_state(self, state: AppState) -> None:
        await self._save(STORAGE_KEYS["APP_STATE"], state)

    async def load_app_state(self) -> Optional[AppState]:
        return await self._load(STORAGE_KEYS["APP_STATE"], AppState)

    async def save_commitment(self, commitment: UserCommitment) -> None:
        await self._save(STORAGE_KEYS["COMMITMENT"], commitment, {SAVED_AT_FIELD: now_ms()})

    async def load_commitment(self) -> Optional[UserCommitment]:
        return await self._load(STORAGE_KEYS["COMMITMENT"], UserCommitment)

    async def save_onboarding_state(self, state: OnboardingState) -> None:
        await self._save(STORAGE_KEYS["ONBOARDING"], state)

    async def load_onboarding_state(self) -> Optional[OnboardingState]:
        return await self._load(STORAGE_KEYS["ONBOARDING"], OnboardingState)

    async def save_profile(self, profile: UserProfile) -> None:
        await self._save(STORAGE_KEYS["PROFILE"], profile)

    async def load_profile(self) -> Optional[UserProfile]:
        return await self._load(STORAGE_KEYS["PROFILE"], UserProfile)

    async def save_notification_settings(self, settings: NotificationSettings) -> None:
        await self._save(STORAGE_KEYS["NOTIFICATION_SETTINGS"], settings)

    async def load_notification_settings(self) -> Optional[NotificationSettings]:
        return await self._load(STORAGE_KEYS["NOTIFICATION_SETTINGS"], NotificationSettings)

    async def clear_all(self) -> None:
        try:
            await self.store.delete_many(list(STORAGE_KEYS.values()))
        except Exception:
            log.exception("Failed to clear storage")
            raise
