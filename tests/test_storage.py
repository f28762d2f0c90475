import json
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from project1356.schemas.commitment import CommitmentMode, Goal, UserCommitment
from project1356.schemas.profile import AppState, NotificationSettings, OnboardingState, UserProfile
from project1356.services.countdown import create_countdown
from project1356.services.storage import (
    STORAGE_KEYS,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageService,
    build_store,
)


def _commitment() -> UserCommitment:
    return UserCommitment(
        mode=CommitmentMode.FLEXIBLE_SOLO,
        goalCount=1,
        durationDays=30,
        goals=[Goal(id="g1", title="Write a book")],
        countdown=create_countdown(30, now=0),
        createdAt=0,
    )


@pytest.mark.asyncio
async def test_commitment_saved_with_internal_timestamp_that_load_strips():
    store = InMemoryKeyValueStore()
    storage = StorageService(store)
    await storage.save_commitment(_commitment())
    raw = json.loads(store.snapshot()[STORAGE_KEYS["COMMITMENT"]])
    assert "_savedAt" in raw
    assert raw["countdown"]["endDate"] == 30 * 86_400_000
    loaded = await storage.load_commitment()
    assert loaded == _commitment()


@pytest.mark.asyncio
async def test_missing_and_malformed_records_load_as_none():
    store = InMemoryKeyValueStore({STORAGE_KEYS["PROFILE"]: "{broken", STORAGE_KEYS["APP_STATE"]: '{"isOnboarded": "maybe"}'})
    storage = StorageService(store)
    assert await storage.load_commitment() is None
    assert await storage.load_profile() is None
    assert await storage.load_app_state() is None


@pytest.mark.asyncio
async def test_clear_all_removes_every_key():
    store = InMemoryKeyValueStore({"unrelated": "keep"})
    storage = StorageService(store)
    await storage.save_commitment(_commitment())
    await storage.save_app_state(AppState(isOnboarded=True, commitment=_commitment()))
    await storage.save_onboarding_state(OnboardingState(hasSeenContext=True))
    await storage.save_profile(UserProfile(name="Lee"))
    await storage.save_notification_settings(NotificationSettings())
    await storage.clear_all()
    assert store.snapshot() == {"unrelated": "keep"}


@pytest.mark.asyncio
async def test_json_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "store.json"
    first = StorageService(JsonFileKeyValueStore(path))
    await first.save_profile(UserProfile(name="Noor", country="EG"))
    await first.save_onboarding_state(OnboardingState(hasGrantedNotifications=True))

    second = StorageService(JsonFileKeyValueStore(path))
    assert (await second.load_profile()).country == "EG"
    assert (await second.load_onboarding_state()).hasGrantedNotifications is True

    await second.clear_all()
    assert json.loads(path.read_text(encoding="utf-8")) == {}


@pytest.mark.asyncio
async def test_save_failure_is_raised():
    class BrokenStore(InMemoryKeyValueStore):
        async def set(self, key, value):
            raise OSError("disk full")

    storage = StorageService(BrokenStore())
    with pytest.raises(OSError):
        await storage.save_profile(UserProfile(name="Kim"))


def test_build_store_picks_backend(tmp_path):
    assert isinstance(build_store(None), InMemoryKeyValueStore)
    assert isinstance(build_store(str(tmp_path / "s.json")), JsonFileKeyValueStore)
