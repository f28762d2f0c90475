import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from project1356.schemas.commitment import CommitmentMode, Goal, UserCommitment
from project1356.schemas.profile import AppState, UserProfile
from project1356.services.app_state import load_app_state
from project1356.services.countdown import DAY_MS, create_countdown
from project1356.services.storage import InMemoryKeyValueStore, StorageService


def _commitment(countdown) -> UserCommitment:
    return UserCommitment(
        mode=CommitmentMode.FLEXIBLE_SOLO,
        goalCount=1,
        durationDays=countdown.durationDays,
        goals=[Goal(id="g1", title="Climb Kilimanjaro")],
        countdown=countdown,
        createdAt=countdown.startDate,
    )


@pytest.mark.asyncio
async def test_fresh_install_routes_to_splash():
    loaded = await load_app_state(StorageService(InMemoryKeyValueStore()))
    assert loaded.initialRoute == "Splash"
    assert loaded.appState is None


@pytest.mark.asyncio
async def test_valid_commitment_routes_to_countdown():
    storage = StorageService(InMemoryKeyValueStore())
    commitment = _commitment(create_countdown(90))
    await storage.save_app_state(AppState(isOnboarded=True, commitment=commitment))
    loaded = await load_app_state(storage)
    assert loaded.initialRoute == "Countdown"
    assert loaded.appState.commitment == commitment


@pytest.mark.asyncio
async def test_tampered_countdown_resets_all_data():
    store = InMemoryKeyValueStore()
    storage = StorageService(store)
    countdown = create_countdown(90)
    tampered = countdown.model_copy(update={"endDate": countdown.endDate + 30 * DAY_MS})
    commitment = _commitment(tampered)
    await storage.save_app_state(AppState(isOnboarded=True, commitment=commitment))
    await storage.save_commitment(commitment)
    await storage.save_profile(UserProfile(name="Ana"))

    loaded = await load_app_state(storage)

    assert loaded.initialRoute == "Splash"
    assert store.snapshot() == {}


@pytest.mark.asyncio
async def test_not_onboarded_state_routes_to_splash():
    storage = StorageService(InMemoryKeyValueStore())
    await storage.save_app_state(AppState(isOnboarded=False))
    assert (await load_app_state(storage)).initialRoute == "Splash"


@pytest.mark.asyncio
async def test_tampered_commitment_record_alone_resets_all_data():
    store = InMemoryKeyValueStore()
    storage = StorageService(store)
    countdown = create_countdown(90)
    await storage.save_app_state(AppState(isOnboarded=True, commitment=_commitment(countdown)))
    tampered = countdown.model_copy(update={"endDate": countdown.endDate + 30 * DAY_MS})
    await storage.save_commitment(_commitment(tampered))

    loaded = await load_app_state(storage)

    assert loaded.initialRoute == "Splash"
    assert loaded.appState is None
    assert store.snapshot() == {}
