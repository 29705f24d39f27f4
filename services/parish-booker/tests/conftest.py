# Test configuration
import os
import sys
from itertools import count
from pathlib import Path

import pytest

# Add parent directory (parish-booker) to sys.path so the package can be imported
service_dir = Path(__file__).parent.parent
sys.path.insert(0, str(service_dir))

# Set test environment variables BEFORE importing package modules
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SIMULATE_LATENCY"] = "false"
os.environ["RAISE_ON_MISSING_ID"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from parish_booker.config import Settings  # noqa: E402
from parish_booker.domain.entities import BookingCreate, RoomCreate  # noqa: E402
from parish_booker.services.storage_gateway import StorageGateway  # noqa: E402
from parish_booker.storage.memory_store import MemoryKeyValueStore  # noqa: E402


@pytest.fixture
def test_settings():
    """Settings with latency off and silent no-op updates."""
    return Settings(SIMULATE_LATENCY=False, RAISE_ON_MISSING_ID=False)


@pytest.fixture
def memory_store():
    """Create a fresh, empty memory store."""
    return MemoryKeyValueStore()


@pytest.fixture
def clock():
    """Deterministic clock advancing one second per call."""
    ticks = count(start=1_700_000_000_000, step=1000)
    return lambda: next(ticks)


@pytest.fixture
def gateway(memory_store, test_settings, clock):
    """Create a storage gateway over the memory store."""
    return StorageGateway(memory_store, settings=test_settings, clock=clock)


@pytest.fixture
def hall_data():
    """Room payload for a new hall."""
    return RoomCreate(name="Hall", capacity=10, features=[], image_url="")


@pytest.fixture
def booking_data():
    """Booking request against the seeded room."""
    return BookingCreate(
        room_id="room-1",
        user_id="u2",
        user_name="Juan Pérez",
        date="2026-10-18",
        start_time="10:00",
        end_time="12:00",
        purpose="Catequesis",
    )
