"""
Storage gateway for the parish booker.

Sole mediator between callers and the key-value store. Owns the users,
rooms, bookings and config collections plus the current-session slot,
and exposes one awaitable operation per use case, mimicking a remote API.
"""

import asyncio
import json
import time
import uuid
from typing import Callable, List, Optional, Type, TypeVar

import structlog
from pydantic import ValidationError

from ..config import Settings, settings as default_settings
from ..domain.entities import (
    AppConfig,
    Booking,
    BookingCreate,
    BookingStatus,
    RegistrationFailed,
    RegistrationResult,
    RegistrationSucceeded,
    Room,
    RoomCreate,
    StoredRecord,
    StoredUser,
    User,
    UserRole,
)
from ..domain.exceptions import CorruptRecordException, EntityNotFoundException
from ..domain.seed import SEED_CONFIG, SEED_ROOMS, SEED_USERS
from ..storage import IKeyValueStore, create_store

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=StoredRecord)

DUPLICATE_USERNAME_MESSAGE = "El nombre de usuario ya existe."


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class StorageKeys:
    """Fixed store keys, namespaced by a common prefix."""

    def __init__(self, prefix: str = "app_"):
        self.USERS = f"{prefix}users"
        self.ROOMS = f"{prefix}rooms"
        self.BOOKINGS = f"{prefix}bookings"
        self.CURRENT_USER = f"{prefix}current_user"
        self.CONFIG = f"{prefix}config"


class StorageGateway:
    """
    Async CRUD facade over a key-value store.

    Every read-modify-write cycle runs under a single asyncio lock, so
    operations are atomic with respect to each other inside one process.
    Writers in other processes sharing the same backend are not
    coordinated; the last full-collection write wins.

    Expected outcomes are returned as values: a failed login is None,
    a duplicate username is a RegistrationFailed, and updates naming an
    unknown id succeed without touching the store (unless
    RAISE_ON_MISSING_ID is set).
    """

    def __init__(
        self,
        store: IKeyValueStore,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], int]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the gateway.

        Args:
            store: Key-value backend holding all collections
            settings: Application settings (defaults to the global settings)
            clock: Returns the current time in epoch milliseconds
            id_factory: Returns a fresh unique id fragment
        """
        self.store = store
        self.settings = settings or default_settings
        self.keys = StorageKeys(self.settings.STORAGE_KEY_PREFIX)
        self.clock = clock or _now_ms
        self.id_factory = id_factory or _new_id

        self._lock = asyncio.Lock()
        self._initialized = False

    # ---------- Initialization ----------

    async def initialize(self) -> None:
        """Write seed data for every collection key that is absent."""
        async with self._lock:
            await self._seed()

    async def _seed(self) -> None:
        seeded = []
        if not await self.store.exists(self.keys.ROOMS):
            await self._write_list(self.keys.ROOMS, SEED_ROOMS)
            seeded.append(self.keys.ROOMS)
        if not await self.store.exists(self.keys.BOOKINGS):
            await self._write_list(self.keys.BOOKINGS, [])
            seeded.append(self.keys.BOOKINGS)
        if not await self.store.exists(self.keys.USERS):
            await self._write_list(self.keys.USERS, SEED_USERS)
            seeded.append(self.keys.USERS)
        if not await self.store.exists(self.keys.CONFIG):
            await self._write_record(self.keys.CONFIG, SEED_CONFIG)
            seeded.append(self.keys.CONFIG)

        self._initialized = True
        if seeded:
            logger.info("storage_seeded", keys=seeded)

    async def _ensure_seeded(self) -> None:
        # Caller must hold self._lock.
        if not self._initialized:
            await self._seed()

    # ---------- Config ----------

    async def get_app_config(self) -> AppConfig:
        """Return the stored config, or the seed config if none is stored."""
        async with self._lock:
            await self._ensure_seeded()
            config = await self._read_record(self.keys.CONFIG, AppConfig)
        return config or SEED_CONFIG.model_copy()

    async def update_app_config(self, config: AppConfig) -> bool:
        """Replace the config singleton wholesale."""
        async with self._lock:
            await self._ensure_seeded()
            await self._write_record(self.keys.CONFIG, config)
        logger.info("app_config_updated", app_name=config.app_name)
        await self._delay(self.settings.LATENCY_CONFIG_UPDATE_SECONDS)
        return True

    # ---------- Auth ----------

    async def login(self, username: str, password: str) -> Optional[User]:
        """
        Authenticate by username (case-insensitive) and exact password.

        Args:
            username: Login name
            password: Plaintext password

        Returns:
            The user without its password, now the current session,
            or None when no stored user matches
        """
        await self._delay(self.settings.LATENCY_LOGIN_SECONDS)

        async with self._lock:
            await self._ensure_seeded()
            users = await self._read_list(self.keys.USERS, StoredUser)
            user = next((u for u in users if u.matches_username(username)), None)

            if user is None or user.password != password:
                logger.info("login_failed", username=username)
                return None

            public_user = user.to_public()
            await self._write_record(self.keys.CURRENT_USER, public_user)

        logger.info("login_succeeded", user_id=public_user.id)
        return public_user

    async def register(
        self, name: str, username: str, password: str
    ) -> RegistrationResult:
        """
        Create a USER account and open a session for it.

        Args:
            name: Display name
            username: Login name, unique case-insensitively
            password: Plaintext password

        Returns:
            RegistrationSucceeded with the new user (no password), or
            RegistrationFailed if the username is taken
        """
        await self._delay(self.settings.LATENCY_REGISTER_SECONDS)

        async with self._lock:
            await self._ensure_seeded()
            users = await self._read_list(self.keys.USERS, StoredUser)

            if any(u.matches_username(username) for u in users):
                logger.info("registration_rejected", username=username)
                return RegistrationFailed(message=DUPLICATE_USERNAME_MESSAGE)

            new_user = StoredUser(
                id=f"u-{self.id_factory()}",
                username=username,
                password=password,
                name=name,
                role=UserRole.USER,
            )
            users.append(new_user)
            await self._write_list(self.keys.USERS, users)

            public_user = new_user.to_public()
            await self._write_record(self.keys.CURRENT_USER, public_user)

        logger.info("user_registered", user_id=public_user.id, username=username)
        return RegistrationSucceeded(user=public_user)

    async def logout(self) -> None:
        """Clear the current session."""
        async with self._lock:
            await self.store.remove(self.keys.CURRENT_USER)
        logger.info("logged_out")

    async def get_current_user(self) -> Optional[User]:
        """Return the user of the current session, or None."""
        async with self._lock:
            return await self._read_record(self.keys.CURRENT_USER, User)

    async def update_password(self, user_id: str, new_password: str) -> bool:
        """Replace the password of a user; unknown ids change nothing."""
        await self._delay(self.settings.LATENCY_PASSWORD_UPDATE_SECONDS)

        async with self._lock:
            await self._ensure_seeded()
            users = await self._read_list(self.keys.USERS, StoredUser)
            index = self._index_of(users, user_id)
            if index is None:
                self._missing("User", user_id)
                return True

            users[index] = users[index].model_copy(update={"password": new_password})
            await self._write_list(self.keys.USERS, users)

        logger.info("password_updated", user_id=user_id)
        return True

    # ---------- Rooms ----------

    async def get_rooms(self) -> List[Room]:
        """Return every room in stored order."""
        async with self._lock:
            await self._ensure_seeded()
            return await self._read_list(self.keys.ROOMS, Room)

    async def add_room(self, data: RoomCreate) -> bool:
        """Append a room under a freshly generated id."""
        async with self._lock:
            await self._ensure_seeded()
            rooms = await self._read_list(self.keys.ROOMS, Room)
            room = Room(**data.model_dump(exclude={"id"}), id=f"room-{self.id_factory()}")
            rooms.append(room)
            await self._write_list(self.keys.ROOMS, rooms)

        logger.info("room_added", room_id=room.id, name=room.name)
        return True

    async def update_room(self, room: Room) -> bool:
        """Replace the room with the same id; unknown ids change nothing."""
        async with self._lock:
            await self._ensure_seeded()
            rooms = await self._read_list(self.keys.ROOMS, Room)
            index = self._index_of(rooms, room.id)
            if index is None:
                self._missing("Room", room.id)
                return True

            rooms[index] = room
            await self._write_list(self.keys.ROOMS, rooms)

        logger.info("room_updated", room_id=room.id)
        return True

    async def delete_room(self, room_id: str) -> bool:
        """
        Delete a room and every booking that references it.

        The room write and the bookings write are separate; if the second
        one fails the room is already gone and the error propagates.
        """
        async with self._lock:
            await self._ensure_seeded()
            rooms = await self._read_list(self.keys.ROOMS, Room)
            await self._write_list(
                self.keys.ROOMS, [r for r in rooms if r.id != room_id]
            )

            bookings = await self._read_list(self.keys.BOOKINGS, Booking)
            kept = [b for b in bookings if b.room_id != room_id]
            try:
                await self._write_list(self.keys.BOOKINGS, kept)
            except Exception:
                logger.exception("room_delete_cascade_failed", room_id=room_id)
                raise

        logger.info(
            "room_deleted",
            room_id=room_id,
            cascaded_bookings=len(bookings) - len(kept),
        )
        return True

    # ---------- Bookings ----------

    async def create_booking(self, data: BookingCreate) -> bool:
        """
        Store a new booking request in PENDING state.

        Neither the room reference nor the time range is checked;
        overlapping bookings are accepted.
        """
        fields = data.model_dump()
        for reserved in ("id", "status", "created_at", "createdAt"):
            fields.pop(reserved, None)

        async with self._lock:
            await self._ensure_seeded()
            bookings = await self._read_list(self.keys.BOOKINGS, Booking)
            booking = Booking(
                **fields,
                id=f"booking-{self.id_factory()}",
                status=BookingStatus.PENDING,
                created_at=self.clock(),
            )
            bookings.append(booking)
            await self._write_list(self.keys.BOOKINGS, bookings)

        logger.info("booking_created", booking_id=booking.id, room_id=booking.room_id)
        await self._delay(self.settings.LATENCY_BOOKING_CREATE_SECONDS)
        return True

    async def get_bookings(self) -> List[Booking]:
        """Return all bookings, newest first; equal timestamps keep stored order."""
        async with self._lock:
            await self._ensure_seeded()
            bookings = await self._read_list(self.keys.BOOKINGS, Booking)
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    async def update_booking_status(
        self, booking_id: str, status: BookingStatus
    ) -> bool:
        """Set only the status of a booking; unknown ids change nothing."""
        status = BookingStatus(status)

        async with self._lock:
            await self._ensure_seeded()
            bookings = await self._read_list(self.keys.BOOKINGS, Booking)
            index = self._index_of(bookings, booking_id)
            if index is None:
                self._missing("Booking", booking_id)
                return True

            bookings[index] = bookings[index].model_copy(update={"status": status})
            await self._write_list(self.keys.BOOKINGS, bookings)

        logger.info("booking_status_updated", booking_id=booking_id, status=status)
        return True

    async def update_booking(self, booking: Booking) -> bool:
        """Replace the booking with the same id; unknown ids change nothing."""
        async with self._lock:
            await self._ensure_seeded()
            bookings = await self._read_list(self.keys.BOOKINGS, Booking)
            index = self._index_of(bookings, booking.id)
            if index is None:
                self._missing("Booking", booking.id)
                return True

            bookings[index] = booking
            await self._write_list(self.keys.BOOKINGS, bookings)

        logger.info("booking_updated", booking_id=booking.id)
        return True

    # ---------- Lifecycle ----------

    async def close(self) -> None:
        """Release the underlying store."""
        await self.store.close()

    # ---------- Helpers ----------

    async def _read_list(self, key: str, model: Type[R]) -> List[R]:
        raw = await self.store.get(key)
        if raw is None:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise CorruptRecordException(key, "expected a JSON list")
            return [model.model_validate(item) for item in items]
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("corrupt_record", key=key, error=str(e))
            raise CorruptRecordException(key, str(e)) from e

    async def _read_record(self, key: str, model: Type[R]) -> Optional[R]:
        raw = await self.store.get(key)
        if raw is None:
            return None
        try:
            return model.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("corrupt_record", key=key, error=str(e))
            raise CorruptRecordException(key, str(e)) from e

    async def _write_list(self, key: str, records: List[StoredRecord]) -> None:
        payload = [record.to_storage() for record in records]
        await self.store.set(key, json.dumps(payload, ensure_ascii=False))

    async def _write_record(self, key: str, record: StoredRecord) -> None:
        await self.store.set(key, json.dumps(record.to_storage(), ensure_ascii=False))

    @staticmethod
    def _index_of(records: list, record_id: str) -> Optional[int]:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        return None

    def _missing(self, entity: str, entity_id: str) -> None:
        logger.warning("update_target_missing", entity=entity, entity_id=entity_id)
        if self.settings.RAISE_ON_MISSING_ID:
            raise EntityNotFoundException(entity, entity_id)

    async def _delay(self, seconds: float) -> None:
        if self.settings.SIMULATE_LATENCY and seconds > 0:
            await asyncio.sleep(seconds)


_gateway: Optional[StorageGateway] = None


def get_storage_gateway(settings: Optional[Settings] = None) -> StorageGateway:
    """
    Get or create the process-wide storage gateway.

    Args:
        settings: Settings to build from (only used on first call)

    Returns:
        Global StorageGateway instance
    """
    global _gateway

    if _gateway is None:
        active = settings or default_settings
        _gateway = StorageGateway(create_store(active), settings=active)

    return _gateway


async def close_storage_gateway() -> None:
    """Close the process-wide gateway and its store. Call during shutdown."""
    global _gateway

    if _gateway is not None:
        await _gateway.close()
        _gateway = None
