"""
Domain entities for the parish booker.

Users, rooms, bookings and the app configuration as they are persisted
in the key-value store. Records are stored as JSON with camelCase keys;
Python attributes are snake_case.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserRole(str, Enum):
    """Roles a user can hold."""

    ADMIN = "ADMIN"
    USER = "USER"


class BookingStatus(str, Enum):
    """Booking workflow states. Any state may be set from any other."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class StoredRecord(BaseModel):
    """Base for every persisted record: camelCase on disk, snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_storage(self) -> dict:
        """Dump to the JSON-compatible shape kept in the store."""
        return self.model_dump(by_alias=True, mode="json")


class User(StoredRecord):
    """A user as seen by callers. Never carries a password."""

    id: str
    username: str
    name: str
    role: UserRole = UserRole.USER


class StoredUser(User):
    """A user as kept in the store, including the plaintext password."""

    password: Optional[str] = None

    def to_public(self) -> User:
        """Strip the password before the record leaves the gateway."""
        return User.model_validate(self.model_dump(exclude={"password"}))

    def matches_username(self, username: str) -> bool:
        """Case-insensitive username comparison."""
        return self.username.lower() == username.lower()


class RoomCreate(StoredRecord):
    """Data needed to add a room; the id is assigned by the gateway."""

    name: str
    capacity: int
    features: List[str] = Field(default_factory=list)
    image_url: str = ""


class Room(RoomCreate):
    """A bookable room."""

    id: str


class BookingCreate(StoredRecord):
    """
    Data supplied by the caller when requesting a booking.

    Extra fields sent by the caller are kept as-is.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    room_id: str
    user_id: str
    user_name: str
    date: str
    start_time: str
    end_time: str
    purpose: str = ""


class Booking(BookingCreate):
    """A booking request with its gateway-assigned id, status and timestamp."""

    id: str
    status: BookingStatus = BookingStatus.PENDING
    created_at: int  # epoch milliseconds


class AppConfig(StoredRecord):
    """Application branding, a singleton."""

    app_name: str
    app_logo: str


@dataclass(frozen=True)
class RegistrationSucceeded:
    """Registration created a user and opened a session for it."""

    user: User

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class RegistrationFailed:
    """Registration was refused; message is meant for the end user."""

    message: str

    @property
    def ok(self) -> bool:
        return False


RegistrationResult = Union[RegistrationSucceeded, RegistrationFailed]
