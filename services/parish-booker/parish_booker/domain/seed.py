"""Seed records written once when a collection key is absent."""

from typing import List

from .entities import AppConfig, Room, StoredUser, UserRole

SEED_ROOMS: List[Room] = [
    Room(
        id="room-1",
        name="Salón Parroquial Principal",
        capacity=50,
        features=["Proyector", "Aire Acondicionado", "Pizarrón", "Sillas"],
        image_url="https://picsum.photos/400/300?random=1",
    )
]

SEED_USERS: List[StoredUser] = [
    StoredUser(
        id="u1",
        username="admin",
        password="password",
        role=UserRole.ADMIN,
        name="Administrador Principal",
    ),
    StoredUser(
        id="u2",
        username="user",
        password="password",
        role=UserRole.USER,
        name="Juan Pérez",
    ),
]

SEED_CONFIG = AppConfig(app_name="Parish Booker", app_logo="fa-church")
