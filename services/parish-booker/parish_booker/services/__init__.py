"""Business logic service layer."""

from .storage_gateway import (
    StorageGateway,
    StorageKeys,
    close_storage_gateway,
    get_storage_gateway,
)

__all__ = [
    "StorageGateway",
    "StorageKeys",
    "close_storage_gateway",
    "get_storage_gateway",
]
