"""
Custom exceptions for the storage gateway domain.

Expected outcomes (failed login, duplicate username, unknown ids) are
returned as values. These exceptions cover infrastructure failures and
the opt-in strict handling of unknown ids.
"""

from typing import Optional


class StorageGatewayException(Exception):
    """Base exception for all storage gateway errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class StorageBackendException(StorageGatewayException):
    """Raised when the underlying key-value store fails."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Storage {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message, details={"operation": operation, "reason": reason}
        )


class CorruptRecordException(StorageGatewayException):
    """Raised when a stored value cannot be decoded into its record type."""

    def __init__(self, key: str, reason: str):
        message = f"Corrupt record at '{key}': {reason}"
        super().__init__(message=message, details={"key": key, "reason": reason})


class EntityNotFoundException(StorageGatewayException):
    """Raised for unknown ids when RAISE_ON_MISSING_ID is enabled."""

    def __init__(self, entity: str, entity_id: str):
        message = f"{entity} not found: {entity_id}"
        super().__init__(
            message=message, details={"entity": entity, "entity_id": entity_id}
        )
