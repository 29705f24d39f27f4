"""
Key-value store interface (Abstract Base Class).

Defines the contract the storage gateway relies on, independent of the
underlying backend. Keys are opaque strings and values are JSON text.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IKeyValueStore(ABC):
    """
    Abstract interface for string-keyed, string-valued persistence.

    Implementations must be safe to call from a single event loop;
    no cross-process coordination is expected of them.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Logical key

        Returns:
            Stored text, or None if the key is absent
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Logical key
            value: Text to store
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Args:
            key: Logical key
        """
        pass

    async def exists(self, key: str) -> bool:
        """Check whether a key is present."""
        return await self.get(key) is not None

    async def ping(self) -> bool:
        """Check that the backend is reachable."""
        return True

    async def close(self) -> None:
        """Release backend resources."""
        return None
