"""
In-process key-value store.

Keeps values in a plain dict for the lifetime of the process. Used as the
default backend and in tests.
"""

from typing import Dict, Optional

import structlog

from .base import IKeyValueStore

logger = structlog.get_logger(__name__)


class MemoryKeyValueStore(IKeyValueStore):
    """
    Dict-backed key-value store.

    Attributes:
        data: Raw stored values keyed by logical key
        reads: Number of get calls served
        writes: Number of set/remove calls served
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        """
        Initialize memory store.

        Args:
            initial: Optional raw values to start from
        """
        self.data: Dict[str, str] = dict(initial or {})

        # Statistics
        self.reads = 0
        self.writes = 0

        logger.info("memory_store_initialized", keys=len(self.data))

    async def get(self, key: str) -> Optional[str]:
        self.reads += 1
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.writes += 1
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.writes += 1
        self.data.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self.data

    def get_stats(self) -> Dict[str, int]:
        """
        Get store statistics.

        Returns:
            Dictionary with key count and operation counters
        """
        return {
            "size": len(self.data),
            "reads": self.reads,
            "writes": self.writes,
        }
