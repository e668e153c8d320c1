"""
Persistence interfaces.

Two stores back the service:

- MetadataStorage: records keyed by collection and id (announcements and
  their stored Myanmar text).
- CacheStorage: expiring key-value pairs (model translations, 30 days).

Engines only see these ABCs; the API picks in-memory or Redis at startup.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Interfaces
# =============================================================================


class MetadataStorage(ABC):
    """Document store. Saved documents carry their id under "_id"."""

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Insert or replace a record."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """
        One page of matching records.

        A filter value that is a tuple, list or set matches any of its
        members; any other value must be equal. Records are sorted by
        order_by (insertion order when None) before limit and offset apply.
        """
        pass


class CacheStorage(ABC):
    """
    Expiring key-value store for JSON-compatible values.

    Writers pass a TTL and never purge; an expired key reads as missing.
    A set on an existing key overwrites it and restarts its TTL.
    """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        pass

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """The stored value, or None if absent or expired."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass


# =============================================================================
# Provider
# =============================================================================


class StorageProvider(BaseModel):
    """The pair of stores the API wires into its services."""

    model_config = {"arbitrary_types_allowed": True}

    metadata: MetadataStorage
    cache: CacheStorage


class Collections:
    ANNOUNCEMENTS = "announcements"
