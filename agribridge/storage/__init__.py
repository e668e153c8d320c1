"""
Storage abstractions.

- MetadataStorage -> document store (in-memory locally)
- CacheStorage -> in-memory locally, Redis when REDIS_URL is set
"""

from agribridge.storage.base import (
    MetadataStorage,
    CacheStorage,
    StorageProvider,
    Collections,
)
from agribridge.storage.local import (
    InMemoryCacheStorage,
    InMemoryMetadataStorage,
    create_local_storage,
)

__all__ = [
    "MetadataStorage",
    "CacheStorage",
    "StorageProvider",
    "Collections",
    "InMemoryCacheStorage",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
