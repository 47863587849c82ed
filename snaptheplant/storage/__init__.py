# Persistent store module
from snaptheplant.storage.store import (
    KeyValueStore,
    InMemoryStore,
    JsonFileStore,
    StoreError,
    create_store,
)

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "StoreError",
    "create_store",
]
