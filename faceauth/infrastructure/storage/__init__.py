"""Identity store backends."""
from .json_store import JsonFileIdentityStore
from .memory_store import InMemoryIdentityStore

__all__ = ["InMemoryIdentityStore", "JsonFileIdentityStore"]
