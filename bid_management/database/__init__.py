"""Persistence backends."""

from .base import Store
from .client import SupabaseStore
from .memory import MemoryStore

__all__ = ["Store", "SupabaseStore", "MemoryStore", "create_store"]


def create_store(config) -> Store:
    """Build the store selected by ``config.storage_backend``."""
    if config.storage_backend == "memory":
        return MemoryStore()
    return SupabaseStore(url=config.supabase_url, key=config.supabase_key)
