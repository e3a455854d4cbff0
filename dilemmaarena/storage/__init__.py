"""
Arena storage: strategies, scores and match records.
"""
from dilemmaarena.storage.base import ArenaStore, StorageError
from dilemmaarena.storage.memory import InMemoryArenaStore
from dilemmaarena.storage.json_store import JsonArenaStore

__all__ = ['ArenaStore', 'StorageError', 'InMemoryArenaStore', 'JsonArenaStore']
