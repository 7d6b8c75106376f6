"""User-side storage: key-value stores and the history/favorites library"""

from soratv.storage.library import FAVORITES_KEY, HISTORY_KEY, UserLibrary, favorite_key
from soratv.storage.store import FileStore, KeyValueStore, MemoryStore

__all__ = [
    "FAVORITES_KEY",
    "HISTORY_KEY",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "UserLibrary",
    "favorite_key",
]
