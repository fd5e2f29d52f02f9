"""Storage module - provides interface and implementations for data persistence."""

from .interface import StorageInterface, StorageError
from .local_storage import LocalStorage
from .memory_storage import MemoryStorage
from .session_store import SessionStore

__all__ = ['StorageInterface', 'StorageError', 'LocalStorage', 'MemoryStorage', 'SessionStore']
