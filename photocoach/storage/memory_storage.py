"""
In-Memory Storage Implementation.
Keeps values in a dict; nothing survives the process.
"""

from typing import Dict, Optional
from .interface import StorageInterface


class MemoryStorage(StorageInterface):
    """Dict-backed storage, handy for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def save(self, key: str, content: str) -> None:
        self._data[key] = content

    async def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def exists(self, key: str) -> bool:
        return key in self._data

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
