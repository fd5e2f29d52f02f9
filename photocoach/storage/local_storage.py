"""
Local Filesystem Storage Implementation.
Each key is stored as one file inside a base directory on the device.
"""

import logging
import aiofiles
from pathlib import Path
from typing import Optional
from .interface import StorageInterface, StorageError

logger = logging.getLogger(__name__)


class LocalStorage(StorageInterface):
    """
    Local filesystem storage implementation.
    Stores every key as a UTF-8 text file in a base directory.
    """

    def __init__(self, base_dir: str = "./data"):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored files
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Convert a key to a full absolute path within the base directory."""
        full_path = (self.base_dir / key).resolve()

        # Security check: ensure path is within base_dir
        if not full_path.is_relative_to(self.base_dir):
            raise StorageError(f"Invalid key: {key} - path traversal detected")

        return full_path

    async def save(self, key: str, content: str) -> None:
        """Save content to the local filesystem."""
        full_path = self._get_full_path(key)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(full_path, 'w', encoding='utf-8') as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"Error saving key {key}: {e}")
            raise StorageError(f"Failed to save {key}") from e

    async def load(self, key: str) -> Optional[str]:
        """Load content from the local filesystem."""
        full_path = self._get_full_path(key)
        if not full_path.exists():
            return None

        try:
            async with aiofiles.open(full_path, 'r', encoding='utf-8') as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error loading key {key}: {e}")
            raise StorageError(f"Failed to load {key}") from e

    async def exists(self, key: str) -> bool:
        """Check if a file exists for the key."""
        try:
            return self._get_full_path(key).exists()
        except StorageError:
            return False

    async def delete(self, key: str) -> bool:
        """Delete the file backing the key."""
        full_path = self._get_full_path(key)
        if not full_path.exists():
            return False

        try:
            full_path.unlink()
        except OSError as e:
            logger.error(f"Error deleting key {key}: {e}")
            raise StorageError(f"Failed to delete {key}") from e
        return True
