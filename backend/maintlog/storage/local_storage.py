"""
Local Filesystem Storage Implementation.
Stores every key as a file below a base directory on the server.
"""

import logging
import aiofiles
from pathlib import Path
from typing import Optional, List
from .interface import StorageInterface

logger = logging.getLogger(__name__)


class LocalStorage(StorageInterface):
    """
    Local filesystem storage implementation.
    """

    def __init__(self, base_dir: str = "./data"):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored files
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, path: str) -> Path:
        """Convert a relative key to an absolute path within the base directory."""
        full_path = (self.base_dir / path).resolve()

        # Keys must not escape the base directory
        if full_path != self.base_dir and self.base_dir not in full_path.parents:
            raise ValueError(f"Invalid path: {path} - path traversal detected")

        return full_path

    async def save(self, path: str, content: bytes | str) -> bool:
        """Save content to the local filesystem."""
        try:
            full_path = self._get_full_path(path)
            full_path.parent.mkdir(parents=True, exist_ok=True)

            if isinstance(content, str):
                async with aiofiles.open(full_path, 'w', encoding='utf-8') as f:
                    await f.write(content)
            else:
                async with aiofiles.open(full_path, 'wb') as f:
                    await f.write(content)

            return True
        except (OSError, ValueError) as e:
            logger.error(f"Error saving file {path}: {e}")
            return False

    async def load(self, path: str) -> Optional[bytes]:
        """Load content from the local filesystem."""
        try:
            full_path = self._get_full_path(path)
            if not full_path.is_file():
                return None

            async with aiofiles.open(full_path, 'rb') as f:
                return await f.read()
        except (OSError, ValueError) as e:
            logger.error(f"Error loading file {path}: {e}")
            return None

    async def exists(self, path: str) -> bool:
        """Check if a file exists."""
        try:
            return self._get_full_path(path).is_file()
        except ValueError:
            return False

    async def delete(self, path: str) -> bool:
        """Delete a file from the local filesystem."""
        try:
            full_path = self._get_full_path(path)
            if full_path.is_file():
                full_path.unlink()
                return True
            return False
        except (OSError, ValueError) as e:
            logger.error(f"Error deleting file {path}: {e}")
            return False

    async def list(
        self,
        path: str,
        pattern: Optional[str] = None,
        recursive: bool = False
    ) -> List[str]:
        """List files below a directory."""
        try:
            full_path = self._get_full_path(path)
            if not full_path.is_dir():
                return []

            glob_pattern = pattern or "*"
            matches = full_path.rglob(glob_pattern) if recursive else full_path.glob(glob_pattern)

            return sorted(
                p.relative_to(self.base_dir).as_posix()
                for p in matches if p.is_file()
            )
        except (OSError, ValueError) as e:
            logger.error(f"Error listing files in {path}: {e}")
            return []
