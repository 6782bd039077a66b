"""
Storage Interface - Abstract base class for all storage implementations.
Documents and uploaded blobs are addressed by slash-separated keys, so the
same contract can be backed by a local directory or an object store.
"""

from abc import ABC, abstractmethod
from typing import Optional, List


class StorageInterface(ABC):
    """
    Abstract key/blob storage contract.
    Keys sort lexicographically, which the document stores rely on to keep
    time-prefixed keys in creation order.
    """

    @abstractmethod
    async def save(self, path: str, content: bytes | str) -> bool:
        """
        Save content under a key, replacing any previous content.

        Args:
            path: Relative key (e.g., "chat/sessions/<user_id>/<session_id>.json")
            content: Bytes for binary blobs or str for text documents

        Returns:
            bool: True if save was successful, False otherwise
        """
        pass

    @abstractmethod
    async def load(self, path: str) -> Optional[bytes]:
        """
        Load the content stored under a key.

        Returns:
            Optional[bytes]: Content, or None if the key does not exist
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check whether a key exists."""
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Delete a key.

        Returns:
            bool: True if something was deleted
        """
        pass

    @abstractmethod
    async def list(
        self,
        path: str,
        pattern: Optional[str] = None,
        recursive: bool = False
    ) -> List[str]:
        """
        List keys under a prefix directory.

        Args:
            path: Prefix directory to list
            pattern: Optional glob pattern to filter keys (e.g., "*.json")
            recursive: Whether to descend into nested prefixes

        Returns:
            List[str]: Sorted relative keys
        """
        pass
