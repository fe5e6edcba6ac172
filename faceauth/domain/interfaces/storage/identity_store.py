"""Durable storage interface for the enrolled identity set."""
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


class IdentityStore(ABC):
    """Interface for the single named record holding all enrolled identities."""

    @abstractmethod
    def read(self) -> Optional[Any]:
        """
        Read the stored document.

        Returns:
            The parsed document, or None if nothing has been stored yet

        Raises:
            StorageCorruptError: If stored data exists but cannot be parsed
            StorageIOError: If the underlying storage cannot be read
        """
        pass

    @abstractmethod
    def write(self, document: Any) -> None:
        """
        Replace the stored document atomically.

        Readers observe either the previous document or the new one, never a
        partial write.

        Args:
            document: JSON-compatible document to store

        Raises:
            StorageIOError: If the write fails; the previous document is kept
        """
        pass

    @abstractmethod
    def update(self, mutate: Callable[[Optional[Any]], Any]) -> Any:
        """
        Read, transform and replace the stored document as one transaction.

        No other writer, in this process or another one sharing the store,
        can interleave between the read and the write. A document that
        cannot be parsed is handed to ``mutate`` as None.

        Args:
            mutate: Receives the current document (or None) and returns the
                new one; exceptions it raises abort the update unwritten

        Returns:
            The document that was written

        Raises:
            StorageIOError: If reading or writing fails; the previous document is kept
        """
        pass
