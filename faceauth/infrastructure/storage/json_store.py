"""JSON file implementation of the identity store.

The whole identity set lives in one JSON document. Writes go to a temporary
file in the same directory, are fsync'd, and then renamed over the target
while holding an exclusive lock, so a reader only ever sees a complete
document. ``update`` holds the same lock across read, mutate and write.
"""
import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

import portalocker

from faceauth.core.exceptions import StorageCorruptError, StorageIOError
from faceauth.core.logging import get_logger
from faceauth.domain.interfaces.storage.identity_store import IdentityStore

logger = get_logger(__name__)


class JsonFileIdentityStore(IdentityStore):
    """Identity store backed by a single JSON file.

    Example:
        ```python
        store = JsonFileIdentityStore("data/face-auth-users.json")
        store.write([{"name": "Alice", "descriptor": [0.1, 0.2]}])
        document = store.read()
        ```
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document; the parent directory is
                created on first write
        """
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")

    def read(self) -> Optional[Any]:
        if not self.path.exists():
            return None

        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StorageCorruptError(
                "Identity store is not valid UTF-8",
                details={"path": str(self.path)},
            ) from e
        except OSError as e:
            logger.error("Failed to read identity store", path=str(self.path), error=str(e))
            raise StorageIOError(
                f"Failed to read identity store: {e}",
                details={"path": str(self.path)},
            ) from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageCorruptError(
                f"Identity store is not valid JSON: {e.msg}",
                details={"path": str(self.path), "line": e.lineno, "column": e.colno},
            ) from e
        except RecursionError as e:
            raise StorageCorruptError(
                "Identity store is nested too deeply to parse",
                details={"path": str(self.path)},
            ) from e

    def write(self, document: Any) -> None:
        payload = self._dumps(document)

        try:
            with self._exclusive():
                self._atomic_write(payload)
        except (OSError, portalocker.LockException) as e:
            self._raise_write_error(e)

        logger.debug("Wrote identity store", path=str(self.path), size=len(payload))

    def update(self, mutate: Callable[[Optional[Any]], Any]) -> Any:
        try:
            with self._exclusive():
                try:
                    current = self.read()
                except StorageCorruptError as e:
                    logger.warning("Replacing corrupt identity store", path=str(self.path), error=str(e))
                    current = None

                document = mutate(current)
                payload = self._dumps(document)
                self._atomic_write(payload)
        except (OSError, portalocker.LockException) as e:
            self._raise_write_error(e)

        logger.debug("Updated identity store", path=str(self.path), size=len(payload))
        return document

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.lock_path.touch(exist_ok=True)

        with open(self.lock_path, "r+") as lock_file:
            portalocker.lock(lock_file, portalocker.LOCK_EX)
            try:
                yield
            finally:
                portalocker.unlock(lock_file)

    @staticmethod
    def _dumps(document: Any) -> str:
        return json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)

    def _raise_write_error(self, error: Exception) -> None:
        logger.error(
            "Failed to write identity store",
            path=str(self.path),
            error=str(error),
            exc_info=True,
        )
        raise StorageIOError(
            f"Failed to write identity store: {error}",
            details={"path": str(self.path)},
        ) from error

    def _atomic_write(self, payload: str) -> None:
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_name, self.path)
        except BaseException:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise
        self._sync_directory()

    def _sync_directory(self) -> None:
        # Persist the rename itself; directories cannot be opened on Windows.
        if not hasattr(os, "O_DIRECTORY"):
            return
        dir_fd = os.open(str(self.path.parent), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
