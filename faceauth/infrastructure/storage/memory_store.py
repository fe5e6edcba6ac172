"""In-memory implementation of the identity store.

Keeps the serialized JSON text rather than live objects, so a repository
built over the same store behaves like one hydrated after a restart.
"""
import json
import threading
from typing import Any, Callable, Optional

from faceauth.core.exceptions import StorageCorruptError
from faceauth.domain.interfaces.storage.identity_store import IdentityStore


class InMemoryIdentityStore(IdentityStore):
    """Identity store that lives for the lifetime of the process."""

    def __init__(self, text: Optional[str] = None) -> None:
        self.text = text
        self._lock = threading.RLock()

    def read(self) -> Optional[Any]:
        with self._lock:
            text = self.text
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageCorruptError(f"Identity store is not valid JSON: {e.msg}") from e
        except RecursionError as e:
            raise StorageCorruptError("Identity store is nested too deeply to parse") from e

    def write(self, document: Any) -> None:
        payload = json.dumps(document, allow_nan=False)
        with self._lock:
            self.text = payload

    def update(self, mutate: Callable[[Optional[Any]], Any]) -> Any:
        with self._lock:
            try:
                current = self.read()
            except StorageCorruptError:
                current = None
            document = mutate(current)
            self.write(document)
            return document
