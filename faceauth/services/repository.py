"""Identity repository: the process-wide set of enrolled identities.

The repository owns the in-memory identity map and keeps it in lock-step with
durable storage. Every mutation runs as a store transaction over the freshly
read document, and the result is published only after it was written, so a
failed write leaves both memory and storage at their previous value.
"""
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from faceauth.core.exceptions import (
    CorruptDescriptorError,
    NameExistsError,
    NotFoundError,
    StorageCorruptError,
)
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import Identity
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.domain.value_objects.storage import LoadReport
from faceauth.services.codec import DescriptorCodec

logger = get_logger(__name__)


class IdentityRepository:
    """Uniquely keyed, insertion-ordered collection of enrolled identities.

    Example:
        ```python
        repository = IdentityRepository(JsonFileIdentityStore("users.json"), DescriptorCodec())
        report = repository.load()
        repository.add(Identity(name="Alice", descriptor=descriptor))
        ```
    """

    def __init__(self, store: IdentityStore, codec: DescriptorCodec) -> None:
        """Initialize an empty repository.

        Args:
            store: Durable storage for the identity set
            codec: Codec for descriptors, also fixing their length
        """
        self.store = store
        self.codec = codec
        self._identities: Dict[str, Identity] = {}
        self._lock = threading.RLock()

    def load(self) -> LoadReport:
        """Hydrate the repository from durable storage.

        An absent store yields an empty repository. A store that cannot be
        parsed, or whose top level is not a list of records, yields an empty
        repository and a report flagged ``storage_corrupt``. Unreadable
        records are skipped one by one.

        Returns:
            LoadReport describing what was loaded and skipped

        Raises:
            StorageIOError: If the store cannot be read at all
        """
        with self._lock:
            report = LoadReport()
            try:
                document = self.store.read()
            except StorageCorruptError as e:
                logger.warning("Identity store is corrupt, starting empty", error=str(e))
                report.storage_corrupt = True
                report.warnings.append(f"Identity store unreadable: {e}")
                self._identities = {}
                return report

            if document is None:
                logger.info("No identity store found, starting empty")
                self._identities = {}
                return report

            if not isinstance(document, list):
                logger.warning(
                    "Identity store is not a list of records, starting empty",
                    document_type=type(document).__name__,
                )
                report.storage_corrupt = True
                report.warnings.append(
                    f"Identity store has a {type(document).__name__} at the top level, expected a list"
                )
                self._identities = {}
                return report

            identities = self._decode_records(document, report)
            self._identities = identities
            report.loaded = len(identities)

            logger.info(
                "Loaded identities",
                loaded=report.loaded,
                skipped=report.skipped,
            )
            return report

    def save(self) -> None:
        """Persist the current identity set.

        Raises:
            StorageIOError: If the write fails
        """
        with self._lock:
            self._persist(self._identities)

    def add(self, identity: Identity) -> None:
        """Enroll a new identity at the end of the iteration order.

        The uniqueness check runs against the stored document inside the
        store transaction, so a name committed by another repository sharing
        the store is rejected too.

        Raises:
            NameExistsError: If an identity with exactly this name exists
            InvalidDescriptorError: If the descriptor length does not match the codec
            StorageIOError: If persisting fails; the identity is not added
        """
        self.codec.validate(identity.descriptor)

        def change(current: Dict[str, Identity]) -> Dict[str, Identity]:
            if identity.name in current:
                raise NameExistsError(
                    f"Identity '{identity.name}' is already enrolled",
                    details={"name": identity.name},
                )
            updated = dict(current)
            updated[identity.name] = identity
            return updated

        with self._lock:
            updated = self._transact(change)

        logger.info("Enrolled identity", name=identity.name, total=len(updated))

    def remove(self, name: str) -> None:
        """Remove an enrolled identity.

        Raises:
            NotFoundError: If no identity has this name
            StorageIOError: If persisting fails; the identity is kept
        """
        def change(current: Dict[str, Identity]) -> Dict[str, Identity]:
            if name not in current:
                raise NotFoundError(
                    f"Identity '{name}' is not enrolled",
                    details={"name": name},
                )
            return {k: v for k, v in current.items() if k != name}

        with self._lock:
            updated = self._transact(change)

        logger.info("Removed identity", name=name, total=len(updated))

    def reset(self) -> None:
        """Remove every identity and persist the empty set.

        Raises:
            StorageIOError: If persisting fails; the identities are kept
        """
        removed: List[int] = []

        def change(current: Dict[str, Identity]) -> Dict[str, Identity]:
            removed.append(len(current))
            return {}

        with self._lock:
            self._transact(change)

        logger.info("Reset identity repository", removed=removed[-1])

    def list(self) -> Tuple[Identity, ...]:
        """Snapshot of enrolled identities in enrollment order."""
        with self._lock:
            return tuple(self._identities.values())

    def names(self) -> List[str]:
        with self._lock:
            return list(self._identities)

    def get(self, name: str) -> Optional[Identity]:
        with self._lock:
            return self._identities.get(name)

    def contains(self, name: str) -> bool:
        """Check whether a name is already enrolled (exact, case-sensitive)."""
        with self._lock:
            return name in self._identities

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._identities)

    def _transact(
        self,
        change: Callable[[Dict[str, Identity]], Dict[str, Identity]],
    ) -> Dict[str, Identity]:
        # Apply ``change`` to the freshly stored identities and publish the
        # result only after the write succeeded.
        result: Dict[str, Identity] = {}

        def mutate(document: Optional[Any]) -> List[Dict[str, Any]]:
            updated = change(self._decode_document(document))
            result.update(updated)
            return [self._encode_record(identity) for identity in updated.values()]

        self.store.update(mutate)
        self._identities = result
        return result

    def _persist(self, identities: Dict[str, Identity]) -> None:
        document = [self._encode_record(identity) for identity in identities.values()]
        self.store.write(document)

    def _decode_document(self, document: Optional[Any]) -> Dict[str, Identity]:
        if document is None:
            return {}
        if not isinstance(document, list):
            logger.warning(
                "Identity store is not a list of records, replacing it",
                document_type=type(document).__name__,
            )
            return {}
        return self._decode_records(document, LoadReport())

    def _encode_record(self, identity: Identity) -> Dict[str, Any]:
        return {
            "name": identity.name,
            "descriptor": self.codec.encode(identity.descriptor),
        }

    def _decode_records(self, records: Iterable[Any], report: LoadReport) -> Dict[str, Identity]:
        identities: Dict[str, Identity] = {}

        for index, record in enumerate(records):
            if not isinstance(record, dict):
                self._skip(report, index, f"record is a {type(record).__name__}, expected an object")
                continue

            name = record.get("name")
            if not isinstance(name, str) or not name.strip():
                self._skip(report, index, "record has no name")
                continue

            if name in identities:
                self._skip(report, index, f"duplicate name '{name}', keeping the first record")
                continue

            try:
                descriptor = self.codec.decode(record.get("descriptor"))
            except CorruptDescriptorError as e:
                self._skip(report, index, f"corrupt descriptor for '{name}': {e}")
                continue

            identities[name] = Identity(name=name, descriptor=descriptor)

        return identities

    @staticmethod
    def _skip(report: LoadReport, index: int, reason: str) -> None:
        logger.warning("Skipping identity record", index=index, reason=reason)
        report.skipped += 1
        report.warnings.append(f"Record {index}: {reason}")
