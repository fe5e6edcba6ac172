"""Service container for dependency injection."""
from typing import Optional

from faceauth.core.config import Settings, settings as default_settings
from faceauth.core.logging import get_logger
from faceauth.domain.interfaces.recognition.face_detector import FaceDetector
from faceauth.domain.interfaces.storage.identity_store import IdentityStore
from faceauth.domain.value_objects.storage import LoadReport
from faceauth.infrastructure.storage import InMemoryIdentityStore, JsonFileIdentityStore
from faceauth.services.authentication import AuthenticationWorkflow
from faceauth.services.codec import DescriptorCodec
from faceauth.services.enrollment import EnrollmentWorkflow
from faceauth.services.matcher import Matcher
from faceauth.services.repository import IdentityRepository

logger = get_logger(__name__)


class ServiceContainer:
    """Container for the identity store and matching services.

    The container owns the single identity repository of the process and
    hands it to the workflows.

    Example:
        ```python
        container = ServiceContainer()
        container.initialize()

        enrollment = container.new_enrollment()
        result = container.authentication_workflow.authenticate(descriptor)
        ```
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        store: Optional[IdentityStore] = None,
        detector: Optional[FaceDetector] = None,
    ) -> None:
        """Initialize empty container.

        Args:
            config: Settings to build services from; defaults to the process settings
            store: Identity store overriding the configured backend
            detector: Face detector handed to the workflows
        """
        self.config = config or default_settings
        self.detector = detector
        self._store_override = store

        self.store: Optional[IdentityStore] = None
        self.codec: Optional[DescriptorCodec] = None
        self.repository: Optional[IdentityRepository] = None
        self.matcher: Optional[Matcher] = None
        self.authentication_workflow: Optional[AuthenticationWorkflow] = None
        self.load_report: Optional[LoadReport] = None

    def initialize(self) -> LoadReport:
        """Build all services and hydrate the repository.

        Returns:
            LoadReport from the initial repository load

        Raises:
            StorageIOError: If the identity store cannot be read
        """
        self.store = self._store_override or self._build_store()
        self.codec = DescriptorCodec(length=self.config.DESCRIPTOR_LENGTH)
        self.repository = IdentityRepository(store=self.store, codec=self.codec)
        self.matcher = Matcher(threshold=self.config.MATCH_THRESHOLD)
        self.authentication_workflow = AuthenticationWorkflow(
            repository=self.repository,
            matcher=self.matcher,
            detector=self.detector,
        )

        self.load_report = self.repository.load()
        if self.load_report.has_warnings:
            logger.warning(
                "Identity store loaded with warnings",
                skipped=self.load_report.skipped,
                storage_corrupt=self.load_report.storage_corrupt,
                warnings=self.load_report.warnings,
            )
        logger.info(
            "Initialized face auth services",
            identities=self.load_report.loaded,
            threshold=self.matcher.threshold,
        )
        return self.load_report

    def new_enrollment(self) -> EnrollmentWorkflow:
        """Start a fresh enrollment bound to the shared repository."""
        if self.repository is None:
            raise RuntimeError("ServiceContainer.initialize() must be called first")
        return EnrollmentWorkflow(repository=self.repository, detector=self.detector)

    def cleanup(self) -> None:
        """Drop service references in reverse order of initialization."""
        self.authentication_workflow = None
        self.matcher = None
        self.repository = None
        self.codec = None
        self.store = None

    def _build_store(self) -> IdentityStore:
        backend = self.config.STORE_BACKEND.lower()
        if backend == "json":
            return JsonFileIdentityStore(self.config.STORE_PATH)
        if backend == "memory":
            return InMemoryIdentityStore()
        raise ValueError(f"Unknown identity store backend: {self.config.STORE_BACKEND}")
