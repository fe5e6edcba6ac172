"""Enrollment workflow: turns a name and a captured face into a committed identity."""
from typing import Optional

from faceauth.core.exceptions import (
    InvalidTransitionError,
    NameExistsError,
    NoFaceDetectedError,
)
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import FaceDescriptor, Identity
from faceauth.domain.interfaces.recognition.face_detector import FaceDetector
from faceauth.domain.value_objects.enrollment import (
    Committed,
    CollectingFace,
    CollectingName,
    EnrollmentIssue,
    EnrollmentState,
    EnrollmentStep,
)
from faceauth.services.repository import IdentityRepository

logger = get_logger(__name__)


class EnrollmentWorkflow:
    """Staged enrollment of a single identity.

    The workflow starts in ``CollectingName``. ``submit_name`` moves it to
    ``CollectingFace`` once the name is non-empty and not yet enrolled, and
    ``submit_face`` commits the identity to the repository and ends in
    ``Committed``. Recoverable problems are reported through
    ``EnrollmentStep.issue`` and leave the user at a step they can retry.

    Example:
        ```python
        workflow = EnrollmentWorkflow(repository)
        step = workflow.submit_name("Alice")
        if step.ok:
            step = workflow.submit_face(descriptor)
        ```
    """

    def __init__(
        self,
        repository: IdentityRepository,
        detector: Optional[FaceDetector] = None,
    ) -> None:
        """Initialize the workflow in the name collection stage.

        Args:
            repository: Repository new identities are committed to
            detector: Optional detector used by ``submit_image``
        """
        self.repository = repository
        self.detector = detector
        self._state: EnrollmentState = CollectingName()

    @property
    def state(self) -> EnrollmentState:
        return self._state

    def submit_name(self, name: str) -> EnrollmentStep:
        """Accept the name for the new identity.

        The uniqueness check runs against the live repository every time.

        Raises:
            InvalidTransitionError: If the workflow is not collecting a name
        """
        self._require(CollectingName, "submit_name")

        if not name or not name.strip():
            return self._step(EnrollmentIssue.EMPTY_NAME)

        if self.repository.contains(name):
            logger.info("Enrollment name already taken", name=name)
            return self._step(EnrollmentIssue.NAME_EXISTS)

        self._state = CollectingFace(name=name)
        return self._step()

    def submit_face(self, descriptor: Optional[FaceDescriptor]) -> EnrollmentStep:
        """Commit the identity with the descriptor captured by the detector.

        ``None`` means the detector found no face; the workflow stays in
        ``CollectingFace`` so the capture can be retried. If another enrollment
        committed the same name in the meantime, nothing is overwritten and
        the workflow returns to ``CollectingName``.

        Raises:
            InvalidTransitionError: If the workflow is not collecting a face
            InvalidDescriptorError: If the descriptor is malformed
            StorageIOError: If persisting fails; the workflow stays in ``CollectingFace``
        """
        state = self._require(CollectingFace, "submit_face")

        if descriptor is None:
            logger.info("No face detected during enrollment", name=state.name)
            return self._step(EnrollmentIssue.NO_FACE_DETECTED)

        identity = Identity(name=state.name, descriptor=descriptor)
        try:
            self.repository.add(identity)
        except NameExistsError:
            logger.warning("Enrollment lost a race for the same name", name=state.name)
            self._state = CollectingName()
            return self._step(EnrollmentIssue.NAME_CONFLICT)

        self._state = Committed(identity=identity)
        return self._step()

    def submit_image(self, image_bytes: bytes) -> EnrollmentStep:
        """Run the detector on a captured image and submit the result.

        Raises:
            InvalidTransitionError: If no detector was configured or the
                workflow is not collecting a face
        """
        self._require(CollectingFace, "submit_image")
        if self.detector is None:
            raise InvalidTransitionError("No face detector configured for image capture")

        try:
            descriptor = self.detector.detect_single_face(image_bytes)
        except NoFaceDetectedError:
            descriptor = None
        return self.submit_face(descriptor)

    def restart(self) -> EnrollmentStep:
        """Go back to name collection, e.g. to enroll another person."""
        self._state = CollectingName()
        return self._step()

    def _require(self, expected: type, operation: str):
        if not isinstance(self._state, expected):
            raise InvalidTransitionError(
                f"Cannot {operation} while in stage '{self._state.stage.value}'",
                details={"operation": operation, "stage": self._state.stage.value},
            )
        return self._state

    def _step(self, issue: Optional[EnrollmentIssue] = None) -> EnrollmentStep:
        return EnrollmentStep(state=self._state, issue=issue)
