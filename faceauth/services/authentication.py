"""Authentication workflow: matches a presented face against enrolled identities."""
from typing import Optional

from faceauth.core.exceptions import InvalidTransitionError, NoFaceDetectedError
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import FaceDescriptor
from faceauth.domain.interfaces.recognition.face_detector import FaceDetector
from faceauth.domain.value_objects.matching import AuthenticationResult, AuthenticationStatus
from faceauth.services.matcher import Matcher
from faceauth.services.repository import IdentityRepository

logger = get_logger(__name__)


class AuthenticationWorkflow:
    """Single-shot authentication against the identity repository."""

    def __init__(
        self,
        repository: IdentityRepository,
        matcher: Matcher,
        detector: Optional[FaceDetector] = None,
    ) -> None:
        self.repository = repository
        self.matcher = matcher
        self.detector = detector

    def authenticate(self, descriptor: Optional[FaceDescriptor]) -> AuthenticationResult:
        """Match a presented descriptor against every enrolled identity.

        Args:
            descriptor: Descriptor from the detector, or None if no face was found

        Returns:
            AuthenticationResult with status ``NO_FACE_DETECTED`` when there is
            no descriptor, otherwise ``ACCEPTED`` or ``REJECTED`` with the
            match outcome

        Raises:
            InvalidDescriptorError: If the descriptor is malformed
        """
        if descriptor is None:
            logger.info("No face detected during authentication")
            return AuthenticationResult(status=AuthenticationStatus.NO_FACE_DETECTED)

        presented = self.repository.codec.validate(descriptor)
        outcome = self.matcher.find_best_match(presented, self.repository.list())

        status = AuthenticationStatus.ACCEPTED if outcome.accepted else AuthenticationStatus.REJECTED
        logger.info(
            "Authentication attempt",
            status=status.value,
            name=outcome.name,
            distance=outcome.distance,
        )
        return AuthenticationResult(status=status, outcome=outcome)

    def authenticate_image(self, image_bytes: bytes) -> AuthenticationResult:
        """Run the detector on a captured image and authenticate the result.

        Raises:
            InvalidTransitionError: If no detector was configured
        """
        if self.detector is None:
            raise InvalidTransitionError("No face detector configured for image capture")

        try:
            descriptor = self.detector.detect_single_face(image_bytes)
        except NoFaceDetectedError:
            descriptor = None
        return self.authenticate(descriptor)
