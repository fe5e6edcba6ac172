"""Face detector interface."""
from abc import ABC, abstractmethod
from typing import Optional

from faceauth.domain.entities.identity import FaceDescriptor


class FaceDetector(ABC):
    """Interface for the external model that turns an image into a descriptor."""

    @abstractmethod
    def detect_single_face(self, image_bytes: bytes) -> Optional[FaceDescriptor]:
        """
        Detect at most one face and extract its descriptor.

        Args:
            image_bytes: Raw image data

        Returns:
            Descriptor of the detected face, or None if no face was found

        Raises:
            NoFaceDetectedError: Implementations may raise instead of returning None;
                callers treat both the same way
        """
        pass
