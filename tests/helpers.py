"""Test helpers shared across test modules."""
from typing import Optional

import numpy as np

from faceauth.core.exceptions import NoFaceDetectedError
from faceauth.domain.interfaces.recognition.face_detector import FaceDetector

# Short descriptors keep the fixtures readable.
DESCRIPTOR_LENGTH = 4


def descriptor_at(distance: float, axis: int = 0, length: int = DESCRIPTOR_LENGTH) -> np.ndarray:
    """Descriptor at an exact Euclidean distance from the origin along one axis."""
    vec = np.zeros(length, dtype=np.float64)
    vec[axis] = distance
    return vec


class FakeDetector(FaceDetector):
    """Detector returning canned descriptors keyed by image bytes."""

    def __init__(self, faces: Optional[dict] = None, raise_on_missing: bool = False):
        self.faces = faces or {}
        self.raise_on_missing = raise_on_missing
        self.calls = []

    def detect_single_face(self, image_bytes: bytes):
        self.calls.append(image_bytes)
        if image_bytes in self.faces:
            return self.faces[image_bytes]
        if self.raise_on_missing:
            raise NoFaceDetectedError("No face in image")
        return None
