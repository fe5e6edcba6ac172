"""Collaborator interfaces package."""
from .recognition import FaceDetector
from .storage import IdentityStore

__all__ = ["FaceDetector", "IdentityStore"]
