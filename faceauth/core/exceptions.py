"""Custom exceptions for the face authentication core."""
from typing import Optional


class FaceAuthError(Exception):
    """Base exception for identity store and matching operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize face authentication error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.details = details or {}


class NameExistsError(FaceAuthError):
    """Raised when an identity with the same name is already enrolled."""
    pass


class NotFoundError(FaceAuthError):
    """Raised when removing an identity that is not enrolled."""
    pass


class NoFaceDetectedError(FaceAuthError):
    """Raised by detectors when no face is found in the image."""
    pass


class InvalidDescriptorError(FaceAuthError):
    """Raised when a descriptor handed to the core has the wrong shape or non-finite values."""
    pass


class CorruptDescriptorError(FaceAuthError):
    """Raised when a stored descriptor cannot be decoded."""
    pass


class InvalidTransitionError(FaceAuthError):
    """Raised when a workflow operation is invoked in a state that does not accept it."""
    pass


class StorageError(FaceAuthError):
    """Base exception for identity store operations."""
    pass


class StorageCorruptError(StorageError):
    """Raised when the identity store exists but cannot be parsed."""
    pass


class StorageIOError(StorageError):
    """Raised when reading or writing the identity store fails."""
    pass
