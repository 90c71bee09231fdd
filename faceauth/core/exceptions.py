"""Custom exceptions for the face authentication service."""
from typing import Optional


class FaceAuthError(Exception):
    """Base exception for face authentication operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize face authentication error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.details = details or {}


class DimensionMismatchError(FaceAuthError):
    """Raised when two compared descriptors have different lengths."""

    def __init__(self, left: int, right: int):
        super().__init__(
            f"Descriptor dimensions differ: {left} != {right}",
            details={"left": left, "right": right},
        )
        self.left = left
        self.right = right


class InvalidDescriptorError(FaceAuthError):
    """Raised when a value cannot be used as a face descriptor."""
    pass


class NoEnrolledDescriptorError(FaceAuthError):
    """Raised when an identity has no canonical descriptor to compare against."""
    pass


class EmptyGroupError(FaceAuthError):
    """Raised when group authentication is requested for zero members."""
    pass


class MalformedTokenError(FaceAuthError):
    """Raised when a descriptor token cannot be decoded."""
    pass


class IdentityNotFoundError(FaceAuthError):
    """Raised when an identity reference matches no stored identity."""
    pass


class IdentityAlreadyExistsError(FaceAuthError):
    """Raised when registering an identity whose email or username is taken."""
    pass


class StorageError(FaceAuthError):
    """Raised when the identity store fails."""
    pass


class ServiceNotInitializedError(FaceAuthError):
    """Raised when a service is requested before the container is initialized."""
    pass
