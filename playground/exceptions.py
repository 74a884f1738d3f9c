"""Custom exception hierarchy for the playground."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Lookup errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    VERSION_NOT_FOUND = "VERSION_NOT_FOUND"

    # Validation errors
    INVALID_NAME = "INVALID_NAME"

    # Degraded subsystems
    PERSISTENCE_UNAVAILABLE = "PERSISTENCE_UNAVAILABLE"
    COMPOSITION_DEGRADED = "COMPOSITION_DEGRADED"
    RENDER_FAILURE = "RENDER_FAILURE"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PlaygroundException(Exception):
    """
    Base exception for all playground errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class NotFoundError(PlaygroundException):
    """A referenced file or version id does not exist."""


class ProjectFileNotFoundError(NotFoundError):
    """File not found in the project."""

    def __init__(self, file_id: str):
        super().__init__(
            f"File not found: {file_id}",
            ErrorCode.FILE_NOT_FOUND,
            status_code=404,
            details={"file_id": file_id}
        )


class VersionNotFoundError(NotFoundError):
    """Version not found in the owning file's history."""

    def __init__(self, file_id: str, version_id: str):
        super().__init__(
            f"Version not found: {version_id}",
            ErrorCode.VERSION_NOT_FOUND,
            status_code=404,
            details={"file_id": file_id, "version_id": version_id}
        )


class InvalidNameError(PlaygroundException):
    """File name is duplicated or malformed."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            f"Invalid file name {name!r}: {reason}",
            ErrorCode.INVALID_NAME,
            status_code=400,
            details={"name": name, "reason": reason}
        )


class PersistenceUnavailableError(PlaygroundException):
    """Durable storage read or write failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.PERSISTENCE_UNAVAILABLE,
            status_code=503,
            details=details
        )


class RenderFailureError(PlaygroundException):
    """The sandbox failed to load a composed document."""

    def __init__(self, render_id: int, message: str, original_error: Optional[Exception] = None):
        details: Dict[str, Any] = {"render_id": render_id}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.RENDER_FAILURE,
            status_code=502,
            details=details
        )
