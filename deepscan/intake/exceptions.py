from typing import ClassVar

from deepscan.exceptions import ServiceError


class IntakeError(ServiceError):
    """Base exception for all upload intake errors."""

    status_code: ClassVar[int] = 400
    title: ClassVar[str] = "Validation error"


class MissingFileError(IntakeError):
    """Raised when a request carries no file."""


class UnsupportedFileTypeError(IntakeError):
    """Raised when the declared MIME type is outside the allowlist."""

    title: ClassVar[str] = "Unsupported file type"


class EmptyFileError(IntakeError):
    """Raised when an uploaded file has no content."""


class FileTooLargeError(IntakeError):
    """Raised when an uploaded file exceeds a size ceiling."""

    status_code: ClassVar[int] = 413
    title: ClassVar[str] = "Payload too large"
