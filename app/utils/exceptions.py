"""Custom exceptions for Confluencer backend."""

from typing import Any, Dict, Optional


class ConfluencerException(Exception):
    """Base exception for Confluencer application."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize ConfluencerException.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code.
            error_code: Machine-readable error code.
            details: Additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class InvalidInputError(ConfluencerException):
    """Raised when a request carries neither usable text nor a URL."""

    def __init__(
        self,
        message: str = "Missing or empty `text` or `url` field.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_INPUT",
            details=details,
        )


class ContentFetchError(ConfluencerException):
    """Raised when a source URL cannot be fetched or parsed."""

    def __init__(
        self,
        message: str = "Unable to fetch or parse the provided URL.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="CONTENT_FETCH_ERROR",
            details=details,
        )


class ScriptGenerationError(ConfluencerException):
    """Raised when the language model yields no usable script."""

    def __init__(
        self,
        message: str = "Failed to generate summary.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=502,
            error_code="SCRIPT_GENERATION_ERROR",
            details=details,
        )


class TTSError(ConfluencerException):
    """Raised when text-to-speech conversion fails."""

    def __init__(
        self,
        message: str = "Text-to-speech conversion failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=502,
            error_code="TTS_ERROR",
            details=details,
        )


class StorageError(ConfluencerException):
    """Raised when audio cannot be uploaded or signed."""

    def __init__(
        self,
        message: str = "Audio storage operation failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=502,
            error_code="STORAGE_ERROR",
            details=details,
        )


class NotFoundError(ConfluencerException):
    """Raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize NotFoundError."""
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=details,
        )
