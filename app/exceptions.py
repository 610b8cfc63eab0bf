# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code and a suggestion on how to fix them.
# Backend error detail is logged server-side and never echoed to clients.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class PortfolioException(Exception):
    """
    Base exception for the portfolio API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "PORTFOLIO_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Artwork Exceptions
# =============================================================================

class ArtworkNotFoundError(PortfolioException):
    """Raised when an artwork ID doesn't exist."""

    def __init__(self, artwork_id: str):
        super().__init__(
            message=f"Artwork not found: {artwork_id}",
            code="ARTWORK_NOT_FOUND",
            status_code=404,
            suggestion="Check that the artwork_id is correct and the artwork hasn't been deleted",
            details={"artwork_id": artwork_id}
        )


class MissingImageError(PortfolioException):
    """Raised when an artwork is created without an image."""

    def __init__(self):
        super().__init__(
            message="Please select an image",
            code="MISSING_IMAGE",
            status_code=400,
            suggestion="Attach an image file in the 'image' form field",
        )


class ArtworkSaveError(PortfolioException):
    """Raised when creating or updating an artwork fails in the backend."""

    def __init__(self):
        super().__init__(
            message="Failed to save artwork. Please try again.",
            code="ARTWORK_SAVE_FAILED",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )


class ArtworkDeleteError(PortfolioException):
    """Raised when the artwork row could not be deleted."""

    def __init__(self, artwork_id: str):
        super().__init__(
            message="Failed to delete artwork. Please try again.",
            code="ARTWORK_DELETE_FAILED",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"artwork_id": artwork_id}
        )


class TagCreateError(PortfolioException):
    """Raised when a tag could not be created."""

    def __init__(self, name: str):
        super().__init__(
            message="Failed to create tag. Please try again.",
            code="TAG_CREATE_FAILED",
            status_code=500,
            details={"name": name}
        )


# =============================================================================
# Image Upload Exceptions
# =============================================================================

class InvalidFileTypeError(PortfolioException):
    """Raised when the artwork image has an extension outside ALLOWED_EXTENSIONS."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Unsupported image type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Choose an image ending in one of {', '.join(allowed)}",
            details={"filename": filename, "allowed_extensions": allowed}
        )


class FileTooLargeError(PortfolioException):
    """Raised when the artwork image exceeds MAX_UPLOAD_SIZE_MB."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Image is {size_mb:.1f}MB; the limit is {max_mb}MB",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion="Resize or compress the image before uploading",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


class StorageUploadError(PortfolioException):
    """
    Raised by StorageService when the bucket rejects an upload.

    The artwork service catches it and reports a generic save failure, so
    the backend message only reaches the logs.
    """

    def __init__(self, key: str, error: str):
        super().__init__(
            message=f"Upload of {key} failed",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            details={"key": key, "error": error}
        )


# =============================================================================
# Contact Exceptions
# =============================================================================

class ContactValidationError(PortfolioException):
    """Raised when the contact form is missing a field."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message="Please fill out all fields before submitting.",
            code="CONTACT_INVALID",
            status_code=400,
            details={"missing_fields": missing}
        )


class ContactDeliveryError(PortfolioException):
    """Raised when the contact webhook did not accept the message."""

    def __init__(self):
        super().__init__(
            message="Sorry, your message could not be sent. Please try again later.",
            code="CONTACT_DELIVERY_FAILED",
            status_code=502,
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class InvalidCredentialsError(PortfolioException):
    """Raised when login or signup is rejected by the identity provider."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            code="INVALID_CREDENTIALS",
            status_code=401,
            suggestion="Check the email and password and try again",
        )


class AuthProviderError(PortfolioException):
    """Raised when the identity provider cannot be reached."""

    def __init__(self):
        super().__init__(
            message="Authentication service unavailable",
            code="AUTH_PROVIDER_ERROR",
            status_code=503,
            suggestion="Try again later or contact support if the issue persists",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def portfolio_exception_handler(
    request: Request,
    exc: PortfolioException
) -> JSONResponse:
    """
    Convert PortfolioException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
