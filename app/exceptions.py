# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where useful, a hint on
# how to recover.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class CouncilPortalException(Exception):
    """
    Base exception for the Council Portal API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "COUNCIL_PORTAL_ERROR",
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
# Backend Exceptions
# =============================================================================

class BackendUnavailableError(CouncilPortalException):
    """Raised when a row/file/auth call to the backend fails."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message=message,
            code="BACKEND_ERROR",
            status_code=502,
            suggestion="Retry the action once the backend is reachable",
            details={"operation": operation} if operation else None,
        )


class AuthenticationFailedError(CouncilPortalException):
    """Raised when admin sign-in is rejected."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
            status_code=401,
            suggestion="Check the email and password and try again",
        )


# =============================================================================
# Admin Console Exceptions
# =============================================================================

class ConfirmationRequiredError(CouncilPortalException):
    """Raised when a delete is attempted without operator confirmation."""

    def __init__(self, item_id: str):
        super().__init__(
            message="Deleting this entry is irreversible and must be confirmed",
            code="CONFIRMATION_REQUIRED",
            status_code=409,
            suggestion="Repeat the request with confirm=true",
            details={"item_id": item_id},
        )


class DraftValidationError(CouncilPortalException):
    """Raised when the active draft cannot be turned into a row."""

    def __init__(self, category: str, error: str):
        super().__init__(
            message=f"Draft for {category} is incomplete: {error}",
            code="INVALID_DRAFT",
            status_code=422,
            suggestion="Fill in the required fields and submit again",
            details={"category": category},
        )


class ActionFailedError(CouncilPortalException):
    """Raised when a console action fails; the message is the raw backend error."""

    def __init__(self, action: str, message: str):
        super().__init__(
            message=message,
            code="ACTION_FAILED",
            status_code=502,
            details={"action": action},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class FileTooLargeError(CouncilPortalException):
    """Raised when an uploaded file exceeds the size limit."""

    def __init__(self, filename: str, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {filename} is {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload files smaller than {max_mb}MB",
            details={"filename": filename, "size_mb": size_mb, "max_mb": max_mb},
        )


class UploadNotSupportedError(CouncilPortalException):
    """Raised when media is uploaded while a text-only category is active."""

    def __init__(self, category: str):
        super().__init__(
            message=f"The {category} category does not accept media uploads",
            code="UPLOAD_NOT_SUPPORTED",
            status_code=400,
            suggestion="Switch to events, members or gallery before uploading",
            details={"category": category},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def council_portal_exception_handler(
    request: Request,
    exc: CouncilPortalException
) -> JSONResponse:
    """
    Convert CouncilPortalException to JSON response.

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
