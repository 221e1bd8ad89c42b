# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells the client HOW to fix it, not just WHAT failed.
#
# Status mapping:
#   401 - no session
#   403 - wrong role / not the pet's owner or assigned trainer
#   404 - missing pet, task, submission, workspace
#   400 - invalid input, bad upload, closed task
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class PawSyncException(Exception):
    """
    Base exception for the PawSync API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "PAWSYNC_ERROR",
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
            "message": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Taxonomy Roots
# =============================================================================

class UnauthenticatedError(PawSyncException):
    """Raised when the request carries no valid session."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            message=message,
            code="UNAUTHENTICATED",
            status_code=401,
            suggestion="Sign in and send the access token as a Bearer header",
        )


class ForbiddenError(PawSyncException):
    """Raised when the caller is authenticated but not allowed."""

    def __init__(
        self,
        message: str = "Access denied",
        code: str = "FORBIDDEN",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=403,
            suggestion=suggestion,
            details=details,
        )


class NotFoundError(PawSyncException):
    """Raised when a referenced record does not exist."""

    def __init__(
        self,
        message: str,
        code: str = "NOT_FOUND",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=404,
            suggestion=suggestion,
            details=details,
        )


class ValidationError(PawSyncException):
    """Raised for missing/invalid fields and rejected uploads."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            suggestion=suggestion,
            details=details,
        )


# =============================================================================
# Authorization Exceptions
# =============================================================================

class RoleRequiredError(ForbiddenError):
    """Raised when the caller's role does not match the route."""

    def __init__(self, role: str):
        super().__init__(
            message=f"{role.capitalize()} role required",
            code="ROLE_REQUIRED",
            suggestion=f"Sign in with a {role.lower()} account",
            details={"required_role": role},
        )


class NotAssignedTrainerError(ForbiddenError):
    """Raised when a trainer acts on a pet they are not assigned to."""

    def __init__(self, pet_id: str | None = None):
        super().__init__(
            message="You're not assigned to this pet",
            code="NOT_ASSIGNED_TRAINER",
            suggestion="Ask the pet's owner to assign you as their trainer",
            details={"pet_id": pet_id} if pet_id else None,
        )


class NotPetOwnerError(ForbiddenError):
    """Raised when an owner-only action is attempted by someone else."""

    def __init__(self, message: str = "You don't own this pet"):
        super().__init__(message=message, code="NOT_PET_OWNER")


# =============================================================================
# Not Found Exceptions
# =============================================================================

class UserNotFoundError(NotFoundError):
    """Raised when a user ID doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class PetNotFoundError(NotFoundError):
    """Raised when a pet ID doesn't exist."""

    def __init__(self, pet_id: str):
        super().__init__(
            message="Pet not found",
            code="PET_NOT_FOUND",
            suggestion="Check that the pet_id is correct",
            details={"pet_id": pet_id},
        )


class TaskNotFoundError(NotFoundError):
    """Raised when a homework task ID doesn't exist."""

    def __init__(self, task_id: str):
        super().__init__(
            message="Task not found",
            code="TASK_NOT_FOUND",
            suggestion="Check that the task_id is correct",
            details={"task_id": task_id},
        )


class SubmissionNotFoundError(NotFoundError):
    """Raised when a submission ID doesn't exist."""

    def __init__(self, submission_id: str):
        super().__init__(
            message="Submission not found",
            code="SUBMISSION_NOT_FOUND",
            details={"submission_id": submission_id},
        )


class WorkspaceNotFoundError(NotFoundError):
    """Raised when the caller has no workspace."""

    def __init__(self, message: str = "No workspace found"):
        super().__init__(
            message=message,
            code="WORKSPACE_NOT_FOUND",
            suggestion="Complete the trainer profile to create a workspace",
        )


class MediaNotFoundError(NotFoundError):
    """Raised when a media ID doesn't exist."""

    def __init__(self, media_id: str):
        super().__init__(
            message="Media not found",
            code="MEDIA_NOT_FOUND",
            details={"media_id": media_id},
        )


# =============================================================================
# Workspace Exceptions
# =============================================================================

class InvalidTokenError(NotFoundError):
    """Raised when an invite token matches no workspace."""

    def __init__(self):
        super().__init__(
            message="Invalid invite link",
            code="INVALID_TOKEN",
            suggestion="Ask your trainer for a fresh invite link",
        )


class SelfJoinError(ValidationError):
    """Raised when a trainer redeems their own invite token."""

    def __init__(self):
        super().__init__(
            message="You cannot join your own workspace as an owner",
            code="SELF_JOIN",
            suggestion="Share the invite link with your clients instead",
        )


# =============================================================================
# Homework Exceptions
# =============================================================================

class TaskClosedError(ValidationError):
    """Raised when submitting against an inactive task."""

    def __init__(self, task_id: str):
        super().__init__(
            message="This task has been closed and no longer accepts submissions",
            code="TASK_CLOSED",
            suggestion="Ask your trainer to reopen the task",
            details={"task_id": task_id},
        )


class InvalidTrainerError(ValidationError):
    """Raised when a trainer email does not resolve to a trainer."""

    def __init__(self, message: str, email: str):
        super().__init__(
            message=message,
            code="INVALID_TRAINER",
            suggestion="Double-check the email your trainer signed up with",
            details={"trainer_email": email},
        )


class InvalidPreferredDaysError(ValidationError):
    """Raised when preferred days contain unknown weekday names."""

    def __init__(self, days: Any):
        super().__init__(
            message="Invalid preferred days",
            code="INVALID_PREFERRED_DAYS",
            suggestion="Use weekday abbreviations: Mon, Tue, Wed, Thu, Fri, Sat, Sun",
            details={"preferred_days": days},
        )


class EmailInUseError(ValidationError):
    """Raised when a new sign-in's email already belongs to another user row."""

    def __init__(self, email: str):
        super().__init__(
            message="This email is already linked to another account",
            code="EMAIL_IN_USE",
            suggestion="Sign in with the account originally used for this email",
            details={"email": email},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class NoFileError(ValidationError):
    """Raised when a multipart request carries no file."""

    def __init__(self):
        super().__init__(
            message="No file uploaded",
            code="NO_FILE",
            suggestion="Attach the file under the 'file' form field",
        )


class InvalidFileTypeError(ValidationError):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            message="Invalid file type. Only images and videos are allowed.",
            code="INVALID_FILE_TYPE",
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed},
        )


class FileTooLargeError(ValidationError):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 1), "max_mb": max_mb},
        )


class StorageUploadError(PawSyncException):
    """Raised when writing an upload to disk fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to store uploaded file: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def pawsync_exception_handler(
    request: Request,
    exc: PawSyncException
) -> JSONResponse:
    """
    Convert PawSyncException to JSON response.

    Returns structured error with:
    - detail / message: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic request validation errors.

    Missing or malformed fields are a 400 like every other validation failure.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid {field}: {first.get('msg')}" if field else "Validation error"
    return JSONResponse(
        status_code=400,
        content={
            "detail": message,
            "message": message,
            "code": "VALIDATION_ERROR",
            "errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
                for err in errors
            ],
        }
    )
