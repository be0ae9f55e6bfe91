"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    ACCESS_EXPIRED = "ACCESS_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    NDA_UPDATED = "NDA_UPDATED"
    INVITE_EMAIL_MISMATCH = "INVITE_EMAIL_MISMATCH"

    # Not found errors (404)
    DATA_ROOM_NOT_FOUND = "DATA_ROOM_NOT_FOUND"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    INVITE_NOT_FOUND = "INVITE_NOT_FOUND"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    MERGE_LOG_NOT_FOUND = "MERGE_LOG_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_MERGE = "INVALID_MERGE"
    MERGE_NOT_REVERTIBLE = "MERGE_NOT_REVERTIBLE"
    INVITE_EXPIRED = "INVITE_EXPIRED"
    INVITE_NOT_VALID = "INVITE_NOT_VALID"
    NDA_REQUIRED = "NDA_REQUIRED"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Request input was missing or malformed."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=400,
            details=details,
        )


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class GuestAccessExpiredError(AuthenticationError):
    """The guest's invitation is past its expiry."""

    def __init__(self) -> None:
        super().__init__(
            message="Access expired",
            error_code=ErrorCode.ACCESS_EXPIRED,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: ErrorCode = ErrorCode.FORBIDDEN,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=403,
            details=details,
        )


class InsufficientPermissionsError(AuthorizationError):
    """Organization member lacks the role an admin operation requires."""

    def __init__(self, required_role: str = "admin") -> None:
        super().__init__(
            message=f"Insufficient permissions. Required role: {required_role}",
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            details={"required_role": required_role},
        )


class NdaUpdatedError(AuthorizationError):
    """The data room NDA changed after the guest signed it."""

    def __init__(self) -> None:
        super().__init__(
            message="The NDA has been updated. Please re-sign to continue.",
            error_code=ErrorCode.NDA_UPDATED,
        )


class NotFoundError(AppException):
    """Entity absent or soft-deleted."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=404,
            details=details,
        )


class DataRoomNotFoundError(NotFoundError):
    """Data room not found."""

    def __init__(self, data_room_id: str) -> None:
        super().__init__(
            message="Data room not found",
            error_code=ErrorCode.DATA_ROOM_NOT_FOUND,
            details={"data_room_id": data_room_id},
        )


class DataRoomFileNotFoundError(NotFoundError):
    """Data room file (or file version) not found."""

    def __init__(self, file_id: str) -> None:
        super().__init__(
            message="File not found",
            error_code=ErrorCode.FILE_NOT_FOUND,
            details={"file_id": file_id},
        )


class DocumentNotFoundError(NotFoundError):
    """Rich-text document content not found."""

    def __init__(self, document_id: str) -> None:
        super().__init__(
            message="Document not found",
            error_code=ErrorCode.DOCUMENT_NOT_FOUND,
            details={"document_id": document_id},
        )


class FolderNotFoundError(NotFoundError):
    """Data room folder not found."""

    def __init__(self, folder_id: str) -> None:
        super().__init__(
            message="Folder not found",
            error_code=ErrorCode.FOLDER_NOT_FOUND,
            details={"folder_id": folder_id},
        )


class InviteNotFoundError(NotFoundError):
    """Guest invitation not found."""

    def __init__(self) -> None:
        super().__init__(
            message="Invitation not found",
            error_code=ErrorCode.INVITE_NOT_FOUND,
        )


class TaskNotFoundError(NotFoundError):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            message=f"Task not found: {task_id}",
            error_code=ErrorCode.TASK_NOT_FOUND,
            details={"task_id": task_id},
        )


class MergeLogNotFoundError(NotFoundError):
    """Task merge log entry not found."""

    def __init__(self, merge_id: str) -> None:
        super().__init__(
            message=f"Merge not found: {merge_id}",
            error_code=ErrorCode.MERGE_LOG_NOT_FOUND,
            details={"merge_id": merge_id},
        )


class InvalidFileStatusError(ValidationError):
    """File status outside the review vocabulary."""

    def __init__(self, status: str, allowed: list[str]) -> None:
        super().__init__(
            message="Invalid status value",
            error_code=ErrorCode.INVALID_STATUS,
            details={"status": status, "allowed": allowed},
        )


class InvalidMergeError(ValidationError):
    """Merge request is inconsistent (same users, empty task set, bad dates)."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, error_code=ErrorCode.INVALID_MERGE)


class MergeNotRevertibleError(ValidationError):
    """Merge log entry is already reverted."""

    def __init__(self, merge_id: str, status: str) -> None:
        super().__init__(
            message="This merge has already been reverted",
            error_code=ErrorCode.MERGE_NOT_REVERTIBLE,
            details={"merge_id": merge_id, "status": status},
        )


class InviteExpiredError(ValidationError):
    """Invitation expired before it was accepted."""

    def __init__(self) -> None:
        super().__init__(
            message="This invitation has expired",
            error_code=ErrorCode.INVITE_EXPIRED,
        )


class InviteNotValidError(ValidationError):
    """Invitation was revoked."""

    def __init__(self) -> None:
        super().__init__(
            message="This invitation is no longer valid",
            error_code=ErrorCode.INVITE_NOT_VALID,
        )


class InviteEmailMismatchError(AuthorizationError):
    """The supplied email does not match the invitation email."""

    def __init__(self) -> None:
        super().__init__(
            message="Email does not match this invitation",
            error_code=ErrorCode.INVITE_EMAIL_MISMATCH,
        )


class NdaRequiredError(ValidationError):
    """Data room requires a signed NDA before the invitation can be accepted."""

    def __init__(self) -> None:
        super().__init__(
            message="NDA must be signed before accepting this invitation",
            error_code=ErrorCode.NDA_REQUIRED,
        )


class UnsupportedFileTypeError(ValidationError):
    """Upload MIME type is not on the allow-list."""

    def __init__(self, mime_type: str) -> None:
        super().__init__(
            message=(
                f"Unsupported file type: {mime_type}. "
                "Supported types: PDF, DOCX, DOC, XLSX, XLS, JPEG, PNG, MP4, MP3"
            ),
            error_code=ErrorCode.UNSUPPORTED_FILE_TYPE,
            details={"mime_type": mime_type},
        )


class FileTooLargeError(ValidationError):
    """Upload exceeds the configured size ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            message="File is too large",
            error_code=ErrorCode.FILE_TOO_LARGE,
            details={"size": size, "limit": limit},
        )


class DependencyError(AppException):
    """An underlying store or storage call failed."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.STORAGE_ERROR,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=500,
        )
