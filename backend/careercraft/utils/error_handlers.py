"""
Centralized error handling and user-friendly error messages.
"""
import logging

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""
    def __init__(self, message: str, status_code: int = 500, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=400, details=details)


class ConflictError(AppError):
    """Duplicate identity or duplicate application."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=400, details=details)


class InvalidCredentialsError(AppError):
    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or get_error_message("invalid_credentials"), status_code=401, details=details)


class NotFoundError(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Resource not found", details: dict | None = None):
        super().__init__(message, status_code=404, details=details)


class UnauthorizedError(AppError):
    """Missing or malformed credentials."""
    def __init__(self, message: str = "No token provided", details: dict | None = None):
        super().__init__(message, status_code=401, details=details)


class ForbiddenError(AppError):
    """Role or ownership denied."""
    def __init__(self, message: str = "Access denied", details: dict | None = None):
        super().__init__(message, status_code=403, details=details)


class FileUploadError(AppError):
    """File upload error."""
    def __init__(self, message: str, status_code: int = 400, details: dict | None = None):
        super().__init__(message, status_code=status_code, details=details)


class DatabaseError(AppError):
    """Database error."""
    def __init__(self, message: str = "Database operation failed", details: dict | None = None):
        super().__init__(message, status_code=500, details=details)


# User-friendly error messages
ERROR_MESSAGES = {
    # Authentication
    "invalid_credentials": "Invalid credentials",
    "account_exists": "User with this email or username already exists",
    "weak_password": "Password must be at least 6 characters long.",
    "no_token": "No token provided",
    "invalid_token": "Invalid token",

    # File uploads
    "file_too_large": "File is too large. Maximum size is 5MB.",
    "invalid_file_type": "Invalid file type. Please upload a PDF, DOC or DOCX file.",
    "file_processing_failed": "Failed to store your file. Please try again.",

    # Jobs
    "job_not_found": "Job posting not found or has been removed.",
    "job_closed": "This job posting is no longer accepting applications.",
    "invalid_job_data": "Title, description, and location are required",
    "skills_required": "At least one skill is required",

    # Applications
    "already_applied": "You have already applied for this job",
    "application_not_found": "Application not found.",
    "invalid_status": "Invalid status",
    "status_final": "This application has already been decided and its status can no longer change.",

    # General
    "forbidden": "Access denied",
    "not_found": "The requested resource was not found.",
    "server_error": "Something went wrong on our end. Please try again later.",
    "database_error": "Database connection issue. Please try again later.",
    "validation_error": "Please check your input and try again.",
}


def get_error_message(error_key: str, default: str | None = None) -> str:
    """Get a user-friendly error message."""
    return ERROR_MESSAGES.get(error_key, default or ERROR_MESSAGES["server_error"])


def handle_database_error(error: Exception, operation: str = "") -> AppError:
    """Map a database exception onto the application error taxonomy."""
    logger.error(f"Database error during {operation}: {error}")

    error_str = str(error).lower()

    if "duplicate" in error_str or "unique" in error_str:
        return ConflictError("This record already exists. Please check your input.")

    if "foreign key" in error_str:
        return ValidationError("Invalid reference. The related record may have been deleted.")

    return DatabaseError(get_error_message("database_error"), details={"reason": str(error)})


def create_error_response(
    status_code: int,
    message: str,
    details: dict | None = None
) -> JSONResponse:
    """Create a standardized error response."""
    content = {
        "success": False,
        "message": message,
    }

    if details:
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content
    )
