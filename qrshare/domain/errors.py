"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions carry user-facing messaging for API responses.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    UNSUPPORTED_TYPE = "unsupported_type"
    FILE_TOO_LARGE = "file_too_large"
    INVALID_REQUEST = "invalid_request"
    IMAGE_NOT_FOUND = "image_not_found"
    FORBIDDEN = "forbidden"
    STORE_UNAVAILABLE = "store_unavailable"
    INVALID_SIGNATURE = "invalid_signature"
    LINK_EXPIRED = "link_expired"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.UNSUPPORTED_TYPE: {
        "title": "Unsupported File Type",
        "message": "Only JPEG, PNG, GIF and WebP images can be uploaded.",
        "action": "Convert the file to a supported image format and try again.",
    },
    ErrorCategory.FILE_TOO_LARGE: {
        "title": "File Too Large",
        "message": "The image exceeds the maximum allowed upload size.",
        "action": "Resize or compress the image and try again.",
    },
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.IMAGE_NOT_FOUND: {
        "title": "Image Not Found",
        "message": "The image you're looking for doesn't exist or has been deleted.",
        "action": "Ask the owner of the QR code for a new link.",
    },
    ErrorCategory.FORBIDDEN: {
        "title": "Not Allowed",
        "message": "Only the owner of this image can perform that action.",
        "action": "Sign in with the account that uploaded the image.",
    },
    ErrorCategory.STORE_UNAVAILABLE: {
        "title": "Storage Unavailable",
        "message": "The image storage service could not be reached.",
        "action": "Please try again in a moment.",
    },
    ErrorCategory.INVALID_SIGNATURE: {
        "title": "Invalid Link",
        "message": "This image link is not valid.",
        "action": "Open the short link or scan the QR code again.",
    },
    ErrorCategory.LINK_EXPIRED: {
        "title": "Link Expired",
        "message": "This image link has expired. Access links are short-lived.",
        "action": "Open the short link or scan the QR code again to get a fresh link.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class ValidationReason(Enum):
    """Reason codes carried by ValidationError."""

    UNSUPPORTED_TYPE = "UnsupportedType"
    TOO_LARGE = "TooLarge"
    INVALID_REQUEST = "InvalidRequest"


class ValidationError(DomainError):
    """
    Raised when an upload is rejected before any store I/O.

    Never retried; the reason code is surfaced verbatim to the caller.
    """

    def __init__(self, reason: ValidationReason, message: Optional[str] = None):
        super().__init__(message or reason.value)
        self.reason = reason


class StoreUnavailableError(DomainError):
    """Raised when the object store or the record store is unreachable or erroring."""
    pass


class ImageNotFoundError(DomainError):
    """
    Raised when an id has no live record.

    Ids that never existed and ids that were deleted are indistinguishable.
    """

    def __init__(self, image_id: str):
        super().__init__(f"Image not found: {image_id}")
        self.image_id = image_id


class ForbiddenError(DomainError):
    """Raised when a requester attempts an owner-only action on another owner's image."""

    def __init__(self, image_id: str, requester_id: str):
        super().__init__(f"Requester {requester_id} does not own image {image_id}")
        self.image_id = image_id
        self.requester_id = requester_id


class DuplicateViolationError(DomainError):
    """Raised by the record store when a generated id collides with an existing one."""
    pass


class BlobNotFoundError(DomainError):
    """Raised by an object store when no blob exists at the requested path."""

    def __init__(self, storage_path: str):
        super().__init__(f"Blob not found: {storage_path}")
        self.storage_path = storage_path


class InvalidSignatureError(DomainError):
    """Raised when a signed blob URL carries a signature that does not verify."""
    pass


class SignatureExpiredError(DomainError):
    """Raised when a signed blob URL is dereferenced after its expiry."""
    pass


# ============================================================================
# Error Responses
# ============================================================================

# HTTP status for each category; validation categories follow the reason code
CATEGORY_STATUS: Dict[ErrorCategory, int] = {
    ErrorCategory.UNSUPPORTED_TYPE: 415,
    ErrorCategory.FILE_TOO_LARGE: 413,
    ErrorCategory.INVALID_REQUEST: 400,
    ErrorCategory.IMAGE_NOT_FOUND: 404,
    ErrorCategory.FORBIDDEN: 403,
    ErrorCategory.INVALID_SIGNATURE: 403,
    ErrorCategory.LINK_EXPIRED: 410,
    ErrorCategory.STORE_UNAVAILABLE: 503,
    ErrorCategory.SYSTEM_ERROR: 500,
}

_VALIDATION_CATEGORIES: Dict[ValidationReason, ErrorCategory] = {
    ValidationReason.UNSUPPORTED_TYPE: ErrorCategory.UNSUPPORTED_TYPE,
    ValidationReason.TOO_LARGE: ErrorCategory.FILE_TOO_LARGE,
    ValidationReason.INVALID_REQUEST: ErrorCategory.INVALID_REQUEST,
}

# Checked in order; the first matching class wins
_DOMAIN_CATEGORIES = (
    ((ImageNotFoundError, BlobNotFoundError), ErrorCategory.IMAGE_NOT_FOUND),
    (ForbiddenError, ErrorCategory.FORBIDDEN),
    (InvalidSignatureError, ErrorCategory.INVALID_SIGNATURE),
    (SignatureExpiredError, ErrorCategory.LINK_EXPIRED),
    ((StoreUnavailableError, DuplicateViolationError), ErrorCategory.STORE_UNAVAILABLE),
)


class ApplicationError(Exception):
    """
    User-facing error carrying a category, its HTTP status and friendly copy.

    The technical message is kept for logs and never rendered into the
    response body.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        copy = ERROR_MESSAGES.get(category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR])
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}
        self.status_code = status_code or CATEGORY_STATUS.get(category, 500)
        self.title = copy["title"]
        self.message = copy["message"]
        self.action = copy["action"]
        super().__init__(self.message)

    @classmethod
    def from_domain_error(cls, error: DomainError) -> 'ApplicationError':
        category, _ = categorize_domain_error(error)
        return cls(category, str(error))

    def to_dict(self) -> Dict[str, Any]:
        """Response body: error code, title, message, action and optional details."""
        body = {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }
        if self.context:
            body["details"] = self.context
        return body


def categorize_domain_error(error: DomainError) -> tuple[ErrorCategory, int]:
    """
    Map a domain error to its error category and HTTP status code.

    Anything unrecognized is a SYSTEM_ERROR (500).
    """
    if isinstance(error, ValidationError):
        category = _VALIDATION_CATEGORIES[error.reason]
    else:
        category = next(
            (cat for types, cat in _DOMAIN_CATEGORIES if isinstance(error, types)),
            ErrorCategory.SYSTEM_ERROR,
        )
    return category, CATEGORY_STATUS[category]


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: Optional[int] = None,
) -> tuple[Dict[str, Any], int]:
    """
    Build an (error_body, status_code) pair for a flask-restx resource.

    Args:
        category: Error category
        technical_message: Details for logs only
        context: Extra fields rendered under 'details'
        status_code: HTTP status; defaults to the category's status

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context, status_code)
    return error.to_dict(), error.status_code
