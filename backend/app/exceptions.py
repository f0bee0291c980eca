"""
DogAdopt Backend — Custom Exception Hierarchy
===============================================

What:  Defines application-specific exceptions for every failure the API reports.
How:   Each exception class is bound to exactly one `ErrorKind`, and each kind
       to exactly one HTTP status. The kind is decided where the error is
       raised; the global handler in main.py only reads it.
Who:   Raised by domain rules, services, repositories and middleware.

Exception Hierarchy:
    DogAdoptError (base)          → 500 server_error
    ├── ValidationError           → 400 validation_error
    ├── AuthenticationError       → 401 unauthenticated (+ AuthFailure code)
    ├── ForbiddenError            → 403 forbidden
    ├── NotFoundError             → 404 not_found
    ├── ConflictError             → 409 conflict
    ├── RateLimitExceededError    → 429 rate_limited
    └── DatabaseError             → 500 server_error
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Closed set of failure categories, each mapped to one HTTP status."""

    VALIDATION = "validation_error"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    SERVER = "server_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.SERVER: 500,
}


class AuthFailure(str, Enum):
    """
    Why an authentication attempt was rejected.

    Expired and invalid tokens carry distinct codes so a client can tell
    "log in again" apart from "this token was tampered with".
    """

    INVALID_CREDENTIALS = "invalid_credentials"
    TOKEN_MISSING = "token_missing"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    USER_NOT_FOUND = "user_not_found"


_AUTH_MESSAGES = {
    AuthFailure.INVALID_CREDENTIALS: "Invalid credentials",
    AuthFailure.TOKEN_MISSING: "Access denied. No token provided.",
    AuthFailure.TOKEN_INVALID: "Invalid token.",
    AuthFailure.TOKEN_EXPIRED: "Token expired.",
    AuthFailure.USER_NOT_FOUND: "Token invalid. User not found.",
}


class DogAdoptError(Exception):
    """
    Base exception for all DogAdopt application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    kind: ErrorKind = ErrorKind.SERVER

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def code(self) -> str:
        """Machine-readable code placed in the response `error` field."""
        return self.kind.value


class ValidationError(DogAdoptError):
    """
    Raised when client input fails validation.

    When:    Missing username/password, empty or over-long dog fields,
             malformed dog IDs, unknown status filters.
    HTTP:    400 Bad Request
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors or ([{"field": field, "message": message}] if field else [])


class AuthenticationError(DogAdoptError):
    """
    Raised for bad credentials and for missing, invalid or expired tokens.

    HTTP:    401 Unauthorized
    The `failure` code is rendered as the response `error` field.
    """

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(
        self,
        failure: AuthFailure = AuthFailure.INVALID_CREDENTIALS,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message or _AUTH_MESSAGES[failure], context=context)
        self.failure = failure

    @property
    def code(self) -> str:
        return self.failure.value


class ForbiddenError(DogAdoptError):
    """
    Raised when an authenticated caller may not perform a transition.

    When:    Adopting your own dog, removing someone else's dog,
             removing a dog that has already been adopted.
    HTTP:    403 Forbidden
    """

    kind = ErrorKind.FORBIDDEN

    def __init__(
        self,
        message: str = "You do not have permission to perform this action.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(DogAdoptError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; the service layer converts
    that None into this exception.
    HTTP:    404 Not Found
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(DogAdoptError):
    """
    Raised when the request collides with existing state.

    When:    Username already taken; dog already adopted (including the
             loser of two simultaneous adoption attempts).
    HTTP:    409 Conflict
    """

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str = "The resource is in a conflicting state",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(DogAdoptError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header.
    """

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            "Too many requests from this IP, please try again later. "
            f"Retry in {retry_after} seconds."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class DatabaseError(DogAdoptError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. Detailed error
    info (statement, constraint name) is logged server-side only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
