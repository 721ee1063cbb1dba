"""Service layer — business logic orchestration.

Each exception carries the stable machine-readable ``error_type`` that the
API puts in ``{"error": {"message", "type"}}``.
"""


class ServiceError(Exception):
    """Base service exception."""

    error_type = "internal_error"


class NotFoundError(ServiceError):
    """Resource not found, or not visible to the caller (-> HTTP 404)."""

    error_type = "not_found"


class ValidationError(ServiceError):
    """Input validation error (-> HTTP 400)."""

    error_type = "validation_error"


class AuthenticationError(ServiceError):
    """Authentication failure (-> HTTP 401)."""

    error_type = "unauthorized"
