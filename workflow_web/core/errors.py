"""Service errors: raised by services, translated to HTTP responses by routes."""
from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors that carry an HTTP status."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class BadRequestError(ServiceError):
    status_code = 400
    code = "BAD_REQUEST"


class NotPermittedError(ServiceError):
    status_code = 403
    code = "NOT_PERMITTED"

    def __init__(self, message: str = "Not permitted", code: str | None = None):
        super().__init__(message, code)


class NotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(ServiceError):
    status_code = 409
    code = "CONFLICT"


class InternalServerError(ServiceError):
    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
