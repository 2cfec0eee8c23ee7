"""
Errors raised by the services.

Each carries a machine readable ``code`` and the HTTP status the API layer
renders it with. None of them is fatal: callers surface the message and move on.
"""

# Standard library imports
from typing import Any


class ComplaintServiceError(Exception):
    code = "error"
    status_code = 400

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidTransitionError(ComplaintServiceError):
    code = "invalid_transition"
    status_code = 409


class ForbiddenError(ComplaintServiceError):
    code = "forbidden"
    status_code = 403


class AlreadyUpvotedError(ComplaintServiceError):
    code = "already_upvoted"
    status_code = 409


class NotFoundError(ComplaintServiceError):
    code = "not_found"
    status_code = 404


class ValidationError(ComplaintServiceError):
    code = "bad_request"
    status_code = 400


class ConcurrentUpdateError(ComplaintServiceError):
    code = "conflict"
    status_code = 409


class AlreadyExistsError(ComplaintServiceError):
    code = "already_exists"
    status_code = 409
