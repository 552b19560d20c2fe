# market_core/workflows/errors.py
"""
Error taxonomy for the application workflow.

Every error is an APIException so DRF maps it to an HTTP status. The
exception handler below adds a stable `code` to the response body, which is
how callers tell the kinds apart.
"""

from __future__ import annotations

from typing import Optional

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler


class WorkflowError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Workflow request failed."
    default_code = "workflow_error"

    def __init__(self, detail=None, code=None, *, field: Optional[str] = None):
        super().__init__(detail=detail, code=code)
        self.field = field


class ValidationError(WorkflowError):
    default_detail = "Invalid input."
    default_code = "validation_error"


class InvalidDecision(ValidationError):
    default_detail = "Valid decision is required."
    default_code = "invalid_decision"


class NotFoundError(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ReferentNotFound(NotFoundError):
    default_detail = "Referenced record not found."
    default_code = "referent_not_found"


class AuthorizationError(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized."
    default_code = "not_authorized"


class InvalidStateTransition(WorkflowError):
    default_detail = "Action is not allowed in the current status."
    default_code = "invalid_state_transition"


class StaleStateError(WorkflowError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Application was modified concurrently. Re-fetch and retry."
    default_code = "stale_state"


def workflow_exception_handler(exc, context):
    """
    DRF exception handler. Workflow errors render as
    {"detail": ..., "code": ..., "field": ...}; everything else is unchanged.
    """
    response = exception_handler(exc, context)
    if response is None or not isinstance(exc, WorkflowError):
        return response

    payload = {
        "detail": str(exc.detail),
        "code": exc.default_code,
    }
    if exc.field:
        payload["field"] = exc.field
    response.data = payload
    return response


__all__ = [
    "WorkflowError",
    "ValidationError",
    "InvalidDecision",
    "NotFoundError",
    "ReferentNotFound",
    "AuthorizationError",
    "InvalidStateTransition",
    "StaleStateError",
    "workflow_exception_handler",
]
