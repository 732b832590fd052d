"""API error translation.

Every error leaving the API uses the same envelope::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}

Domain errors raised by the service layer are mapped by *kind*
(NotFound, InvalidArgument, Unavailable, InvalidState) to an HTTP status.
DRF's own errors (validation, parsing, 404s) are reshaped into the same
envelope.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.domain.exceptions import (
    DomainError,
    InvalidArgument,
    InvalidState,
    NotFound,
    Unavailable,
)

logger = structlog.get_logger(__name__)

DOMAIN_STATUS_CODES = {
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidArgument: status.HTTP_400_BAD_REQUEST,
    Unavailable: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidState: status.HTTP_409_CONFLICT,
}


def status_code_for(exc: DomainError) -> int:
    """Return the HTTP status code for a domain error kind."""
    for kind, code in DOMAIN_STATUS_CODES.items():
        if isinstance(exc, kind):
            return code
    return status.HTTP_400_BAD_REQUEST


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    if isinstance(exc, DomainError):
        status_code = status_code_for(exc)
        logger.warning(
            "api.domain_error",
            error=type(exc).__name__,
            code=exc.code,
            identifier=None if exc.identifier is None else str(exc.identifier),
            status_code=status_code,
        )
        error = {"code": exc.code, "detail": exc.message, "attr": None}
        return Response(
            {"type": "client_error", "errors": [error]},
            status=status_code,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    response.data = {
        "type": "client_error" if response.status_code < 500 else "server_error",
        "errors": _flatten_errors(response.data),
    }
    return response


def _flatten_errors(data: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        if "detail" in data and len(data) == 1:
            return _flatten_errors(data["detail"], attr)
        errors: List[Dict[str, Any]] = []
        for key, value in data.items():
            nested = key if attr is None else f"{attr}.{key}"
            errors.extend(_flatten_errors(value, nested))
        return errors
    if isinstance(data, list):
        errors = []
        for index, item in enumerate(data):
            if isinstance(item, (dict, list)):
                nested = str(index) if attr is None else f"{attr}.{index}"
                errors.extend(_flatten_errors(item, nested))
            else:
                errors.extend(_flatten_errors(item, attr))
        return errors
    return [
        {
            "code": getattr(data, "code", "error"),
            "detail": str(data),
            "attr": attr,
        }
    ]
