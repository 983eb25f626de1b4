"""
core.domain.exception_handler — turns service-layer errors into HTTP
responses.

Registered as ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.  DRF's own
handler runs first (serializer ``ValidationError``, authentication
failures, throttling); anything it does not recognise is checked
against the domain hierarchy below.  Every domain error is rendered as
``{"detail": "<message>"}``.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.domain.exceptions import (
    Conflict,
    DomainError,
    NotFound,
    PermissionDenied,
    Unauthorized,
)

logger = logging.getLogger(__name__)

# Checked in order; ``InvalidTransition`` is caught by ``Conflict``.
DOMAIN_ERROR_STATUS: tuple[tuple[type[DomainError], int], ...] = (
    (Unauthorized, status.HTTP_401_UNAUTHORIZED),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (DomainError, status.HTTP_400_BAD_REQUEST),
)


def status_for(exc: DomainError) -> int:
    for exc_class, code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, exc_class):
            return code
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    response = drf_exception_handler(exc, context)
    if response is not None or not isinstance(exc, DomainError):
        return response

    code = status_for(exc)
    view = context.get("view")
    logger.warning(
        "%s rejected with %s (%s): %s",
        type(view).__name__ if view is not None else "request",
        code,
        type(exc).__name__,
        exc,
    )
    return Response({"detail": str(exc)}, status=code)
