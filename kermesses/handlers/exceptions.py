"""Maps exceptions to the JSON error envelope.

Every error response has the shape ``{"error": {"code": ..., "message": ...}}``.
Internal failures are logged and answered with a generic message.
"""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from kermesses.domain.errors import DomainError, ErrorCode, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_MESSAGE = "Internal server error"


def error_response(code: str, message: str, status_code: int, **extra) -> Response:
    body = {"code": code, "message": message}
    body.update(extra)
    return Response({"error": body}, status=status_code)


def api_exception_handler(exc, context):
    """``REST_FRAMEWORK["EXCEPTION_HANDLER"]``."""
    view = context.get("view")
    view_name = type(view).__name__ if view is not None else "unknown"

    if isinstance(exc, DomainError):
        if exc.kind is ErrorKind.INTERNAL:
            logger.error("%s failed: %s", view_name, exc, exc_info=exc)
        return error_response(exc.code.value, exc.message, STATUS_BY_KIND[exc.kind])

    if isinstance(exc, exceptions.ValidationError):
        return error_response(
            ErrorCode.INVALID_INPUT.value,
            "Invalid input",
            status.HTTP_400_BAD_REQUEST,
            fields=exc.detail,
        )

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        response = error_response(
            ErrorCode.UNAUTHENTICATED.value,
            str(exc.detail),
            status.HTTP_401_UNAUTHORIZED,
        )
        response["WWW-Authenticate"] = "Bearer"
        return response

    if isinstance(exc, exceptions.PermissionDenied):
        return error_response(
            ErrorCode.FORBIDDEN.value, str(exc.detail), status.HTTP_403_FORBIDDEN
        )

    response = drf_exception_handler(exc, context)
    if response is not None:
        code = getattr(exc, "default_code", "error")
        return error_response(
            str(code).upper(), str(getattr(exc, "detail", exc)), response.status_code
        )

    logger.exception("Unhandled exception in %s", view_name)
    return error_response(
        "INTERNAL", INTERNAL_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
