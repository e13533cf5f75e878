"""
Centralized API exception formatting.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Every exception raised from
an API view ends up here and is rendered with the error envelope. Storage
specific errors (uniqueness, malformed identifiers, model validation) are
translated into client errors instead of leaking engine messages.
"""

import logging
import traceback

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from utils.exceptions import APIError
from utils.logging_utils import request_log_payload
from utils.responses import error_response, flatten_errors

logger = logging.getLogger(__name__)


def _token_error_message(exc) -> str:
    if "expired" in str(getattr(exc, "detail", exc)).lower():
        return "Your token has expired. Please log in again."
    return "Invalid token. Please log in again."


def envelope_exception_handler(exc, context):
    """Translate an exception into {success:false, status, message[, errors][, stack]}."""
    request = context.get("request") if context else None

    if isinstance(exc, APIError):
        return error_response(exc.message, status=exc.status_code)

    if isinstance(exc, exceptions.ValidationError):
        return error_response("Validation failed", status=status.HTTP_400_BAD_REQUEST, errors=flatten_errors(exc.detail))

    if isinstance(exc, (InvalidToken, TokenError)):
        return error_response(_token_error_message(exc), status=status.HTTP_401_UNAUTHORIZED)

    if isinstance(exc, exceptions.NotAuthenticated):
        return error_response("Not authorized, please log in", status=status.HTTP_401_UNAUTHORIZED)

    if isinstance(exc, (exceptions.PermissionDenied, DjangoPermissionDenied)):
        message = str(getattr(exc, "detail", "")) or str(exc) or "Not authorized"
        return error_response(message, status=status.HTTP_403_FORBIDDEN)

    if isinstance(exc, (Http404, exceptions.NotFound, ObjectDoesNotExist)):
        return error_response("Resource not found", status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, DjangoValidationError):
        messages = exc.messages if hasattr(exc, "messages") else [str(exc)]
        if any("uuid" in m.lower() for m in messages):
            return error_response("Invalid id format", status=status.HTTP_400_BAD_REQUEST)
        return error_response(". ".join(messages), status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, IntegrityError):
        logger.info(f"Integrity error translated to 400: {exc}")
        return error_response("Duplicate value entered", status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, exceptions.APIException):
        detail = exc.detail
        message = detail if isinstance(detail, str) else str(detail)
        return error_response(message, status=exc.status_code)

    logger.error(
        "Unhandled API exception on %s %s payload=%s",
        getattr(request, "method", "?"),
        getattr(request, "path", "?"),
        request_log_payload(getattr(request, "data", {})) if request is not None else {},
        exc_info=exc,
    )

    response = error_response("Something went wrong.", status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    if settings.DEBUG:
        response.data["message"] = str(exc) or "Something went wrong."
        response.data["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return response
