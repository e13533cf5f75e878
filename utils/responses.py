"""
Response envelope helpers.

Every API response uses the same body shape:
    success: {"success": true, "message": ..., "data": {...}}
    failure: {"success": false, "status": <code>, "message": ...}
"""

from typing import Any, Dict, Optional

from rest_framework import status as http_status
from rest_framework.response import Response


def success_response(data: Optional[Dict[str, Any]] = None, message: str = "Success", status: int = 200) -> Response:
    return Response({"success": True, "message": message, "data": data or {}}, status=status)


def error_response(message: str, status: int = 400, errors: Optional[list] = None) -> Response:
    body: Dict[str, Any] = {"success": False, "status": status, "message": message}
    if errors:
        body["errors"] = errors
    return Response(body, status=status)


def validation_error_response(serializer_errors) -> Response:
    """Flatten serializer errors into the [{field, message}] list."""
    return error_response(
        "Validation failed",
        status=http_status.HTTP_400_BAD_REQUEST,
        errors=flatten_errors(serializer_errors),
    )


def flatten_errors(errors, prefix: str = "") -> list:
    flat = []
    if isinstance(errors, dict):
        for field, value in errors.items():
            name = f"{prefix}.{field}" if prefix else str(field)
            flat.extend(flatten_errors(value, name))
    elif isinstance(errors, list):
        for item in errors:
            if isinstance(item, (dict, list)):
                flat.extend(flatten_errors(item, prefix))
            else:
                flat.append({"field": prefix or "non_field_errors", "message": str(item)})
    else:
        flat.append({"field": prefix or "non_field_errors", "message": str(errors)})
    return flat


def result_error_response(result, status: int) -> Response:
    """Render a failed ServiceResult. Server errors never leak their detail."""
    message = result.error_detail if status < 500 else "Something went wrong."
    return error_response(message, status=status)
