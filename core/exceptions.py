# core/exceptions.py
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.http import Http404
from django.utils import timezone
import logging
import uuid

from core.logging_utils import err_tag

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error format
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    # Generate unique error ID for tracking
    error_id = str(uuid.uuid4())[:8]

    request = context.get("request")
    path = getattr(request, "path", "unknown")
    method = getattr(request, "method", "unknown")

    if response is not None:
        # Standard DRF exceptions
        response.data = _error_body(
            code=get_error_code(exc),
            message=get_error_message(response.data),
            details=format_error_details(response.data),
            error_id=error_id,
        )
        logger.warning(
            f"API Error [{error_id}]: {exc.__class__.__name__} - "
            f"{method} {path} - Status: {response.status_code}"
        )
        return response

    if isinstance(exc, APIError):
        # Business rule failures raised by views
        response = Response(
            _error_body(exc.code, exc.message, exc.details, error_id),
            status=exc.status_code,
        )
        logger.warning(
            f"API Error [{error_id}]: {exc.code} - {method} {path}",
            extra={"err": err_tag(exc), "action": "api_error"},
        )
        return response

    if isinstance(exc, Http404):
        response = Response(
            _error_body(
                "RESOURCE_NOT_FOUND",
                "The requested resource was not found.",
                None,
                error_id,
            ),
            status=status.HTTP_404_NOT_FOUND,
        )
    elif isinstance(exc, ValidationError):
        response = Response(
            _error_body(
                "VALIDATION_ERROR",
                "Validation failed.",
                exc.message_dict if hasattr(exc, "message_dict") else str(exc),
                error_id,
            ),
            status=status.HTTP_400_BAD_REQUEST,
        )
    else:
        # Generic server error
        response = Response(
            _error_body(
                "INTERNAL_SERVER_ERROR",
                "An internal server error occurred.",
                None,
                error_id,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # Log unhandled exceptions
    logger.error(
        f"Unhandled Exception [{error_id}]: {exc.__class__.__name__} - {method} {path}",
        extra={"err": err_tag(exc)},
        exc_info=True,
    )
    return response


def _error_body(code, message, details, error_id):
    return {
        "error": True,
        "code": code,
        "message": message,
        "details": details,
        "error_id": error_id,
        "timestamp": timezone.now().isoformat(),
    }


def get_error_code(exc):
    """
    Generate appropriate error code based on exception type
    """
    error_codes = {
        "ValidationError": "VALIDATION_ERROR",
        "NotFound": "RESOURCE_NOT_FOUND",
        "Http404": "RESOURCE_NOT_FOUND",
        "MethodNotAllowed": "METHOD_NOT_ALLOWED",
        "ParseError": "PARSE_ERROR",
        "UnsupportedMediaType": "UNSUPPORTED_MEDIA_TYPE",
    }

    exc_name = exc.__class__.__name__
    return error_codes.get(exc_name, "UNKNOWN_ERROR")


def get_error_message(data):
    """
    Extract human-readable error message from DRF error data
    """
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        elif "non_field_errors" in data:
            return (
                str(data["non_field_errors"][0])
                if data["non_field_errors"]
                else "Validation error"
            )
        else:
            # Get first error message from any field
            for key, value in data.items():
                if isinstance(value, list) and value:
                    return f"{key}: {_first_message(value[0])}"
                elif isinstance(value, dict) and value:
                    return f"{key}: {get_error_message(value)}"
                elif isinstance(value, str):
                    return value
            return "Validation error"
    elif isinstance(data, list) and data:
        return str(data[0])
    else:
        return str(data)


def _first_message(value):
    # Nested serializers report per-item dicts inside the list
    if isinstance(value, dict):
        return get_error_message(value)
    return str(value)


def format_error_details(data):
    """
    Format error details for consistent structure
    """
    if isinstance(data, dict):
        # Remove 'detail' from details since it's in message
        details = {k: v for k, v in data.items() if k != "detail"}
        return details if details else None
    elif isinstance(data, list):
        return data
    else:
        return None


class APIError(Exception):
    """
    Custom API exception class for business logic errors
    """

    def __init__(
        self, message, code=None, status_code=status.HTTP_400_BAD_REQUEST, details=None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "API_ERROR"
        self.status_code = status_code
        self.details = details


class PayrollConfigurationAPIError(APIError):
    """
    A worker's or physician's pay configuration cannot produce a pay figure
    """

    def __init__(self, message, field_name=None):
        super().__init__(
            message=message,
            code="PAYROLL_CONFIGURATION_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"field": field_name} if field_name else None,
        )
