"""
Custom Exception Handler for API
"""
from django.db.models import ProtectedError
from rest_framework.exceptions import ValidationError
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

from apps.core.exceptions import StorefrontException

logger = logging.getLogger(__name__)


def error_payload(message: str, status_code: int, code: str = None, details=None) -> dict:
    return {
        "success": False,
        "message": message,
        "code": code,
        "details": details or {},
        "status_code": status_code,
    }


def custom_exception_handler(exc, context):
    """
    Custom exception handler that provides consistent `success: false` responses.
    """
    if isinstance(exc, StorefrontException):
        return Response(
            error_payload(exc.message, exc.status_code, exc.code),
            status=exc.status_code
        )

    if isinstance(exc, ProtectedError):
        # A delete hit a PROTECT foreign key: dependents must be removed first
        blocking = sorted({obj._meta.db_table for obj in exc.protected_objects})
        logger.warning(f"Rejected delete, still referenced by: {blocking}")
        return Response(
            error_payload(
                "Cannot delete a record that is still referenced",
                status.HTTP_409_CONFLICT,
                "REFERENTIAL_INTEGRITY",
                {"referenced_by": blocking},
            ),
            status=status.HTTP_409_CONFLICT
        )

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        message = "Invalid request" if isinstance(exc, ValidationError) else str(exc)
        response.data = error_payload(
            message,
            response.status_code,
            getattr(exc, 'default_code', None),
            response.data if isinstance(response.data, dict) else {"detail": response.data},
        )
    else:
        # Handle unexpected exceptions
        logger.exception(f"Unhandled exception: {exc}")
        response = Response(
            error_payload(
                "An unexpected error occurred",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "SERVER_ERROR",
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return response
