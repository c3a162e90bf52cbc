"""
Error taxonomy shared by the order, payment and cash session services.

Services raise these instead of returning error tuples. They are DRF
APIExceptions, so request handlers let them propagate and
pos_exception_handler renders a consistent error body:

    {"success": false, "error": "...", "code": "...", "details": {...}}
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class POSServiceError(APIException):
    """Base class for errors raised by the settlement core."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "pos_error"

    def __init__(self, message=None, details=None):
        super().__init__(detail=message or self.default_detail, code=self.default_code)
        self.message = str(self.detail)
        self.details = details or {}

    def __str__(self):
        return self.message


class ValidationError(POSServiceError):
    """Malformed or out-of-range input. No state is mutated."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class NotFoundError(POSServiceError):
    """Order, item or session is absent or belongs to another tenant."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(POSServiceError):
    """The operation is not allowed in the current state."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation not allowed in the current state."
    default_code = "conflict"


class ConcurrencyError(POSServiceError):
    """A transaction could not be serialized after the allowed retries."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The request conflicted with a concurrent update. Please try again."
    default_code = "concurrency_error"


def pos_exception_handler(exc, context):
    """
    Render settlement-core and DRF errors with the project's error envelope.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    view_name = context["view"].__class__.__name__ if context.get("view") else "unknown"

    if isinstance(exc, POSServiceError):
        body = {"success": False, "error": exc.message, "code": exc.default_code}
        if exc.details:
            body["details"] = exc.details
        response.data = body
        if isinstance(exc, ConcurrencyError):
            logger.error(f"{view_name}: {exc.message}")
        else:
            logger.warning(f"{view_name}: {exc.__class__.__name__}: {exc.message}")
    elif isinstance(exc, DRFValidationError):
        response.data = {
            "success": False,
            "error": "Invalid input",
            "code": "validation_error",
            "details": response.data,
        }
    else:
        detail = response.data.get("detail") if isinstance(response.data, dict) else response.data
        response.data = {
            "success": False,
            "error": str(detail),
            "code": getattr(detail, "code", "error"),
        }

    return response
