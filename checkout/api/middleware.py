"""
Request errors and their mapping to JSON responses.
"""
import logging

from django.http import JsonResponse

from checkout.domain.errors import CheckoutError

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Request-level error carrying an error code and optional field errors."""
    def __init__(self, message: str, code: str = "VALIDATION_ERROR", errors: dict | None = None):
        self.message = message
        self.code = code
        self.errors = errors or {}
        super().__init__(self.message)


class ErrorHandler:
    """Error handler for API responses."""

    ERROR_CODES = {
        "VALIDATION_ERROR": 422,
        "UNAUTHENTICATED": 401,
        "FORBIDDEN": 403,
        "NOT_FOUND": 404,
        "INVALID_JSON": 400,
        "CHECKOUT_FAILED": 422,
        "INTERNAL_ERROR": 500,
    }

    @classmethod
    def handle_error(cls, error: Exception) -> JsonResponse:
        """Handle error and return JSON response."""
        if isinstance(error, ValidationError):
            status_code = cls.ERROR_CODES.get(error.code, 400)
            payload = {"message": error.message}
            if error.errors:
                payload["errors"] = error.errors
            return JsonResponse(payload, status=status_code)

        if isinstance(error, CheckoutError):
            return JsonResponse(
                {
                    "message": "Failed to create order",
                    "error": error.reason,
                },
                status=cls.ERROR_CODES["CHECKOUT_FAILED"],
            )

        logger.error(
            "unexpected_error",
            extra={
                "error": f"{type(error).__name__}: {error}",
            },
            exc_info=True,
        )

        return JsonResponse(
            {"message": "An internal error occurred"},
            status=cls.ERROR_CODES["INTERNAL_ERROR"],
        )
