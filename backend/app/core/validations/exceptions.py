from fastapi import status

from app.response import CustomHTTPException


class RequestValidationError(CustomHTTPException):
    """Field level errors found by service checks, keyed by field name."""

    def __init__(self, message="Invalid Request", **errors):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            error_code="VALIDATION_ERROR",
            errors=errors,
        )
