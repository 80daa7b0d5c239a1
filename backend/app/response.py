from fastapi import HTTPException, status
from fastapi.responses import ORJSONResponse


class ErrorResponse:
    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        track_id: str | None = None,
        errors: dict | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.track_id = track_id
        self.errors = errors

    def to_dict(self):
        return {
            "message": self.message,
            "errors": self.errors,
            "error_code": self.error_code,
            "track_id": self.track_id,
        }

    def get_response(self, status):
        return ORJSONResponse(
            content=self.to_dict(),
            status_code=status,
        )

    def __str__(self):
        return self.message

    def __repr__(self):
        return self.message


class CustomHTTPException(HTTPException, ErrorResponse):

    def __init__(
        self,
        status_code,
        message,
        error_code=None,
        track_id=None,
        errors=None,
        *args,
        **kwargs
    ):
        ErrorResponse.__init__(self, message, error_code, track_id, errors)
        super().__init__(status_code=status_code, detail=message, *args, **kwargs)


class UnauthorizedError(CustomHTTPException):
    def __init__(self, message="Unauthorized: Please sign in", **kwargs):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=message,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"},
            **kwargs
        )


class ProfileNotFoundError(CustomHTTPException):
    def __init__(self, message="Volunteer profile not found"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=message,
            error_code="PROFILE_NOT_FOUND",
        )


class ForbiddenError(CustomHTTPException):
    def __init__(self, message="Not Authorized"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=message,
            error_code="INSUFFICIENT_PERMISSIONS",
        )


class NotFoundError(CustomHTTPException):
    def __init__(self, message="Not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=message,
            error_code="NOT_FOUND",
        )


class ConflictError(CustomHTTPException):
    def __init__(self, message, errors=None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            message=message,
            error_code="CONFLICT",
            errors=errors,
        )


class InvalidTransitionError(CustomHTTPException):
    def __init__(self, message):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            message=message,
            error_code="INVALID_TRANSITION",
        )


class DataUnavailableError(CustomHTTPException):
    def __init__(self, message="Data unavailable, please try again later"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            message=message,
            error_code="DATA_UNAVAILABLE",
        )
