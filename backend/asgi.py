import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import HTMLResponse
from starlette import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError, StatementError

from app.api.router import api_router
from app.config import settings
from app.response import ErrorResponse, CustomHTTPException
from app.core.utils.discord import notify_error
from app.core.middlewares.process_time_middleware import ProcessingTimeMiddleware

for name in ("app", __name__):
    logging.getLogger(name).setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# unique constraint name (PostgreSQL) or table.column (SQLite) -> message shown to the client
INTEGRITY_MESSAGES = [
    (
        "uq_event_participation_event_volunteer",
        "event_participation.volunteer_id",
        "Already registered for this event",
    ),
    ("uq_volunteers_roll_number", "volunteers.roll_number", "Roll number already exists"),
    ("uq_volunteers_email", "volunteers.email", "Email already exists"),
    (
        "ix_volunteers_auth_user_id",
        "volunteers.auth_user_id",
        "Volunteer profile already exists",
    ),
    (
        "uq_event_categories_category_name",
        "event_categories.category_name",
        "Category name already exists",
    ),
    ("uq_event_categories_code", "event_categories.code", "Category code already exists"),
    (
        "uq_role_definitions_role_name",
        "role_definitions.role_name",
        "Role name already exists",
    ),
]

application = FastAPI(
    title="NSS Volunteer Hours API",
    version=settings.APP_VERSION,
    default_response_class=ORJSONResponse,
)

application.include_router(router=api_router)
application.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
application.add_middleware(ProcessingTimeMiddleware)


def integrity_message(exc: IntegrityError) -> str:
    detail = str(exc.orig).lower()
    for constraint, column, message in INTEGRITY_MESSAGES:
        if constraint in detail or ("unique" in detail and column in detail):
            return message
    return "Operation conflicts with existing data"


@application.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    track_id = str(uuid.uuid4())
    logger.error(
        "Unhandled error %s on %s %s",
        track_id,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    await notify_error(request, exc, track_id)
    return ErrorResponse(
        message="Internal Server Error",
        errors={"error": "An error occurred while processing the request"},
        track_id=track_id,
    ).get_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


@application.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
    return ErrorResponse(
        message=integrity_message(exc),
        error_code="CONFLICT",
    ).get_response(status.HTTP_409_CONFLICT)


@application.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    if isinstance(exc, StatementError) and isinstance(exc.orig, CustomHTTPException):
        return exc.orig.get_response(exc.orig.status_code)
    track_id = str(uuid.uuid4())
    logger.error("Database error %s on %s", track_id, request.url.path, exc_info=exc)
    return ErrorResponse(
        message="Operation failed",
        error_code="DATABASE_ERROR",
        track_id=track_id,
    ).get_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


@application.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    errors = {}

    for error in exc.errors():
        current = errors

        if len(error["loc"]) <= 1:
            current[error["loc"][0]] = error["msg"]
            continue

        keys = error["loc"][1:]
        for loc in keys[:-1]:
            current = current.setdefault(loc, {})
        current[keys[-1]] = error["msg"]

    return ErrorResponse(
        message="Invalid request",
        errors=errors,
        error_code="VALIDATION_ERROR",
    ).get_response(status.HTTP_422_UNPROCESSABLE_ENTITY)


@application.exception_handler(CustomHTTPException)
async def http_exception_handler(request: Request, exc: CustomHTTPException):
    response = exc.get_response(exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@application.head("/ping")
async def ping():
    return HTMLResponse(content=None, status_code=status.HTTP_204_NO_CONTENT)
