import logging
from typing import Any, Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.validation.product_validator import format_validation_errors

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = (
    "API not found. Please check our documentation for more information at "
    "https://documenter.getpostman.com/view/40407315/2sAYQcGWgc"
)


class ApplicationError(Exception):
    def __init__(self, message: str, status_code: int = 500, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class ProductValidationError(ApplicationError):
    """Field-scoped failure, reported as ``{field: [messages]}``."""

    def __init__(self, errors: dict[str, list[str]], message: str = "Validation failed"):
        super().__init__(message, 400)
        self.errors = errors


class DuplicateProductError(ProductValidationError):
    def __init__(self, field: str, value: Any):
        super().__init__({field: [f'Product with {field} "{value}" already exists']})
        self.field = field
        self.value = value


def error_envelope(message: str, status_code: int, details: Optional[Any] = None) -> dict:
    return {
        "success": False,
        "error": {
            "message": message,
            "details": details,
            "statusCode": status_code,
        },
    }


def validation_envelope(message: str, errors: dict[str, list[str]]) -> dict:
    return {"success": False, "message": message, "errors": errors}


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    if isinstance(exc, ProductValidationError):
        return JSONResponse(status_code=exc.status_code, content=validation_envelope(exc.message, exc.errors))
    if exc.status_code >= 500:
        logger.error(f"Error: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.message, exc.status_code, exc.details),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=validation_envelope("Validation failed", format_validation_errors(exc.errors())),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"success": False, "message": NOT_FOUND_MESSAGE})
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail), exc.status_code),
        headers=getattr(exc, "headers", None),
    )


def _track(request: Request, exc: Exception) -> None:
    tracker = getattr(request.app.state, "error_tracker", None)
    if tracker is not None:
        tracker.track(exc, method=request.method, path=request.url.path)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error on [{request.method}] {request.url.path}")
    _track(request, exc)
    return JSONResponse(status_code=500, content=error_envelope("Database operation failed", 500))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on [{request.method}] {request.url.path}")
    _track(request, exc)
    return JSONResponse(status_code=500, content=error_envelope("Internal server error", 500))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
