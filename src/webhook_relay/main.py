"""
Module: main.py
Description: FastAPI application entry point for the webhook relay.

Initializes the FastAPI application with the subscription management
and notification routes, and maps relay errors onto HTTP responses.
"""

from fastapi import FastAPI, Request
from fastapi import status as status_codes
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException

from webhook_relay.config.settings import settings
from webhook_relay.exceptions import RelayError
from webhook_relay.handlers.notifications import router as notifications_router
from webhook_relay.handlers.subscriptions import resource_router
from webhook_relay.handlers.subscriptions import router as subscriptions_router
from webhook_relay.models.response import ErrorDetail, ErrorResponse
from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Relays signed storage event notifications to subscribed webhooks",
    version=settings.app_version,
    docs_url=None,
    redoc_url=None
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    logger.debug("Health check requested")

    return {
        "status": "ok",
        "version": settings.app_version,
        "environment": settings.stage
    }


# Order matters: the notification route accepts POST on any path
app.include_router(subscriptions_router)
app.include_router(resource_router)
app.include_router(notifications_router)


def _error_response(status_code: int, message: str, error_type: str, headers=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=status_code, message=message, type=error_type))
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


@app.exception_handler(RelayError)
async def relay_exception_handler(request: Request, exc: RelayError):
    """
    Map registry errors onto HTTP responses.

    NotFoundError -> 404, MethodNotAllowedError -> 405, ValidationError -> 400.
    """
    logger.info(
        "Request rejected",
        status_code=exc.status_code,
        error=exc.message,
        path=request.url.path,
        method=request.method
    )
    return _error_response(exc.status_code, exc.message, exc.error_type)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 rather than FastAPI's 422."""
    logger.info(
        "Request validation failed",
        errors=str(exc.errors()),
        path=request.url.path,
        method=request.method
    )
    return _error_response(
        status_codes.HTTP_400_BAD_REQUEST,
        "Invalid request body",
        "validation_error"
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Global HTTP exception handler.

    Covers signature rejections as well as routing 404/405 responses.
    """
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )
    return _error_response(
        exc.status_code,
        str(exc.detail),
        "http_exception",
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    Logs unexpected exceptions and returns generic error responses.
    """
    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method
    )
    return _error_response(
        status_codes.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "internal_error"
    )


@app.on_event("startup")
async def startup_event():
    """Application startup event handler."""
    logger.info(
        "Starting webhook relay",
        version=settings.app_version,
        stage=settings.stage,
        region=settings.aws_region,
        table_name=settings.subscriptions_table_name,
        max_failure_count=settings.max_failure_count
    )
    if not settings.signing_secret:
        logger.error("SIGNING_SECRET is not set; every request will be rejected")


# Lambda handler
handler = Mangum(app, lifespan="off")
