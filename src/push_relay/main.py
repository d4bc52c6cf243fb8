"""
Module: main.py
Description: FastAPI application entry point for the Push Relay API.

Initializes the FastAPI application with the messages router and
error handlers, and exposes it to Lambda through Mangum.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from mangum import Mangum

from push_relay.config.settings import settings
from push_relay.handlers.messages import router as messages_router
from push_relay.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Queues push notifications as trigger documents for relay to FCM",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.include_router(messages_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    logger.info("Health check requested")

    return {
        "status": "ok",
        "message": "Push Relay is healthy",
        "version": settings.app_version,
        "stage": settings.stage
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Global HTTP exception handler.

    Logs HTTP exceptions and returns structured error responses.
    """
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.status_code,
                "message": exc.detail,
                "type": "http_exception"
            }
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return request validation failures as 400 errors."""
    logger.warning(
        "Request validation failed",
        errors=len(exc.errors()),
        path=request.url.path,
        method=request.method
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": 400,
                "message": "Request validation failed",
                "type": "validation_error",
                "details": [
                    {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
                    for err in exc.errors()
                ]
            }
        }
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

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": 500,
                "message": "Internal server error",
                "type": "internal_error"
            }
        }
    )


# Lambda handler
handler = Mangum(app, lifespan="off")
