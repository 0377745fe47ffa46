# api/middleware/error_handling.py

import logging
import time
import traceback
import uuid
from datetime import datetime
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from upload_analytics.core.exceptions import AnalyticsError

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware for the upload analytics API
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """
        Process request and handle any errors that occur
        """
        start_time = time.time()
        request_id = self._generate_request_id()

        request.state.request_id = request_id

        try:
            self._log_request(request, request_id)

            response = await call_next(request)

            processing_time = time.time() - start_time
            self._log_response(response, processing_time, request_id)
            response.headers["X-Request-ID"] = request_id

            return response

        except AnalyticsError as e:
            return analytics_error_response(e, request_id, str(request.url.path))

        except Exception as e:
            return await self._handle_unexpected_error(e, request, request_id, start_time)

    def _generate_request_id(self) -> str:
        return str(uuid.uuid4())[:8]

    def _log_request(self, request: Request, request_id: str) -> None:
        logger.info(
            f"📥 {request_id} {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

    def _log_response(self, response, processing_time: float, request_id: str) -> None:
        logger.info(
            f"📤 {request_id} {response.status_code} "
            f"processed in {processing_time:.3f}s"
        )

    async def _handle_unexpected_error(self, exc: Exception, request: Request,
                                       request_id: str, start_time: float) -> JSONResponse:
        """
        Handle unexpected errors with detailed logging and user-friendly response
        """
        processing_time = time.time() - start_time

        error_category = self._categorize_error(exc)
        user_message = self._get_user_friendly_message(error_category)

        error_response = {
            "success": False,
            "error": {
                "type": "internal_error",
                "category": error_category,
                "message": user_message,
                "request_id": request_id,
                "timestamp": datetime.now().isoformat(),
                "path": str(request.url.path)
            }
        }

        if self.debug:
            error_response["error"]["debug_info"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc(),
                "processing_time": round(processing_time, 3),
                "method": request.method,
                "query_params": str(request.query_params)
            }

        logger.error(
            f"💥 {request_id} Unexpected error in {processing_time:.3f}s:\n"
            f"Type: {type(exc).__name__}\n"
            f"Message: {str(exc)}\n"
            f"Path: {request.url.path}\n"
            f"Method: {request.method}\n"
            f"Traceback:\n{traceback.format_exc()}"
        )

        return JSONResponse(
            status_code=self._get_status_code_for_error(error_category),
            content=error_response
        )

    def _categorize_error(self, exc: Exception) -> str:
        """
        Categorize error types for better handling
        """
        exc_type = type(exc).__name__.lower()

        if any(keyword in exc_type for keyword in ['unicode', 'decode', 'parser', 'csv', 'excel']):
            return "parsing_error"

        if any(keyword in exc_type for keyword in ['validation', 'value', 'type']):
            return "validation_error"

        if any(keyword in exc_type for keyword in ['memory', 'resource', 'timeout']):
            return "resource_error"

        return "unknown_error"

    def _get_user_friendly_message(self, category: str) -> str:
        messages = {
            "parsing_error": "The uploaded data could not be read. Please check the file format.",
            "validation_error": "There was an issue with your request format. Please check your input and try again.",
            "resource_error": "The server is temporarily overloaded. Please try again in a few moments.",
            "unknown_error": "An unexpected error occurred. Please try again."
        }
        return messages.get(category, messages["unknown_error"])

    def _get_status_code_for_error(self, category: str) -> int:
        status_codes = {
            "parsing_error": 400,
            "validation_error": 400,
            "resource_error": 503,
            "unknown_error": 500
        }
        return status_codes.get(category, 500)


def analytics_error_response(exc: AnalyticsError, request_id: Optional[str] = None,
                             path: Optional[str] = None) -> JSONResponse:
    """
    JSON error body for a domain error, using the status code the error carries
    """
    error = exc.to_dict()
    error["code"] = exc.status_code
    error["timestamp"] = datetime.now().isoformat()
    if request_id:
        error["request_id"] = request_id
    if path:
        error["path"] = path

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"❌ {request_id or 'unknown'} {exc.category} ({exc.status_code}): {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": error}
    )


class CustomExceptionHandler:
    """
    Custom exception handlers for specific error types
    """

    @staticmethod
    async def analytics_exception_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
        request_id = getattr(request.state, 'request_id', None)
        return analytics_error_response(exc, request_id, str(request.url.path))

    @staticmethod
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """
        Handle HTTP exceptions with consistent formatting
        """
        request_id = getattr(request.state, 'request_id', 'unknown')

        logger.warning(
            f"❌ {request_id} HTTP {exc.status_code}: {exc.detail} "
            f"at {request.url.path}"
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": {
                    "type": "http_error",
                    "code": exc.status_code,
                    "message": exc.detail,
                    "request_id": request_id,
                    "timestamp": datetime.now().isoformat(),
                    "path": str(request.url.path)
                }
            },
            headers=getattr(exc, "headers", None)
        )

    @staticmethod
    async def validation_exception_handler(request: Request, exc) -> JSONResponse:
        """
        Handle Pydantic validation errors
        """
        request_id = getattr(request.state, 'request_id', 'unknown')

        error_details = []
        if hasattr(exc, 'errors'):
            for error in exc.errors():
                error_details.append({
                    "field": ".".join(str(x) for x in error.get("loc", [])),
                    "message": error.get("msg", "Validation error"),
                    "type": error.get("type", "unknown")
                })

        logger.warning(f"🔍 {request_id} Validation error: {error_details}")

        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": {
                    "type": "validation_error",
                    "message": "Request validation failed",
                    "details": error_details,
                    "request_id": request_id,
                    "timestamp": datetime.now().isoformat()
                }
            }
        )


def setup_error_handlers(app):
    """
    Setup all error handlers for the FastAPI application
    """
    from fastapi.exceptions import RequestValidationError

    app.add_exception_handler(
        AnalyticsError,
        CustomExceptionHandler.analytics_exception_handler
    )

    app.add_exception_handler(
        HTTPException,
        CustomExceptionHandler.http_exception_handler
    )

    app.add_exception_handler(
        RequestValidationError,
        CustomExceptionHandler.validation_exception_handler
    )

    logger.info("✅ Error handlers configured successfully")
