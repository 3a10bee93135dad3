"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from zycle.application.dto.responses import ErrorResponse
from zycle.config import get_logger
from zycle.core.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    DuplicateInvoiceNumberError,
    NotFoundError,
    PreconditionFailedError,
    StorageError,
    UniqueConstraintError,
    ValidationError,
    ZycleError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes. First isinstance match wins, so
# subclasses come before their bases.
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DocumentNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateInvoiceNumberError: status.HTTP_409_CONFLICT,
    UniqueConstraintError: status.HTTP_409_CONFLICT,
    PreconditionFailedError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "EMPTY_INVOICE": "Add at least one line item before saving the invoice.",
    "INVALID_LINE_ITEM": "Every line needs a weight and unit price greater than zero.",
    "INSUFFICIENT_STOCK": "Reduce the weight or check GET /api/inventory for stock on hand.",
    "INITIAL_INVENTORY_NOT_ALLOWED": "Initial inventory can only be loaded while all stock is zero.",
    "INVALID_LOAN_PAYMENT": "Check the loan ID and GET /api/loans/{id} for the outstanding balance.",
    "TENANT_REQUIRED": "Send the tenant ID in the tenant header.",
    "MATERIAL_NOT_FOUND": "Check the material ID and try GET /api/materials to list materials.",
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /api/invoices/{type} to list invoices.",
    "LOAN_NOT_FOUND": "Check the loan ID and try GET /api/loans to list loans.",
    "DOCUMENT_NOT_FOUND": "A referenced record was removed. Reload and retry.",
    "DUPLICATE_INVOICE_NUMBER": "Another invoice took this number. Submit the invoice again.",
    "PRECONDITION_FAILED": "The data changed since it was read. Reload and retry.",
    "BATCH_COMMIT_FAILED": "Nothing was saved. Check server logs and retry.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current state. Reload and retry.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _status_for(exc)
    error_code = exc.code if isinstance(exc, ZycleError) else exc.__class__.__name__
    request_id = getattr(request.state, "request_id", None)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        status=status_code,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    detail = None
    if isinstance(exc, ZycleError) and exc.details:
        detail = "; ".join(f"{k}={v}" for k, v in exc.details.items() if v is not None)

    message = exc.message if isinstance(exc, ZycleError) else str(exc)
    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        detail=detail or None,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches anything the exception handlers did not and converts it to a
    standardized JSON error response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(ZycleError)
    async def domain_exception_handler(request: Request, exc: ZycleError) -> JSONResponse:
        """Handle domain and storage errors."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code, exc.detail or "")

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int, detail: str) -> str:
    """Infer a machine-readable error code from HTTPException detail."""
    detail_lower = detail.lower()

    if status_code == 404:
        for kind in ("invoice", "material", "loan"):
            if kind in detail_lower:
                return f"{kind.upper()}_NOT_FOUND"
        return "NOT_FOUND"

    if status_code == 400:
        return "BAD_REQUEST"

    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"

    return "HTTP_ERROR"
