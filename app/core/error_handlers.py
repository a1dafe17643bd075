"""HTTP error handlers for FastAPI application.

This module provides the bridge between application exceptions and HTTP responses.
It maps domain-level exceptions to appropriate HTTP status codes and response formats.

Purpose:
    - Keep HTTP concerns separate from report and job logic
    - Provide consistent error response format across the API
    - Allow easy modification of HTTP responses without changing domain logic
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.exceptions import (
    AppException,
    ValidationError,
    StorageUnavailableError,
    ReportTimeoutError,
    ResetJobError,
)


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """
    Convert a ValidationError into an HTTP 422 Unprocessable Entity JSON response.

    Parameters:
        request (Request): The incoming HTTP request.
        exc (ValidationError): The rejected parameter; if `exc.field` is set, the response will include a `field` key naming it.

    Returns:
        JSONResponse: Response with status 422 and a JSON body containing a `detail` message and, when available, a `field` key.
    """
    content = {"detail": str(exc)}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, content=content
    )


async def storage_unavailable_handler(
    request: Request, exc: StorageUnavailableError
) -> JSONResponse:
    """
    Map a StorageUnavailableError to an HTTP 503 JSON response.

    The driver error stays in the logs; clients only learn that the data could not be loaded.
    """
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Statistics are temporarily unavailable"},
    )


async def report_timeout_handler(
    request: Request, exc: ReportTimeoutError
) -> JSONResponse:
    """
    Map a ReportTimeoutError to an HTTP 504 JSON response.

    Returns:
        JSONResponse: Response with status 504 and a `detail` field containing the exception message.
    """
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT, content={"detail": str(exc)}
    )


async def reset_job_error_handler(
    request: Request, exc: ResetJobError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Coupon usage reset failed"},
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle unhandled application-level exceptions and produce a standardized 500 Internal Server Error response.

    Parameters:
        request (Request): The incoming HTTP request.
        exc (AppException): The unhandled application-level exception.

    Returns:
        JSONResponse: HTTP 500 response with content {"detail": "An internal error occurred"}.
    """
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred"},
    )


def register_exception_handlers(app) -> None:
    """
    Register the application's domain-to-HTTP exception handlers on a FastAPI app.

    Registers handlers in order from most specific to most general so that subclassed
    exceptions are matched before their parent types. The following mappings are added:
    ValidationError -> 422 (includes optional `field`), StorageUnavailableError -> 503,
    ReportTimeoutError -> 504, ResetJobError -> 503, and AppException -> 500.

    Parameters:
        app: The FastAPI application instance to which the exception handlers will be attached.
    """
    app.add_exception_handler(ValidationError, validation_error_handler)

    # Storage and job failures
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_handler)
    app.add_exception_handler(ReportTimeoutError, report_timeout_handler)
    app.add_exception_handler(ResetJobError, reset_job_error_handler)

    # Catch-all for unhandled application exceptions
    app.add_exception_handler(AppException, app_exception_handler)
