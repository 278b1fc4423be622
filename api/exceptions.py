"""Exception handlers for the calendar layout FastAPI application.

This module converts domain exceptions into consistent JSON responses of the
form ``{"error", "detail", "type"}``.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from models.errors import InvalidTimeZoneError, MutationNotFoundError, UnsupportedDateValueError


logger = logging.getLogger(__name__)


async def invalid_time_zone_handler(request: Request, exc: InvalidTimeZoneError):
    """Handle InvalidTimeZoneError exceptions.

    An unknown display zone is a caller bug; the layout is never computed in
    a substitute zone.

    Args:
        request: The incoming request that triggered the error.
        exc: The InvalidTimeZoneError exception.

    Returns:
        JSONResponse with 400 status.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid Time Zone",
            "detail": str(exc),
            "type": "InvalidTimeZoneError",
            "time_zone": exc.time_zone,
        },
    )


async def unsupported_date_value_handler(request: Request, exc: UnsupportedDateValueError):
    """Handle UnsupportedDateValueError exceptions.

    Returns:
        JSONResponse with 422 status.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Unsupported Date Value",
            "detail": str(exc),
            "type": "UnsupportedDateValueError",
        },
    )


async def mutation_not_found_handler(request: Request, exc: MutationNotFoundError):
    """Handle MutationNotFoundError exceptions.

    Returns a 404 naming the mutation that is not pending.

    Args:
        request: The incoming request that triggered the error.
        exc: The MutationNotFoundError exception.

    Returns:
        JSONResponse with 404 status.
    """
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Mutation Not Found",
            "detail": str(exc),
            "type": "MutationNotFoundError",
            "mutation_id": exc.mutation_id,
        },
    )


async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors raised outside request parsing.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValidationError exception.

    Returns:
        JSONResponse with validation error details.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "detail": "The request data failed validation",
            "type": "ValidationError",
            "validation_errors": exc.errors(include_url=False, include_context=False),
        },
    )


async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions.

    ValueErrors typically indicate invalid input values that passed Pydantic
    validation but failed layout validation.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValueError exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid Value",
            "detail": str(exc),
            "type": "ValueError",
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions.

    Args:
        request: The incoming request that triggered the error.
        exc: The exception that was raised.

    Returns:
        JSONResponse with generic error message.
    """
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "type": type(exc).__name__,
        },
    )
