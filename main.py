"""Main entry point for the calendar layout FastAPI application.

This module creates and configures the FastAPI app instance that exposes the
layout engine (month, week and day layout, overflow) and the optimistic event
store over HTTP.

To run the development server:
    uvicorn main:app --reload

To run in production:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError

from api.dependencies import initialize_state, shutdown_state
from api.exceptions import (
    generic_exception_handler,
    invalid_time_zone_handler,
    mutation_not_found_handler,
    unsupported_date_value_handler,
    validation_exception_handler,
    value_error_handler,
)
from api.routes import events as events_routes
from api.routes import layout as layout_routes
from models.errors import InvalidTimeZoneError, MutationNotFoundError, UnsupportedDateValueError


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events.

    Creates the shared event store and layout cache at startup and drops
    them at shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    logger.info("Starting calendar layout service")
    initialize_state()

    yield

    logger.info("Shutting down calendar layout service")
    shutdown_state()


app = FastAPI(
    title="Calendar Layout Engine",
    description="Month, week and day event layout with optimistic mutations",
    version="0.1.0",
    lifespan=lifespan,
)

# Register exception handlers
# Order matters: specific exceptions before general ones
app.add_exception_handler(InvalidTimeZoneError, invalid_time_zone_handler)
app.add_exception_handler(UnsupportedDateValueError, unsupported_date_value_handler)
app.add_exception_handler(MutationNotFoundError, mutation_not_found_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(ValueError, value_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(layout_routes.router)
app.include_router(events_routes.router)


@app.get("/")
async def root():
    """Root endpoint - returns a welcome message.

    Returns:
        A dictionary with a welcome message.
    """
    return {
        "message": "Welcome to the Calendar Layout Engine API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring.

    Returns:
        A dictionary indicating the service is healthy.
    """
    return {"status": "healthy"}
