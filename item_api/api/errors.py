"""
Exception handlers mapping domain errors to HTTP responses.

The body always carries ``exc.detail``: the message itself for client-safe
errors (ValidationError), a generic text for everything else. Store and
encoding failures are logged with their cause.
"""

import logging

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from ..exceptions import EncodingError, ItemNotFoundError, StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": exc.detail})


async def item_not_found_handler(request: Request, exc: ItemNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": "Item not found"})


async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    cause = exc.original_error or exc
    logger.error(f"Store call failed for {request.method} {request.url.path}: {exc} (cause: {cause!r})")
    return JSONResponse(status_code=500, content={"detail": exc.detail})


async def encoding_error_handler(request: Request, exc: EncodingError) -> JSONResponse:
    logger.error(f"Response encoding failed for {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": exc.detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ItemNotFoundError, item_not_found_handler)
    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)
    app.add_exception_handler(EncodingError, encoding_error_handler)
