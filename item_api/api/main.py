"""
FastAPI application factory for the item read API.

The store client and configuration are built once per application and
shared read-only by every request through app.state.
"""

from typing import Optional

from fastapi import FastAPI

from .. import __version__
from ..config import ItemApiConfig
from ..handlers import ItemsReadApi
from .endpoints import health, items
from .errors import register_exception_handlers
from .middleware import CorsMiddleware, SafeErrorMiddleware


def create_app(config: Optional[ItemApiConfig] = None, read_api: Optional[ItemsReadApi] = None) -> FastAPI:
    """Build the application.

    Args:
        config: API configuration (read from the environment if omitted)
        read_api: Read API to serve from (built from config if omitted)

    Returns:
        Configured FastAPI application

    Raises:
        ConfigurationError: If config is omitted and the environment is incomplete
    """
    config = config or ItemApiConfig.from_env()
    read_api = read_api or ItemsReadApi(config)

    app = FastAPI(
        title="Item Read API",
        version=__version__,
    )
    app.state.config = config
    app.state.read_api = read_api

    # Starlette wraps in reverse order: CORS is outermost so error responses carry its headers
    app.add_middleware(SafeErrorMiddleware)
    app.add_middleware(CorsMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(items.router)
    return app
