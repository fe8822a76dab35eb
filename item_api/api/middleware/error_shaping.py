import logging
import traceback
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from ...exceptions import INTERNAL_ERROR_DETAIL

log = logging.getLogger("item_api.errors")


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    - Never return stack traces or store errors to clients
    - Log traceback server-side
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            log.error(
                "Unhandled error: %s path=%s\n%s",
                str(e),
                request.url.path,
                traceback.format_exc(),
            )
            return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_DETAIL})
