"""
Per-request deadline for blocking store calls.

boto3 is synchronous, so store calls run in the default thread executor while
the request task awaits them. The await is bounded by the request deadline
and abandoned as soon as the client disconnects. Abandoning sets the
``cancelled`` event handed to the worker, which then sends no further
DynamoDB call; a call already on the wire is bounded by the gateway's
botocore timeouts, which equal the request deadline.
"""

import asyncio
import functools
import logging
import threading
from typing import Any, Callable, TypeVar

from starlette.requests import Request

from ..exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.1


async def wait_for_disconnect(request: Request, poll_seconds: float = DISCONNECT_POLL_SECONDS) -> None:
    """Return once the client has gone away."""
    while not await request.is_disconnected():
        await asyncio.sleep(poll_seconds)


async def run_with_deadline(
    request: Request,
    func: Callable[..., T],
    *args: Any,
    timeout: float,
    **kwargs: Any
) -> T:
    """Run a blocking call in a worker thread under the request's deadline.

    func receives an extra ``cancelled`` keyword argument, a threading.Event
    that is set when the call is abandoned. func must stop issuing store
    calls once it is set.

    Args:
        request: Incoming request; its disconnect cancels the call
        func: Blocking callable (e.g. ItemsReadApi.resolve)
        *args: Positional arguments for func
        timeout: Deadline in seconds
        **kwargs: Keyword arguments for func

    Returns:
        Whatever func returns

    Raises:
        StoreUnavailable: If the deadline expires or the client disconnects;
            exceptions raised by func propagate unchanged
    """
    loop = asyncio.get_running_loop()
    cancelled = threading.Event()
    call = loop.run_in_executor(None, functools.partial(func, *args, cancelled=cancelled, **kwargs))
    watcher = asyncio.ensure_future(wait_for_disconnect(request))

    try:
        done, _ = await asyncio.wait(
            {call, watcher},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        watcher.cancel()
        if not call.done():
            cancelled.set()
            call.cancel()

    if call in done:
        return call.result()

    name = getattr(func, '__qualname__', repr(func))
    if watcher in done:
        logger.info(f"Client disconnected from {request.url.path}; abandoned {name}")
        raise StoreUnavailable(f"{name} cancelled: client disconnected", operation=name)

    raise StoreUnavailable(f"{name} exceeded the {timeout:g}s request deadline", operation=name)
