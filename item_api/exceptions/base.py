from typing import Any, Dict, Optional

INTERNAL_ERROR_DETAIL = "Internal Server Error"


class ItemApiError(Exception):
    """Base exception for all item API errors.

    The message is written for operators and may name tables, keys or
    DynamoDB error codes. Only subclasses that set ``client_safe`` expose it
    to HTTP clients; every other error answers with INTERNAL_ERROR_DETAIL.

    Attributes:
        message: Human-readable error message
        original_error: The exception that caused this error (if any)
        context: Extra fields rendered into logs, never into responses
    """

    client_safe = False

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        super().__init__(message)

    @property
    def detail(self) -> str:
        """Text that may be returned in an HTTP response body."""
        return self.message if self.client_safe else INTERNAL_ERROR_DETAIL

    def __str__(self) -> str:
        if self.client_safe or not self.context:
            return self.message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} (Context: {context_str})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"
