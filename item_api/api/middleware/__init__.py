from .cors import CORS_HEADERS, CorsMiddleware
from .error_shaping import INTERNAL_ERROR_DETAIL, SafeErrorMiddleware

__all__ = [
    "CORS_HEADERS",
    "CorsMiddleware",
    "INTERNAL_ERROR_DETAIL",
    "SafeErrorMiddleware",
]
