import json
from typing import Any

from starlette.responses import Response

from ..exceptions import EncodingError


def json_response(payload: Any, status_code: int = 200) -> Response:
    """Serialize payload to a JSON response.

    Serialization happens before any header is sent, so a failure can still
    be answered with a clean 500.

    Raises:
        EncodingError: If payload is not JSON-serializable
    """
    try:
        body = json.dumps(payload, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Failed to encode response body: {e}", original_error=e) from e
    return Response(content=body, status_code=status_code, media_type="application/json")
