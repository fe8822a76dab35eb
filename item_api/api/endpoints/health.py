from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_class=PlainTextResponse)
def health() -> PlainTextResponse:
    """Liveness probe; never touches DynamoDB."""
    return PlainTextResponse("ok")
