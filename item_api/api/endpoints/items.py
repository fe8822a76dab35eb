"""
Item read endpoints.

GET /items?itemIds=a,b,c   -> {"itemIds": [...], "items": [...]}
GET /items/{item_id}       -> single normalized record, 404 if absent
GET /all_items             -> every item (first result page only)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from starlette.responses import Response

from ...config import ItemApiConfig
from ...exceptions import ItemNotFoundError
from ...handlers import ItemsReadApi
from ...models import ItemsQuery, ItemsView
from ..deadline import run_with_deadline
from ..dependencies import get_config, get_read_api
from ..responses import json_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["items"])


@router.get("/items")
async def get_items(
    request: Request,
    item_ids: Optional[str] = Query(None, alias="itemIds", description="Comma-separated item identifiers"),
    config: ItemApiConfig = Depends(get_config),
    read_api: ItemsReadApi = Depends(get_read_api),
) -> Response:
    query = ItemsQuery.from_query_param(item_ids, config.partition_key)
    logger.debug(f"Resolving item ids {query.item_ids}")

    records = await run_with_deadline(
        request,
        read_api.resolve,
        query.item_ids,
        query.partition_key,
        timeout=config.request_timeout_seconds,
    )

    view = ItemsView(item_ids=query.item_ids, items=records)
    return json_response(view.model_dump(by_alias=True))


@router.get("/items/{item_id}")
async def get_item(
    request: Request,
    item_id: str,
    config: ItemApiConfig = Depends(get_config),
    read_api: ItemsReadApi = Depends(get_read_api),
) -> Response:
    record = await run_with_deadline(
        request,
        read_api.get_by_id,
        item_id,
        config.partition_key,
        timeout=config.request_timeout_seconds,
    )
    if record is None:
        raise ItemNotFoundError(read_api.gateway.table_name, {config.key_attribute: item_id})
    return json_response(record)


@router.get("/all_items")
async def get_all_items(
    request: Request,
    config: ItemApiConfig = Depends(get_config),
    read_api: ItemsReadApi = Depends(get_read_api),
) -> Response:
    records = await run_with_deadline(
        request,
        read_api.list_all,
        config.partition_key,
        timeout=config.request_timeout_seconds,
    )
    return json_response(records)
