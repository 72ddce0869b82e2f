# regmirror/api/routes/registry.py
"""
Registry endpoints.

GET /registry              index.json entries with links to their details
GET /registry/{item_name}  full item document with its version history
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from regmirror.api.dependencies import base_url, get_store
from regmirror.api.models.schemas import ErrorResponse
from regmirror.exceptions import PriorStateReadError
from regmirror.logging.logger import get_logger
from regmirror.logging.tags import API
from regmirror.mirror.store import MirrorStore, is_valid_component_name

logger = get_logger(__name__)

router = APIRouter(prefix="/registry", tags=["Registry"])

ITEM_NOT_FOUND = "Item not found"
INDEX_UNAVAILABLE = "Registry index unavailable"



@router.get(
    "",
    description="Get a list of registry items with links to their details",
    responses={503: {"model": ErrorResponse, "description": "Index unreadable"}},
)
async def list_items(
    request: Request,
    store: MirrorStore = Depends(get_store),
) -> Any:
    if not store.exists():
        return []

    try:
        index = store.read_index_document()
    except PriorStateReadError as e:
        logger.warning(f"{API} {e}")
        return JSONResponse({"error": INDEX_UNAVAILABLE}, status_code=503)

    base = base_url(request)
    return [
        {
            **entry,
            "_links": {"self": {"href": f"{base}/registry/{entry.get('name')}"}},
        }
        for entry in index
        if isinstance(entry, dict)
    ]


@router.get(
    "/{item_name}",
    description="Get detailed information of a specific registry item",
    responses={404: {"model": ErrorResponse, "description": "Item not found"}},
)
async def get_item(
    item_name: str,
    request: Request,
    store: MirrorStore = Depends(get_store),
) -> Any:
    if not is_valid_component_name(item_name):
        return JSONResponse({"error": ITEM_NOT_FOUND}, status_code=404)

    try:
        item = store.read_item_document(item_name)
    except PriorStateReadError as e:
        logger.debug(f"{API} {e}")
        return JSONResponse({"error": ITEM_NOT_FOUND}, status_code=404)

    base = base_url(request)
    return {
        **item,
        "_links": {
            "index": {"href": f"{base}/registry"},
            "self": {"href": f"{base}/registry/{item.get('name', item_name)}"},
        },
    }
