"""Store Routes — the 8 proxied GET operations.

Invariants:
    - Parameters = path identifier merged with every query parameter (query wins on clash)
    - Each route: normalize -> dispatch (one store call) -> emit
    - No route inspects failure messages; classification lives in core/

Design Decisions:
    - Path parameter names mirror the store's parameter names (id, collection, devId)
      so the merged mapping is passed through without renaming
"""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from appstore_gateway.api.emit_response import emit_response
from appstore_gateway.core.domain_types import OperationKind
from appstore_gateway.core.normalize_params import normalize_params
from appstore_gateway.services.operation_dispatch import OperationDispatch

router = APIRouter(tags=["store"])


async def _proxy(
    request: Request, kind: OperationKind, path_params: dict[str, Any],
) -> JSONResponse:
    raw = {**path_params, **request.query_params}
    params = normalize_params(kind, raw)
    dispatch: OperationDispatch = request.app.state.dispatch
    outcome = await dispatch.execute(kind, params)
    return emit_response(kind, outcome)


@router.get("/app/{id}")
async def get_app(request: Request, id: str):
    """App details. Optional: ratings, country, lang."""
    return await _proxy(request, OperationKind.APP, {"id": id})


@router.get("/list/{collection}")
async def get_list(request: Request, collection: str):
    """Top chart. Optional: category, num, country."""
    return await _proxy(request, OperationKind.LIST, {"collection": collection})


@router.get("/search")
async def search(request: Request):
    """Search apps. Required: term. Optional: num, page, country."""
    return await _proxy(request, OperationKind.SEARCH, {})


@router.get("/developer/{devId}")
async def get_developer(request: Request, devId: str):
    """Apps by developer. Optional: country."""
    return await _proxy(request, OperationKind.DEVELOPER, {"devId": devId})


@router.get("/reviews/{id}")
async def get_reviews(request: Request, id: str):
    """User reviews. Optional: page, sort, country."""
    return await _proxy(request, OperationKind.REVIEWS, {"id": id})


@router.get("/similar/{id}")
async def get_similar(request: Request, id: str):
    return await _proxy(request, OperationKind.SIMILAR, {"id": id})


@router.get("/privacy/{id}")
async def get_privacy(request: Request, id: str):
    return await _proxy(request, OperationKind.PRIVACY, {"id": id})


@router.get("/version-history/{id}")
async def get_version_history(request: Request, id: str):
    return await _proxy(request, OperationKind.VERSION_HISTORY, {"id": id})
