"""
Query surface: ``GET /?c=<tag>``.

    gsd    stakepool snapshot, shuffled
    vsp    vsp snapshot, shuffled
    gcs    coin supply
    price  DCR price
    dc     download count
    dic    downloads badge (SVG)
    cc     clear the aggregate cache (loopback callers only)

Any other tag answers 404 with an empty body.
"""

import random
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request
from fastapi.responses import Response

from dcrwebapi.dependency_container import ServiceContext
from dcrwebapi.observability import get_api_logger
from dcrwebapi.shared.models.enums import ProviderFamily
from dcrwebapi_server.responses import error_response, json_response, svg_response

router = APIRouter()

LOOPBACK_ADDRESSES = frozenset({"127.0.0.1", "::1"})

Handler = Callable[[ServiceContext, Request], Awaitable[Response]]


async def _snapshot(context: ServiceContext, family: ProviderFamily) -> Response:
    records = await context.store.snapshot_all(family)
    items = list(records.items())
    # Clients tend to pick the first entry; spread the load.
    random.shuffle(items)
    return json_response(
        {name: record.model_dump(by_alias=True) for name, record in items}
    )


async def stakepool_data(context: ServiceContext, request: Request) -> Response:
    return await _snapshot(context, ProviderFamily.STAKEPOOL)


async def vsp_data(context: ServiceContext, request: Request) -> Response:
    return await _snapshot(context, ProviderFamily.VSP)


async def coin_supply(context: ServiceContext, request: Request) -> Response:
    supply = await context.aggregates.coin_supply()
    return json_response(supply.model_dump(by_alias=True))


async def price(context: ServiceContext, request: Request) -> Response:
    info = await context.aggregates.price()
    return json_response(info.model_dump(by_alias=True))


async def download_count(context: ServiceContext, request: Request) -> Response:
    count = await context.aggregates.download_count()
    return json_response(count.as_response())


async def downloads_badge(context: ServiceContext, request: Request) -> Response:
    return svg_response(await context.aggregates.downloads_badge())


async def clear_cache(context: ServiceContext, request: Request) -> Response:
    host = request.client.host if request.client else None
    if host not in LOOPBACK_ADDRESSES:
        get_api_logger("routes").warning("cache_clear_rejected", remote=host)
        return json_response({"response": "unauthorized"}, status_code=400)

    await context.aggregates.clear_cache()
    return json_response({"response": "cache cleared"})


ROUTES: dict[str, Handler] = {
    "gsd": stakepool_data,
    "vsp": vsp_data,
    "gcs": coin_supply,
    "price": price,
    "dc": download_count,
    "dic": downloads_badge,
    "cc": clear_cache,
}


@router.get("/")
async def handle_routes(request: Request) -> Response:
    """Dispatch on the ``c`` query parameter (first value wins)."""
    values = request.query_params.getlist("c")
    tag = values[0] if values else ""

    handler = ROUTES.get(tag)
    if handler is None:
        return Response(status_code=404)

    context: ServiceContext = request.app.state.context
    try:
        return await handler(context, request)
    except Exception as e:
        get_api_logger("routes").error(
            "request_failed", tag=tag, error=str(e), error_type=type(e).__name__
        )
        return error_response(e)
