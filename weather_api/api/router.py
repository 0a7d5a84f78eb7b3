"""
Route table.

Handlers are plain async functions `(request, upstream) -> (status, body)`
so they can be exercised without a running server. `build_router` adapts
each one into a FastAPI GET endpoint that pulls the upstream client from
`app.state`.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from weather_api.api.routes.health import health
from weather_api.api.routes.root import root_info
from weather_api.api.routes.weather import all_cities_weather
from weather_api.core.clients import ForecastUpstream

HandlerResult = tuple[int, dict[str, Any]]
Handler = Callable[[Request, ForecastUpstream], Awaitable[HandlerResult]]

ROUTES: Mapping[str, Handler] = {
    "/": root_info,
    "/api/health": health,
    "/api/weather/all": all_cities_weather,
}


def _as_endpoint(handler: Handler) -> Callable[[Request], Awaitable[JSONResponse]]:
    async def endpoint(request: Request) -> JSONResponse:
        status_code, body = await handler(request, request.app.state.upstream)
        return JSONResponse(status_code=status_code, content=body)

    # FastAPI reads the signature, so copy only name and doc
    endpoint.__name__ = handler.__name__
    endpoint.__doc__ = handler.__doc__
    return endpoint


def build_router(routes: Mapping[str, Handler] = ROUTES) -> APIRouter:
    """Register every route of the table as a GET endpoint."""
    router = APIRouter()
    for path, handler in routes.items():
        router.add_api_route(
            path,
            _as_endpoint(handler),
            methods=["GET"],
            name=handler.__name__,
            response_class=JSONResponse,
        )
    return router
