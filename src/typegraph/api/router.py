"""
FastAPI router for typegraph.

Endpoints (relative to the configured graph path, default /graph):
- GET    {path}?graph=<json>  - Resolve a call tree passed in the query string
- POST   {path}               - Resolve a call tree passed as the request body
- other  {path}               - 405 with "Allow: GET, POST"
- GET    {path}/__spec        - JSON description of the spec registry
- GET    {path}/ui            - Static explorer page (when settings.ui is on)

Request examples:

    GET /graph?graph=["viewer","id"]
    GET /graph?graph=%255B%2522viewer%2522%252C%2522id%2522%255D   (double-encoded)

    POST /graph
    ["viewer", {"token": "abc"}, "id", ["friends", "name"]]

Responses are the result envelope with status 200:

    {"data": {"viewer": {"id": "123"}}}
    {"data": {...}, "errors": [["friends", "upstream unavailable"]]}
    {"errors": [["processingError", "The query name \"nope\" is not allowed."]]}

Adapter failures (bad JSON, missing parameter) return 500 with {"error": ...}.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from ..config import Settings
from ..core.registry import SpecRegistry
from ..core.request_parser import decode_graph
from ..playground import get_explorer_html, is_bundled
from ..runtime.executor import GraphExecutor

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST")

# Methods answered with 405 on the graph path
REJECTED_METHODS = ["PUT", "PATCH", "DELETE", "OPTIONS", "HEAD", "TRACE", "CONNECT"]


class GraphRequestError(Exception):
    """Raised when the transport payload cannot be turned into a call tree."""
    pass


def method_not_allowed() -> JSONResponse:
    return JSONResponse(
        status_code=405,
        content={"error": "The graph endpoint only supports GET and POST requests"},
        headers={"Allow": ", ".join(ALLOWED_METHODS)},
    )


def decode_body(body: bytes) -> Any:
    """
    Decode a POST body into a raw call tree.

    A body holding a JSON string (an encoded tree sent as text) is decoded
    once more.
    """
    if not body or not body.strip():
        raise GraphRequestError("Request body must contain a call tree")
    graph = decode_graph(body)
    if isinstance(graph, str):
        graph = decode_graph(graph)
    return graph


def create_graph_router(registry: SpecRegistry, settings: Optional[Settings] = None) -> APIRouter:
    """
    Create a configured graph API router.

    Args:
        registry: Spec registry to resolve against
        settings: Server settings (path, ui, request_timeout)

    Returns:
        Configured FastAPI router
    """
    settings = settings or Settings()
    executor = GraphExecutor(registry, timeout=settings.request_timeout)
    router = APIRouter()

    async def respond(raw: Any, request: Request) -> JSONResponse:
        try:
            envelope = await executor.execute(raw, request)
            # Rendering raises on values JSON cannot carry (NaN, datetime)
            return JSONResponse(status_code=200, content=envelope.to_dict())
        except Exception as e:
            logger.exception("Graph request failed")
            return JSONResponse(status_code=500, content={"error": str(e) or e.__class__.__name__})

    @router.get(settings.path)
    async def graph_get(
        request: Request,
        graph: Optional[str] = Query(None, description="JSON-encoded call tree"),
    ) -> JSONResponse:
        """Resolve a call tree passed in the query string."""
        try:
            if graph is None:
                raise GraphRequestError('Missing "graph" query parameter')
            raw = decode_graph(graph)
        except (GraphRequestError, ValueError) as e:
            logger.info(f"Rejected GET graph request: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})
        return await respond(raw, request)

    @router.post(settings.path)
    async def graph_post(request: Request) -> JSONResponse:
        """Resolve a call tree passed as the request body."""
        try:
            raw = decode_body(await request.body())
        except (GraphRequestError, ValueError) as e:
            logger.info(f"Rejected POST graph request: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})
        return await respond(raw, request)

    @router.api_route(settings.path, methods=REJECTED_METHODS, include_in_schema=False)
    async def graph_other() -> JSONResponse:
        return method_not_allowed()

    @router.get(settings.sub_path("__spec"))
    async def graph_spec() -> dict[str, Any]:
        """
        Return the registry description.

        Used by the explorer to list queries, types and argument contracts.
        """
        return registry.describe()

    if settings.ui and not is_bundled():
        logger.warning(f"Explorer page is not bundled, {settings.sub_path('ui')} is disabled")
    elif settings.ui:
        @router.get(settings.sub_path("ui"), response_class=HTMLResponse, include_in_schema=False)
        async def graph_ui() -> str:
            """Static explorer page."""
            return get_explorer_html(
                graph_url=settings.path,
                spec_url=settings.sub_path("__spec"),
            )

    return router
