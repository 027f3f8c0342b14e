from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from src.adapters.api.dependencies import get_upstream_proxy
from src.adapters.proxy.upstream_proxy import UpstreamProxy

logger = logging.getLogger(__name__)

PROXY_PREFIX = "/api/v1"

router = APIRouter(tags=["proxy"])


def _upstream_path(request: Request) -> str:
    # Prefer the raw (still percent-encoded) path so non-ASCII operator
    # names reach the upstream exactly as the client encoded them.
    raw = request.scope.get("raw_path")
    path = (
        raw.decode("latin-1").split("?", 1)[0]
        if raw
        else quote(request.url.path, safe="/")
    )
    return path[len(PROXY_PREFIX):] if path.startswith(PROXY_PREFIX) else path


@router.api_route(
    PROXY_PREFIX + "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def proxy_transit_api(
    path: str,
    request: Request,
    proxy: UpstreamProxy = Depends(get_upstream_proxy),
) -> Response:
    try:
        upstream = await proxy.forward(
            method=request.method,
            path=_upstream_path(request),
            query=request.url.query,
            body=await request.body(),
            authorization=request.headers.get("authorization"),
        )
    except Exception:
        logger.exception("Proxy error for %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Proxy error"})

    if upstream.is_json:
        return JSONResponse(status_code=upstream.status_code, content=upstream.json_body)

    return Response(
        content=upstream.text_body,
        status_code=upstream.status_code,
        media_type=upstream.content_type or "text/plain",
    )
