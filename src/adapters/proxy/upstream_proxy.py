from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.adapters.settings import TransitRuntimeConfig

logger = logging.getLogger(__name__)

_BODYLESS_METHODS = {"GET", "HEAD"}


@dataclass(frozen=True, slots=True)
class ProxiedResponse:
    status_code: int
    content_type: str | None
    is_json: bool
    json_body: Any = None
    text_body: str = ""


@dataclass(slots=True)
class UpstreamProxy:
    """Stateless pass-through to the transit API.

    Only the method, query string, JSON body and Authorization header are
    forwarded; cookies, host and every other local header stay local. No
    retries: a failed call raises and the caller decides what to show.
    """

    base_url: str | None = None
    timeout_s: float | None = None
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.base_url is None or self.timeout_s is None:
            cfg = TransitRuntimeConfig.from_env()
            if self.base_url is None:
                self.base_url = cfg.transit_api_base_url
            if self.timeout_s is None:
                self.timeout_s = cfg.transit_api_timeout_s

    def upstream_url(self, path: str, query: str) -> str:
        url = f"{(self.base_url or '').rstrip('/')}/{path.lstrip('/')}"
        return f"{url}?{query}" if query else url

    async def forward(
        self,
        *,
        method: str,
        path: str,
        query: str,
        body: bytes | None,
        authorization: str | None,
    ) -> ProxiedResponse:
        method = method.upper()
        url = self.upstream_url(path, query)

        headers = {"Content-Type": "application/json"}
        if authorization:
            headers["Authorization"] = authorization

        content: bytes | None = None
        if method not in _BODYLESS_METHODS and body:
            # Re-serialize so only well-formed JSON leaves this process.
            content = json.dumps(json.loads(body)).encode("utf-8")

        async with httpx.AsyncClient(
            timeout=self.timeout_s, transport=self.transport
        ) as client:
            resp = await client.request(method, url, headers=headers, content=content)

        content_type = resp.headers.get("content-type")
        if content_type and "application/json" in content_type:
            return ProxiedResponse(
                status_code=resp.status_code,
                content_type=content_type,
                is_json=True,
                json_body=resp.json(),
            )

        return ProxiedResponse(
            status_code=resp.status_code,
            content_type=content_type,
            is_json=False,
            text_body=resp.text,
        )
