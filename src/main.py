from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from src.adapters.api.controllers.proxy import router as proxy_router
from src.adapters.api.controllers.schedule_import import router as schedule_import_router
from src.adapters.api.controllers.selection import router as selection_router
from src.adapters.api.controllers.views import router as views_router
from src.adapters.api.dependencies import create_operator_selection_store
from src.adapters.settings import TransitRuntimeConfig
from src.domain.exceptions import (
    SchemaViolation,
    UpstreamStatusError,
    UpstreamUnavailable,
)
from src.logging_config import configure_logging

configure_logging(TransitRuntimeConfig.from_env().log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if getattr(app.state, "operator_selection", None) is None:
        app.state.operator_selection = create_operator_selection_store()
    yield


app = FastAPI(title="Transit Admin", lifespan=lifespan)
app.include_router(views_router)
app.include_router(selection_router)
app.include_router(schedule_import_router)
app.include_router(proxy_router)


@app.exception_handler(UpstreamStatusError)
async def upstream_status_handler(request: Request, exc: UpstreamStatusError) -> Response:
    """Surface upstream rejections (e.g. report validation) verbatim."""

    if isinstance(exc.body, (dict, list)):
        return JSONResponse(status_code=exc.status_code, content=exc.body)
    return PlainTextResponse(status_code=exc.status_code, content=str(exc.body or ""))


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(
    request: Request, exc: UpstreamUnavailable
) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": "Transit API unavailable"})


@app.exception_handler(SchemaViolation)
async def schema_violation_handler(request: Request, exc: SchemaViolation) -> JSONResponse:
    logging.getLogger("uvicorn.error").warning(
        "Upstream schema violation: %s", exc, extra={"path": str(request.url.path)}
    )
    return JSONResponse(
        status_code=502, content={"detail": str(exc), "errors": exc.errors}
    )


# Exception types whose message is safe to show the dashboard operator.
_SHOWN_ERRORS = (RuntimeError, ValueError)


def _failure_detail(exc: Exception) -> str:
    if TransitRuntimeConfig.from_env().reveal_errors or isinstance(exc, _SHOWN_ERRORS):
        return str(exc) or type(exc).__name__
    return "Internal Server Error"


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort 500 with a `{"detail": ...}` body the dashboard can render."""

    logging.getLogger("uvicorn.error").exception(
        "Request to %s failed", request.url.path, extra={"path": str(request.url.path)}
    )
    return JSONResponse(status_code=500, content={"detail": _failure_detail(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
