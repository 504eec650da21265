from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import os
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.middleware.cors import CORSMiddleware
from .routers.employees import router as employees_router
from .routers.index import router as index_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logging.getLogger("elastic_transport").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The Elasticsearch client is created lazily by the first request
    yield


"""
Employee API application

The built-in /docs and /openapi.json routes are disabled and replaced by the
explicit handlers at the bottom of this module, which always answer with
plain application/json (strict Accept headers otherwise get a 406 on the
vendor OpenAPI media type).
"""

# Optional base path for deployments under a subpath (e.g.
# https://example.com/employees-api/...). Used as the ASGI root_path and
# advertised via OpenAPI "servers" so Swagger UI sends prefixed requests.
_env_base_path = os.getenv("API_BASE_PATH", "").strip()
if _env_base_path and not _env_base_path.startswith("/"):
    _env_base_path = "/" + _env_base_path
if _env_base_path.endswith("/") and _env_base_path != "/":
    _env_base_path = _env_base_path.rstrip("/")

app = FastAPI(
    title="Employee API",
    version="1.0",
    description="API for managing employees in Elasticsearch",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    root_path=_env_base_path or "",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(employees_router)
app.include_router(index_router)


@app.get("/health", tags=["ops"], summary="Health check")
async def health():
    return {"status": "ok"}


def _with_servers(base_path: str | None):
    """Return OpenAPI schema optionally annotated with servers -> [{url: base_path}]."""
    schema = app.openapi()
    if base_path and base_path != "/":
        # FastAPI caches app.openapi(); do not mutate it in place
        schema = {**schema, "servers": [{"url": base_path}]}
    return schema


@app.get("/openapi.json", include_in_schema=False)
def openapi_json():
    return JSONResponse(_with_servers(_env_base_path or None))


# Relative openapi_url so the UI also works behind a subpath proxy
@app.get("/docs", include_in_schema=False)
def swagger_ui():
    return get_swagger_ui_html(openapi_url="openapi.json", title="Employee API Docs")
