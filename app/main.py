"""
app/main.py  — Tasty Recipe Proxy
Forwards recipe requests to Tasty (RapidAPI), normalizes the responses and
caches them in memory for CACHE_TTL_S.

Every response (errors and preflights included) carries the CORS headers, and
every error body is {"error": "..."}.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.cache import CacheBackend, get_recipe_cache
from app.core.config import CACHE_TTL_S, CORS_HEADERS, TASTY_BASE, rapidapi_key
from app.core.errors import ProxyError, UpstreamError
from app.core.http_client import close_all
from app.routers.recipes import router as recipes_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"🚀 Tasty Recipe Proxy starting (upstream {TASTY_BASE}, TTL {CACHE_TTL_S:.0f}s)")
    yield
    log.info("🛑 Shutting down...")
    await close_all()


app = FastAPI(
    title="Tasty Recipe Proxy",
    description=(
        "Cache-first proxy in front of the Tasty recipe API. "
        "Actions: search, details, featured, tags. "
        "Responses are normalized and cached for 5 minutes."
    ),
    version="1.0.0",
    lifespan=lifespan,
)


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status, headers=CORS_HEADERS)


# ── CORS + last-resort error boundary ─────────────────────────────────────────

@app.middleware("http")
async def cors_envelope(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    try:
        response = await call_next(request)
    except Exception as ex:
        log.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, str(ex) or "Internal server error")
    response.headers.update(CORS_HEADERS)
    return response


# ── Error envelope ────────────────────────────────────────────────────────────

@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, ex: ProxyError):
    if isinstance(ex, UpstreamError):
        log.warning(f"Upstream failure (status={ex.upstream_status}) for {request.url.query}")
    return _error(ex.status_code, ex.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, ex: StarletteHTTPException):
    return _error(ex.status_code, str(ex.detail))


# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(recipes_router)


@app.get("/health", tags=["meta"])
async def health(cache: CacheBackend = Depends(get_recipe_cache)):
    """Liveness + cache metadata. Does not touch Tasty."""
    summary = getattr(cache, "summary", None)
    return {
        "status":             "healthy",
        "api_key_configured": bool(rapidapi_key()),
        "cache":              summary() if callable(summary) else {},
    }
