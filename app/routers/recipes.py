"""
app/routers/recipes.py
═══════════════════════════════════════════════════════════════════════════════
GET /?action={search|details|featured|tags}

  search    query (required, may be empty), from=0, size=20, tags=a,b
            → {results: [Recipe], total}
  details   id (required)
            → RecipeDetails
  featured  → {results: [Recipe], total}   (first FEATURED_SIZE recipes)
  tags      → {results: [{id, name, display_name, type}]}

Order of checks: API key → action → handler params → cache → Tasty.
Cache is written only after a successful fetch + normalize.
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, Depends, Query

from app.core.cache import (
    FEATURED_KEY, TAGS_KEY, CacheBackend, canonical_tags, details_key,
    get_recipe_cache, search_key,
)
from app.core.config import DEFAULT_PAGE_SIZE, FEATURED_SIZE, rapidapi_key
from app.core.errors import ClientInputError, ConfigurationError
from app.core.http_client import TastyClient, tasty_client
from app.sources.tasty import get_recipe_info, list_recipes, list_tags

log    = logging.getLogger("recipes_router")
router = APIRouter(tags=["recipes"])

INVALID_ACTION = "Invalid action. Use: search, details, featured, or tags"


async def _cached(cache: CacheBackend, key: str, load: Callable[[], Awaitable[Any]]) -> Any:
    hit = cache.get(key)
    if hit is not None:
        return hit
    data = await load()
    cache.set(key, data)
    return data


def _non_negative(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    v = value.strip()
    if not v.isdecimal():
        raise ClientInputError("from and size must be non-negative integers")
    return int(v)


# ── Handlers ──────────────────────────────────────────────────────────────────

async def _search(client, cache, query, from_, size, tags, **_):
    if query is None:
        raise ClientInputError("Search query required")
    offset = _non_negative(from_, 0)
    page   = _non_negative(size, DEFAULT_PAGE_SIZE)
    tags   = canonical_tags(tags)
    return await _cached(
        cache, search_key(query, offset, page, tags),
        lambda: list_recipes(client, query, offset, page, tags),
    )


async def _details(client, cache, id, **_):
    recipe_id = (id or "").strip()
    if not recipe_id:
        raise ClientInputError("Recipe ID required")
    return await _cached(
        cache, details_key(recipe_id),
        lambda: get_recipe_info(client, recipe_id),
    )


async def _featured(client, cache, **_):
    return await _cached(
        cache, FEATURED_KEY,
        lambda: list_recipes(client, "", 0, FEATURED_SIZE),
    )


async def _tags(client, cache, **_):
    return await _cached(cache, TAGS_KEY, lambda: list_tags(client))


_HANDLERS = {
    "search":   _search,
    "details":  _details,
    "featured": _featured,
    "tags":     _tags,
}


@router.get("/")
async def recipes(
    action: Optional[str] = Query(None, description="search | details | featured | tags"),
    query:  Optional[str] = Query(None, description="Search text (search)"),
    from_:  Optional[str] = Query(None, alias="from", description="Page offset (search)"),
    size:   Optional[str] = Query(None, description="Page size (search)"),
    tags:   Optional[str] = Query(None, description="Comma-joined tag names (search)"),
    id:     Optional[str] = Query(None, description="Tasty recipe id (details)"),
    client: TastyClient   = Depends(tasty_client),
    cache:  CacheBackend  = Depends(get_recipe_cache),
):
    if not rapidapi_key():
        log.error("RAPIDAPI_KEY not configured")
        raise ConfigurationError("API key not configured")

    handler = _HANDLERS.get(action or "")
    if handler is None:
        raise ClientInputError(INVALID_ACTION)

    return await handler(
        client, cache,
        query=query, from_=from_, size=size, tags=tags, id=id,
    )
