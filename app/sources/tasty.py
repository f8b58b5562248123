"""
app/sources/tasty.py
═══════════════════════════════════════════════════════════════════════════════
Tasty (RapidAPI) endpoints used by the proxy.

  /recipes/list?q&from&size&tags   → list_recipes()
  /recipes/get-more-info?id        → get_recipe_info()
  /tags/list                       → list_tags()

Each helper fetches and normalizes; UpstreamError propagates untouched so the
router can render it and, more importantly, never cache it.
═══════════════════════════════════════════════════════════════════════════════
"""

from app.core.http_client import TastyClient
from app.models import RecipeDetails, SearchResult, TagList
from app.sources.normalize import (
    normalize_recipe_details, normalize_search_results, normalize_tags,
)

LIST_PATH    = "/recipes/list"
DETAILS_PATH = "/recipes/get-more-info"
TAGS_PATH    = "/tags/list"


async def list_recipes(
    client: TastyClient, query: str, offset: int, size: int, tags: str = "",
) -> SearchResult:
    params = {"q": query, "from": str(offset), "size": str(size), "tags": tags}
    return normalize_search_results(await client.fetch(LIST_PATH, params))


async def get_recipe_info(client: TastyClient, recipe_id: str) -> RecipeDetails:
    return normalize_recipe_details(await client.fetch(DETAILS_PATH, {"id": recipe_id}))


async def list_tags(client: TastyClient) -> TagList:
    return normalize_tags(await client.fetch(TAGS_PATH))
