"""
app/core/config.py  ── Tasty Recipe Proxy
═══════════════════════════════════════════════════════════════════════════════
UPSTREAM:

  Tasty (RapidAPI)  →  recipe search, recipe details, tag list
                        /recipes/list, /recipes/get-more-info, /tags/list
                        authenticated via x-rapidapi-key + x-rapidapi-host

Everything here is read from the environment so TTLs and timeouts can be
tuned without a redeploy.
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import os

# ── Tasty / RapidAPI ──────────────────────────────────────────────────────────
# SECURITY: Key must be set as an environment variable, NOT hardcoded.
RAPIDAPI_HOST = os.environ.get("RAPIDAPI_HOST", "tasty.p.rapidapi.com")
TASTY_BASE    = os.environ.get("TASTY_BASE", f"https://{RAPIDAPI_HOST}").rstrip("/")

if not os.environ.get("RAPIDAPI_KEY"):
    logging.getLogger("config").warning(
        "RAPIDAPI_KEY env var not set — every recipe request will fail with 500"
    )


def rapidapi_key() -> str:
    """Current upstream key. Read per call so a missing key is caught per request."""
    return os.environ.get("RAPIDAPI_KEY", "")


def tasty_headers(api_key: str) -> dict[str, str]:
    return {
        "x-rapidapi-key":  api_key,
        "x-rapidapi-host": RAPIDAPI_HOST,
    }


# ── Upstream call policy ──────────────────────────────────────────────────────
UPSTREAM_TIMEOUT_S      = float(os.environ.get("UPSTREAM_TIMEOUT_S", "15"))
UPSTREAM_RETRIES        = int(os.environ.get("UPSTREAM_RETRIES", "0"))     # 0 = fail fast
UPSTREAM_RETRY_JITTER_S = float(os.environ.get("UPSTREAM_RETRY_JITTER_S", "0.5"))

# ── Cache ─────────────────────────────────────────────────────────────────────
CACHE_TTL_S = float(os.environ.get("CACHE_TTL_S", "300"))                  # 5 min

# ── Paging ────────────────────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE = int(os.environ.get("DEFAULT_PAGE_SIZE", "20"))
FEATURED_SIZE     = int(os.environ.get("FEATURED_SIZE", "8"))

# ── CORS ──────────────────────────────────────────────────────────────────────
CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin":  "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}
