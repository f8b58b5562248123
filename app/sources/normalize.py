"""
app/sources/normalize.py
═══════════════════════════════════════════════════════════════════════════════
Tasty JSON  →  the stable shapes in app/models.py.

Every function here is pure and total: Tasty drops fields, sends {} for
"no nutrition", 0 for "unknown time", and occasionally a string where a list
belongs. All of that degrades to None / "" / [] instead of raising.

  normalize_search_results(raw)  → {results: [Recipe], total}
  normalize_recipe_details(raw)  → RecipeDetails
  normalize_tags(raw)            → {results: [Tag]}
═══════════════════════════════════════════════════════════════════════════════
"""

import math
from typing import Any, Optional

from app.models import RawPayload, Recipe, RecipeDetails, SearchResult, Tag, TagList

UNTITLED = "Untitled Recipe"

# Tasty's placeholder raw_text for components it could not parse
_NA = {"n/a", "na"}


# ── Defensive accessors ───────────────────────────────────────────────────────

def _dict(v: Any) -> dict:
    return v if isinstance(v, dict) else {}


def _list(v: Any) -> list:
    return v if isinstance(v, list) else []


def _str(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def _num(v: Any) -> Optional[float]:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    if isinstance(v, float) and not math.isfinite(v):
        return None
    return v


def _positive(v: Any) -> Optional[float]:
    n = _num(v)
    return n if n else None


def _fmt(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)


def rescale_rating(user_ratings: Any) -> Optional[int]:
    """Tasty score 0–1 → 0–5 stars, half-up. 0.8 → 4."""
    score = _num(_dict(user_ratings).get("score"))
    if score is None:
        return None
    return int(math.floor(score * 5 + 0.5))


# ── Search results ────────────────────────────────────────────────────────────

def _build_recipe(item: Any) -> Recipe:
    item    = _dict(item)
    minutes = _positive(item.get("total_time_minutes"))
    serves  = _positive(item.get("num_servings"))
    return {
        "id":          item.get("id"),
        "title":       _str(item.get("name")) or _str(item.get("title")) or UNTITLED,
        "image":       item.get("thumbnail_url") or None,
        "description": _str(item.get("description")),
        "totalTime":   f"{_fmt(minutes)} min" if minutes else None,
        "yields":      f"{_fmt(serves)} servings" if serves else None,
        "rating":      rescale_rating(item.get("user_ratings")),
    }


def normalize_search_results(raw: RawPayload) -> SearchResult:
    raw     = _dict(raw)
    results = [_build_recipe(item) for item in _list(raw.get("results"))]
    count   = _num(raw.get("count"))
    return {
        "results": results,
        "total":   int(count) if count else len(results),
    }


# ── Recipe details ────────────────────────────────────────────────────────────

def _unit_label(unit: dict, quantity: str) -> str:
    if quantity == "1":
        label = unit.get("display_singular")
    else:
        label = unit.get("display_plural")
    return _str(label) or _str(unit.get("name"))


def _ingredient_text(component: Any) -> str:
    """'2' + 'cups' + 'all-purpose flour' + ', sifted' → '2 cups all-purpose flour, sifted'"""
    component = _dict(component)
    name = _str(_dict(component.get("ingredient")).get("name"))
    if not name:
        raw_text = _str(component.get("raw_text"))
        return "" if raw_text.lower() in _NA else raw_text

    parts = []
    measurements = _list(component.get("measurements"))
    if measurements:
        m   = _dict(measurements[0])
        qty = _str(m.get("quantity")) or _fmt(_num(m.get("quantity")) or 0)
        if qty and qty != "0":
            parts.append(qty)
            unit = _unit_label(_dict(m.get("unit")), qty)
            if unit:
                parts.append(unit)
    parts.append(name)

    text    = " ".join(parts)
    comment = _str(component.get("extra_comment"))
    if comment:
        text = f"{text}, {comment}"
    return text.strip()


def flatten_ingredients(sections: Any) -> list[str]:
    out = []
    for section in _list(sections):
        for component in _list(_dict(section).get("components")):
            text = _ingredient_text(component)
            if text:
                out.append(text)
    return out


def flatten_steps(instructions: Any) -> list[str]:
    steps = (_str(_dict(step).get("display_text")) for step in _list(instructions))
    return [s for s in steps if s]


def resolve_video(item: dict) -> tuple[Optional[str], Optional[str]]:
    """
    (videoUrl, youtubeUrl), resolved independently.
    Direct video wins at render time, but both are reported when present.
    """
    video_url = _str(item.get("original_video_url")) or _str(item.get("video_url")) or None

    youtube_url = None
    for credit in _list(item.get("credits")):
        url = _str(_dict(credit).get("url"))
        if "youtube" in url:
            youtube_url = url
            break
    return video_url, youtube_url


def normalize_recipe_details(raw: RawPayload) -> RecipeDetails:
    item = _dict(raw)
    video_url, youtube_url = resolve_video(item)
    nutrition = _dict(item.get("nutrition"))
    tags = (_str(_dict(t).get("display_name")) for t in _list(item.get("tags")))

    return {
        "id":               item.get("id"),
        "title":            _str(item.get("name")) or _str(item.get("title")) or UNTITLED,
        "image":            item.get("thumbnail_url") or None,
        "description":      _str(item.get("description")),
        "ingredients":      flatten_ingredients(item.get("sections")),
        "steps":            flatten_steps(item.get("instructions")),
        "totalTimeMinutes": _positive(item.get("total_time_minutes")),
        "servings":         _positive(item.get("num_servings")),
        "videoUrl":         video_url,
        "youtubeUrl":       youtube_url,
        "rating":           rescale_rating(item.get("user_ratings")),
        "nutrition":        nutrition or None,
        "tags":             [t for t in tags if t],
    }


# ── Tags ──────────────────────────────────────────────────────────────────────

def _build_tag(t: dict) -> Tag:
    return {
        "id":           t.get("id"),
        "name":         t.get("name"),
        "display_name": t.get("display_name"),
        "type":         t.get("type"),
    }


def normalize_tags(raw: RawPayload) -> TagList:
    return {"results": [_build_tag(t) for t in _list(_dict(raw).get("results")) if isinstance(t, dict)]}

