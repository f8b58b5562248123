"""
app/models.py
Response shapes served to the front-end.

Upstream JSON is never typed beyond RawPayload: Tasty omits fields freely and
only app/sources/normalize.py is allowed to look inside it.
"""

from typing import Any, Optional, TypedDict

RawPayload = dict[str, Any]


class Recipe(TypedDict):
    id:          Any
    title:       str
    image:       Optional[str]
    description: str
    totalTime:   Optional[str]
    yields:      Optional[str]
    rating:      Optional[int]


class SearchResult(TypedDict):
    results: list[Recipe]
    total:   int


class RecipeDetails(TypedDict):
    id:               Any
    title:            str
    image:            Optional[str]
    description:      str
    ingredients:      list[str]
    steps:            list[str]
    totalTimeMinutes: Optional[int]
    servings:         Optional[int]
    videoUrl:         Optional[str]
    youtubeUrl:       Optional[str]
    rating:           Optional[int]
    nutrition:        Optional[dict]
    tags:             list[str]


class Tag(TypedDict):
    id:           Any
    name:         Optional[str]
    display_name: Optional[str]
    type:         Optional[str]


class TagList(TypedDict):
    results: list[Tag]
