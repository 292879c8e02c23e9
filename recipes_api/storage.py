from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol, TypedDict

from .models import Recipe


class RecipeFilter(TypedDict, total=False):
    """Validated listing criteria. Absent keys impose no constraint."""

    name: str
    servings: int
    time: int
    reference: str
    difficulty: str
    media: str
    taste: str
    vegetarian: bool


class IngredientData(TypedDict):
    name: str
    amount: float
    unit: str


class RecipeData(TypedDict):
    """Validated, normalized payload for a new recipe."""

    name: str
    description: str
    servings: int
    time: int
    reference: str
    difficulty: str
    media: str
    taste: str
    vegetarian: bool
    ingredients: List[IngredientData]


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the web layer."""

    def list_recipes(self, filters: RecipeFilter) -> Iterable[Recipe]:
        """Return the recipes matching every supplied filter, newest first."""

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """Return a single recipe or ``None`` if it does not exist."""

    def create_recipe(self, data: RecipeData) -> Recipe:
        """Persist a new recipe and return the stored instance with its id."""

    def delete_recipe(self, recipe_id: str) -> None:
        """Remove a recipe. Failures raised by the backend propagate."""


def matches_text(value: Any, needle: str) -> bool:
    """Case-insensitive substring match used for free text filters."""

    return isinstance(value, str) and needle.lower() in value.lower()


__all__ = [
    "IngredientData",
    "RecipeData",
    "RecipeFilter",
    "RecipeRepository",
    "matches_text",
]
