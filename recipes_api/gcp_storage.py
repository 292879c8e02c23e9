from __future__ import annotations

import os
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .models import Ingredient, Recipe
from .storage import RecipeData, RecipeFilter, RecipeRepository, matches_text

# Filters Firestore can answer with an equality clause. Free text filters are
# applied after the query because Firestore has no substring operator.
EQUALITY_FILTERS = ("servings", "time", "difficulty", "media", "taste", "vegetarian")
TEXT_FILTERS = ("name", "reference")

EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def new_recipe_id() -> str:
    """Return a 25 character document id."""

    return "c" + uuid.uuid4().hex[:24]


def _parse_ingredients(raw: object) -> List[Ingredient]:
    if not isinstance(raw, list):
        return []

    ingredients = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        ingredients.append(
            Ingredient(
                name=item.get("name", ""),
                amount=item.get("amount", 0),
                unit=item.get("unit", ""),
            )
        )
    return ingredients


class FirestoreRecipeStorage(RecipeRepository):
    """GCP backed recipe storage using Firestore."""

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._project = project
        self._collection_name = collection_name

        self._firestore_client = client or firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("RECIPES_COLLECTION", "recipes")
        return cls(project=project, collection_name=collection_name)

    def list_recipes(self, filters: RecipeFilter) -> List[Recipe]:
        query = self._collection
        for field in EQUALITY_FILTERS:
            if field in filters:
                query = query.where(filter=FieldFilter(field, "==", filters[field]))

        recipes = [self._doc_to_recipe(doc.id, doc.to_dict() or {}) for doc in query.stream()]

        for field in TEXT_FILTERS:
            if field in filters:
                needle = filters[field]
                recipes = [recipe for recipe in recipes if matches_text(getattr(recipe, field), needle)]

        return sorted(recipes, key=lambda recipe: recipe.created_at or EPOCH, reverse=True)

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        snapshot = self._collection.document(recipe_id).get()

        if not snapshot.exists:
            return None

        data = snapshot.to_dict() or {}
        return self._doc_to_recipe(snapshot.id, data)

    def create_recipe(self, data: RecipeData) -> Recipe:
        doc = {
            "name": data["name"],
            "description": data["description"],
            "servings": data["servings"],
            "time": data["time"],
            "reference": data["reference"],
            "difficulty": data["difficulty"],
            "media": data["media"],
            "taste": data["taste"],
            "vegetarian": data["vegetarian"],
            "ingredients": [dict(ingredient) for ingredient in data["ingredients"]],
            "created_at": firestore.SERVER_TIMESTAMP,
        }

        doc_ref = self._collection.document(new_recipe_id())
        doc_ref.set(doc)

        snapshot = doc_ref.get()
        stored = snapshot.to_dict() or {}
        return self._doc_to_recipe(snapshot.id, stored)

    def delete_recipe(self, recipe_id: str) -> None:
        # Deleting a missing document is a no-op in Firestore.
        self._collection.document(recipe_id).delete()

    def _doc_to_recipe(self, doc_id: str, data: dict) -> Recipe:
        created_at = data.get("created_at")
        if isinstance(created_at, datetime):
            timestamp = created_at
        else:
            timestamp = None

        return Recipe(
            id=doc_id,
            name=data.get("name", ""),
            description=data.get("description", ""),
            servings=data.get("servings", 0),
            time=data.get("time", 0),
            reference=data.get("reference", ""),
            difficulty=data.get("difficulty", ""),
            media=data.get("media", ""),
            taste=data.get("taste", ""),
            vegetarian=bool(data.get("vegetarian", False)),
            ingredients=_parse_ingredients(data.get("ingredients")),
            created_at=timestamp,
        )


__all__ = ["FirestoreRecipeStorage", "new_recipe_id"]
