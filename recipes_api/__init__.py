import os
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, request

from .models import Ingredient, Recipe
from .request_log import configure_logging, log_request
from .storage import RecipeRepository
from .validation import RequestValidationError, parse_filter, parse_new_recipe, parse_recipe_id
from .vocabularies import Vocabularies

try:
    from .gcp_storage import FirestoreRecipeStorage
except ImportError:  # pragma: no cover - allows running tests without optional deps
    FirestoreRecipeStorage = None  # type: ignore[assignment]

TEXT_PLAIN = {"Content-Type": "text/plain; charset=utf-8"}


def create_app(
    storage: Optional[RecipeRepository] = None,
    vocabularies: Optional[Vocabularies] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application will use
        :class:`FirestoreRecipeStorage` configured through environment variables.
    vocabularies:
        Allowed values for the enumerated recipe fields. When ``None`` they are
        loaded with :meth:`Vocabularies.from_env`.
    """

    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "development-secret-change-me")
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    if storage is None:
        if FirestoreRecipeStorage is None:
            raise RuntimeError(
                "google-cloud-firestore is not installed. Install it "
                "or pass an explicit storage backend to create_app."
            )
        storage = FirestoreRecipeStorage.from_env()
    app.config["RECIPE_STORAGE"] = storage
    app.config["RECIPE_VOCABULARIES"] = vocabularies or Vocabularies.from_env()

    @app.errorhandler(RequestValidationError)
    def handle_validation_error(exc: RequestValidationError) -> Tuple[Response, int]:
        return jsonify(exc.to_dict()), 400

    @app.get("/recipes")
    def list_recipes() -> Response:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        filters = parse_filter(request.args.to_dict(), app.config["RECIPE_VOCABULARIES"])
        log_request(request)

        recipes = storage_backend.list_recipes(filters)
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.get("/recipe/<path:recipe_id>")
    def get_recipe(recipe_id: str):
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        recipe_id = parse_recipe_id(recipe_id)
        log_request(request)

        recipe = storage_backend.get_recipe(recipe_id)
        if recipe is None:
            return "Entity not found", 404, TEXT_PLAIN
        return jsonify(recipe.to_dict())

    @app.post("/recipe")
    def create_recipe() -> Response:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        data = parse_new_recipe(
            request.get_json(silent=True), app.config["RECIPE_VOCABULARIES"]
        )
        log_request(request)

        new_recipe = storage_backend.create_recipe(data)
        return jsonify(new_recipe.to_dict())

    @app.delete("/recipe/<path:recipe_id>")
    def delete_recipe(recipe_id: str):
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        recipe_id = parse_recipe_id(recipe_id, strip=True)
        log_request(request)

        # Store failures are left to Flask's 500 handling.
        storage_backend.delete_recipe(recipe_id)
        return "Success", 200, TEXT_PLAIN

    return app


__all__ = ["create_app", "Ingredient", "Recipe"]
