"""Request validation for the recipe resource.

Incoming query strings, JSON bodies and path parameters are parsed with
pydantic models. Every violation is collected before anything else happens so
that a rejected request never reaches the store.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from typing import Annotated, Any, Dict, Iterable, List, Mapping, Optional, cast

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from .storage import RecipeData, RecipeFilter
from .vocabularies import DEFAULT_VOCABULARIES, Vocabularies

RECIPE_ID_LENGTH = 25

# Same grammar as the usual "isNumeric" check: optional sign, optional
# fraction, at least one digit after the point.
NUMERIC_PATTERN = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")

BOOLEAN_TOKENS = {"true": True, "false": False, "1": True, "0": False}


@dataclass(frozen=True)
class FieldViolation:
    """A single field that failed validation."""

    location: str
    field: str
    message: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RequestValidationError(Exception):
    """Raised when one or more request fields are invalid."""

    def __init__(self, violations: Iterable[FieldViolation]) -> None:
        self.violations: List[FieldViolation] = list(violations)
        fields = ", ".join(violation.field for violation in self.violations)
        super().__init__(f"Invalid request fields: {fields}")

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": [violation.to_dict() for violation in self.violations]}


def parse_number(value: Any) -> float | int:
    if isinstance(value, bool):
        raise ValueError("must be numeric")
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str) and NUMERIC_PATTERN.match(value):
        number = float(value)
    else:
        raise ValueError("must be numeric")

    # Long digit strings parse to inf; huge ints cannot become floats at all.
    try:
        finite = math.isfinite(number)
    except OverflowError:
        finite = False
    if not finite:
        raise ValueError("must be numeric")
    return number


def coerce_int(value: Any) -> int:
    return int(parse_number(value))


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value in BOOLEAN_TOKENS:
        return BOOLEAN_TOKENS[value]
    raise ValueError("must be a boolean")


def normalize_token(value: Any, vocabulary_name: str, info: ValidationInfo) -> str:
    """Lowercase ``value`` and check it against the named vocabulary."""

    if not isinstance(value, str):
        raise ValueError("must be a string")

    context = info.context or {}
    vocabularies: Vocabularies = context.get("vocabularies", DEFAULT_VOCABULARIES)
    token = value.lower()
    if not vocabularies.allows(vocabulary_name, token):
        choices = ", ".join(sorted(vocabularies.get(vocabulary_name)))
        raise ValueError(f"must be one of: {choices}")
    return token


NonEmptyText = Annotated[str, StringConstraints(min_length=1)]


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _RecipeFields(_Schema):
    """Coercion rules shared by the listing filter and the create payload."""

    @field_validator("servings", "time", mode="before", check_fields=False)
    @classmethod
    def _whole_number(cls, value: Any) -> int:
        return coerce_int(value)

    @field_validator("vegetarian", mode="before", check_fields=False)
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return coerce_bool(value)

    @field_validator("difficulty", "media", "taste", mode="before", check_fields=False)
    @classmethod
    def _vocabulary_token(cls, value: Any, info: ValidationInfo) -> str:
        return normalize_token(value, info.field_name, info)


class RecipeQuery(_RecipeFields):
    name: Optional[str] = None
    servings: Optional[int] = None
    time: Optional[int] = None
    reference: Optional[str] = None
    difficulty: Optional[str] = None
    media: Optional[str] = None
    taste: Optional[str] = None
    vegetarian: Optional[bool] = None


class IngredientPayload(_Schema):
    name: NonEmptyText
    amount: float
    unit: str

    @field_validator("amount", mode="before")
    @classmethod
    def _numeric(cls, value: Any) -> float | int:
        return parse_number(value)

    @field_validator("unit", mode="before")
    @classmethod
    def _unit(cls, value: Any, info: ValidationInfo) -> str:
        return normalize_token(value, "unit", info)


class RecipePayload(_RecipeFields):
    name: NonEmptyText
    description: str
    servings: int
    time: int
    reference: str
    difficulty: str
    media: str
    taste: str
    vegetarian: bool
    ingredients: List[IngredientPayload] = Field(default_factory=list)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _absent_ingredients(cls, value: Any) -> Any:
        return [] if value is None else value


class RecipeLookup(_Schema):
    id: Annotated[str, StringConstraints(min_length=RECIPE_ID_LENGTH, max_length=RECIPE_ID_LENGTH)]


class RecipeDeletion(_Schema):
    id: Annotated[
        str,
        StringConstraints(
            strip_whitespace=True, min_length=RECIPE_ID_LENGTH, max_length=RECIPE_ID_LENGTH
        ),
    ]


def _message(error: Mapping[str, Any]) -> str:
    if error["type"] == "value_error":
        return str(error["ctx"]["error"])
    return error["msg"]


def _violations(location: str, exc: ValidationError) -> List[FieldViolation]:
    violations = []
    for error in exc.errors(include_url=False):
        field = ".".join(str(part) for part in error["loc"])
        value = None if error["type"] == "missing" else error.get("input")
        violations.append(
            FieldViolation(location=location, field=field, message=_message(error), value=value)
        )
    return violations


def parse_filter(
    args: Mapping[str, Any], vocabularies: Vocabularies = DEFAULT_VOCABULARIES
) -> RecipeFilter:
    """Validate listing query parameters; unknown parameters are dropped."""

    try:
        query = RecipeQuery.model_validate(dict(args), context={"vocabularies": vocabularies})
    except ValidationError as exc:
        raise RequestValidationError(_violations("query", exc)) from exc
    return cast(RecipeFilter, query.model_dump(exclude_unset=True))


def parse_new_recipe(
    body: Any, vocabularies: Vocabularies = DEFAULT_VOCABULARIES
) -> RecipeData:
    """Validate a create payload. A non-object body counts as empty."""

    if not isinstance(body, dict):
        body = {}
    try:
        payload = RecipePayload.model_validate(body, context={"vocabularies": vocabularies})
    except ValidationError as exc:
        raise RequestValidationError(_violations("body", exc)) from exc
    return cast(RecipeData, payload.model_dump())


def parse_recipe_id(raw: Any, *, strip: bool = False) -> str:
    """Validate a path id; ``strip`` trims surrounding whitespace first."""

    schema = RecipeDeletion if strip else RecipeLookup
    try:
        return schema.model_validate({"id": raw}).id
    except ValidationError as exc:
        raise RequestValidationError(_violations("params", exc)) from exc


__all__ = [
    "FieldViolation",
    "RECIPE_ID_LENGTH",
    "RequestValidationError",
    "parse_filter",
    "parse_new_recipe",
    "parse_recipe_id",
]
