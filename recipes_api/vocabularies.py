"""Closed vocabularies for the enumerated recipe fields.

Each vocabulary maps a lowercase token to a human readable label. Only the
keys matter for validation; the labels exist for clients that want to render
choices.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

VOCABULARY_NAMES = ("difficulty", "media", "taste", "unit")


def _freeze(entries: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType({str(key).lower(): str(label) for key, label in entries.items()})


DEFAULT_DIFFICULTY = _freeze({"easy": "Easy", "medium": "Medium", "hard": "Hard"})
DEFAULT_MEDIA = _freeze(
    {
        "stove": "Stove",
        "oven": "Oven",
        "grill": "Grill",
        "microwave": "Microwave",
        "none": "No cooking",
    }
)
DEFAULT_TASTE = _freeze(
    {
        "sweet": "Sweet",
        "sour": "Sour",
        "salty": "Salty",
        "bitter": "Bitter",
        "umami": "Umami",
        "spicy": "Spicy",
    }
)
DEFAULT_UNIT = _freeze(
    {
        "g": "Gram",
        "kg": "Kilogram",
        "ml": "Millilitre",
        "l": "Litre",
        "tsp": "Teaspoon",
        "tbsp": "Tablespoon",
        "cup": "Cup",
        "pcs": "Pieces",
        "pinch": "Pinch",
    }
)


@dataclass(frozen=True)
class Vocabularies:
    """The set of vocabularies a recipe is validated against."""

    difficulty: Mapping[str, str] = field(default_factory=lambda: DEFAULT_DIFFICULTY)
    media: Mapping[str, str] = field(default_factory=lambda: DEFAULT_MEDIA)
    taste: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TASTE)
    unit: Mapping[str, str] = field(default_factory=lambda: DEFAULT_UNIT)

    def __post_init__(self) -> None:
        for name in VOCABULARY_NAMES:
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    def get(self, name: str) -> Mapping[str, str]:
        if name not in VOCABULARY_NAMES:
            raise KeyError(f"Unknown vocabulary '{name}'.")
        return getattr(self, name)

    def allows(self, name: str, token: str) -> bool:
        return token in self.get(name)

    @classmethod
    def from_json(cls, path: str | os.PathLike[str]) -> "Vocabularies":
        """Load vocabularies from a JSON document keyed by vocabulary name."""

        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Vocabulary file '{path}' must contain a JSON object.")

        missing = [name for name in VOCABULARY_NAMES if name not in raw]
        if missing:
            raise ValueError(f"Vocabulary file '{path}' is missing: {', '.join(missing)}.")

        entries = {}
        for name in VOCABULARY_NAMES:
            section = raw[name]
            if isinstance(section, list):
                section = {token: token for token in section}
            if not isinstance(section, dict):
                raise ValueError(f"Vocabulary '{name}' must be an object or a list.")
            entries[name] = _freeze(section)
        return cls(**entries)

    @classmethod
    def from_env(cls) -> "Vocabularies":
        """Use ``RECIPE_VOCABULARIES_PATH`` when set, otherwise the defaults."""

        path = os.environ.get("RECIPE_VOCABULARIES_PATH")
        if path:
            return cls.from_json(path)
        return cls()


DEFAULT_VOCABULARIES = Vocabularies()


__all__ = ["DEFAULT_VOCABULARIES", "VOCABULARY_NAMES", "Vocabularies"]
