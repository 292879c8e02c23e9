from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Ingredient:
    """A named quantity of something used by a recipe."""

    name: str
    amount: float
    unit: str


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    name: str
    description: str
    servings: int
    time: int
    reference: str
    difficulty: str
    media: str
    taste: str
    vegetarian: bool
    ingredients: List[Ingredient] = field(default_factory=list)
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data


__all__ = ["Ingredient", "Recipe"]
