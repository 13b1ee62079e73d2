from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from ..catalog.models import Restaurant

FALLBACK_REASON = "Based on your preferences"


class SortKey(str, Enum):
    name = "name"
    distance = "distance"
    rating = "rating"
    price = "price"


class FilterCriteria(BaseModel):
    search: str = Field(default="", description="Substring of name, cuisine or address")
    cuisine: str | None = None
    price_range: str | None = Field(default=None, description='Exact price tier, e.g. "$$"')
    max_distance: float | None = None
    sort: SortKey = SortKey.name

    @field_validator("cuisine", "price_range", "max_distance", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("search", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return "" if value is None else value


class ScoredRestaurant(BaseModel):
    restaurant: Restaurant
    recommendation_score: float
    reasons: list[str] = Field(default_factory=list)

    @property
    def reason(self) -> str:
        return self.reasons[0] if self.reasons else FALLBACK_REASON
