from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from ..annotations.models import Annotation
from ..catalog.models import Restaurant
from ..recommendations.models import FilterCriteria, SortKey


class Tab(str, Enum):
    all = "all"
    visited = "visited"
    to_visit = "to-visit"
    recommendations = "recommendations"


class ViewItem(BaseModel):
    restaurant: Restaurant
    annotation: Annotation
    status: str | None = Field(default=None, description='"visited", "to-visit" or None')
    recommendation_score: float | None = None
    recommendation_reasons: list[str] = Field(default_factory=list)
    recommendation_reason: str | None = None


class TrackerStats(BaseModel):
    total: int
    visited: int
    to_visit: int
    average_rating: str = Field(..., description='One decimal place, or "-" without ratings')


class RestaurantDetail(BaseModel):
    restaurant: Restaurant
    annotation: Annotation


class CatalogMetadata(BaseModel):
    cuisines: list[str]
    price_ranges: list[str]
    tabs: list[Tab] = Field(default_factory=lambda: list(Tab))
    sort_keys: list[SortKey] = Field(default_factory=lambda: list(SortKey))


class ViewResponse(BaseModel):
    tab: Tab
    criteria: FilterCriteria
    items: list[ViewItem]
    stats: TrackerStats
    error: str | None = None
