from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Restaurant(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    cuisine: str
    address: str = ""
    price_range: str = Field(..., alias="priceRange", description='Price tier, "$" to "$$$$"')
    distance: float = Field(..., ge=0.0, description="Distance in miles")
    category: list[str] = Field(default_factory=list)


class CatalogPayload(BaseModel):
    restaurants: list[Restaurant]

    @field_validator("restaurants")
    @classmethod
    def _unique_ids(cls, value: list[Restaurant]) -> list[Restaurant]:
        seen: set[int] = set()
        for restaurant in value:
            if restaurant.id in seen:
                raise ValueError(f"duplicate restaurant id {restaurant.id}")
            seen.add(restaurant.id)
        return value
