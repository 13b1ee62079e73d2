from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Annotation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    visited: bool = False
    to_visit: bool = Field(default=False, alias="toVisit")
    rating: int = Field(default=0, ge=0, le=5, description="0 means unrated")
    comment: str = ""


class AnnotationUpdate(BaseModel):
    """Partial annotation; only fields that were explicitly set are merged."""

    model_config = ConfigDict(populate_by_name=True)

    visited: bool | None = None
    to_visit: bool | None = Field(default=None, alias="toVisit")
    rating: int | None = Field(default=None, ge=0, le=5)
    comment: str | None = None
