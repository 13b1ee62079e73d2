from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator

from .annotations.models import Annotation
from .controller.controller import TrackerController, build_controller
from .controller.models import (
    CatalogMetadata,
    RestaurantDetail,
    Tab,
    TrackerStats,
    ViewResponse,
)
from .dependencies import get_controller
from .recommendations.models import FilterCriteria, SortKey

logger = logging.getLogger(__name__)


class TabRequest(BaseModel):
    tab: Tab


class FiltersRequest(BaseModel):
    search: str | None = None
    cuisine: str | None = None
    price_range: str | None = None
    max_distance: float | None = None
    sort: SortKey | None = None

    @field_validator("cuisine", "price_range", "max_distance", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RatingRequest(BaseModel):
    rating: int = Field(..., ge=0, le=5)


class CommentRequest(BaseModel):
    comment: str = Field(default="", max_length=2000)


class DetailsRequest(BaseModel):
    rating: int = Field(default=0, ge=0, le=5)
    comment: str = Field(default="", max_length=2000)
    visited: bool = False
    to_visit: bool = False


def create_app(controller: TrackerController | None = None) -> FastAPI:
    """
    Build the local presentation adapter.

    When no controller is given, the catalog is loaded once at startup from
    the configured path.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "controller", None) is None:
            app.state.controller = build_controller()
            if app.state.controller.load_error:
                logger.warning("Starting with an empty catalog: %s", app.state.controller.load_error)
        yield

    app = FastAPI(title="Restaurant Tracker", version="1.0.0", lifespan=lifespan)
    app.state.controller = controller

    # ── Public endpoints ─────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metadata", response_model=CatalogMetadata)
    def metadata(ctl: TrackerController = Depends(get_controller)) -> CatalogMetadata:
        return ctl.metadata()

    # ── View state ───────────────────────────────────────────────────────

    @app.get("/view", response_model=ViewResponse)
    def view(ctl: TrackerController = Depends(get_controller)) -> ViewResponse:
        return ctl.get_view_response()

    @app.get("/stats", response_model=TrackerStats)
    def stats(ctl: TrackerController = Depends(get_controller)) -> TrackerStats:
        return ctl.get_stats()

    @app.put("/tab", response_model=ViewResponse)
    def set_tab(body: TabRequest, ctl: TrackerController = Depends(get_controller)) -> ViewResponse:
        ctl.set_tab(body.tab)
        return ctl.get_view_response()

    @app.put("/filters", response_model=ViewResponse)
    def set_filters(
        body: FiltersRequest,
        ctl: TrackerController = Depends(get_controller),
    ) -> ViewResponse:
        fields = body.model_dump(exclude_unset=True)
        if fields.get("sort") is None:
            fields.pop("sort", None)
        ctl.set_criteria(**fields)
        return ctl.get_view_response()

    @app.post("/filters/reset", response_model=FilterCriteria)
    def reset_filters(ctl: TrackerController = Depends(get_controller)) -> FilterCriteria:
        return ctl.reset_filters()

    # ── Restaurant intents ───────────────────────────────────────────────

    @app.get("/restaurants/{restaurant_id}", response_model=RestaurantDetail)
    def restaurant_detail(
        restaurant_id: int,
        ctl: TrackerController = Depends(get_controller),
    ) -> RestaurantDetail:
        detail = ctl.get_restaurant(restaurant_id)
        if detail is None:
            raise HTTPException(status_code=404, detail="Restaurant not found")
        return detail

    @app.post("/restaurants/{restaurant_id}/visit", response_model=Annotation)
    def toggle_visited(
        restaurant_id: int,
        ctl: TrackerController = Depends(get_controller),
    ) -> Annotation:
        return ctl.record_visit(restaurant_id)

    @app.post("/restaurants/{restaurant_id}/to-visit", response_model=Annotation)
    def toggle_to_visit(
        restaurant_id: int,
        ctl: TrackerController = Depends(get_controller),
    ) -> Annotation:
        return ctl.record_to_visit(restaurant_id)

    @app.put("/restaurants/{restaurant_id}/rating", response_model=Annotation)
    def set_rating(
        restaurant_id: int,
        body: RatingRequest,
        ctl: TrackerController = Depends(get_controller),
    ) -> Annotation:
        return ctl.set_rating(restaurant_id, body.rating)

    @app.put("/restaurants/{restaurant_id}/comment", response_model=Annotation)
    def set_comment(
        restaurant_id: int,
        body: CommentRequest,
        ctl: TrackerController = Depends(get_controller),
    ) -> Annotation:
        return ctl.set_comment(restaurant_id, body.comment)

    @app.put("/restaurants/{restaurant_id}", response_model=Annotation)
    def save_details(
        restaurant_id: int,
        body: DetailsRequest,
        ctl: TrackerController = Depends(get_controller),
    ) -> Annotation:
        return ctl.save_details(
            restaurant_id,
            rating=body.rating,
            comment=body.comment,
            visited=body.visited,
            to_visit=body.to_visit,
        )

    @app.delete("/annotations")
    def clear_annotations(ctl: TrackerController = Depends(get_controller)) -> dict[str, str]:
        ctl.clear_all()
        return {"status": "cleared"}

    return app


app = create_app()
