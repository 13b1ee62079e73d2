from __future__ import annotations

import logging
import threading
from typing import Any

from ..annotations.backends import JsonFileBackend, KeyValueBackend
from ..annotations.config import DEFAULT_ANNOTATION_CONFIG, AnnotationConfig
from ..annotations.models import Annotation, AnnotationUpdate
from ..annotations.store import AnnotationStore
from ..catalog.config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from ..catalog.loader import Catalog, CatalogLoadError, load_catalog
from ..recommendations.models import FilterCriteria, ScoredRestaurant
from ..recommendations.scoring import get_recommendations
from .models import CatalogMetadata, RestaurantDetail, Tab, TrackerStats, ViewItem, ViewResponse
from .views import TrackerContext, derive_stats, derive_view

logger = logging.getLogger(__name__)


class TrackerController:
    """
    Single-user state holder: current tab and filters, plus the intent
    methods that write through to the annotation store.

    Visited and want-to-visit are kept exclusive here, before anything
    reaches the store.
    """

    def __init__(
        self,
        catalog: Catalog,
        store: AnnotationStore,
        load_error: str | None = None,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.load_error = load_error
        self.tab = Tab.all
        self.criteria = FilterCriteria()
        self._intent_lock = threading.Lock()

    # ── View state ──────────────────────────────────────────────────────

    def context(self) -> TrackerContext:
        return TrackerContext(
            catalog=self.catalog,
            annotations=self.store.all(),
            tab=self.tab,
            criteria=self.criteria,
        )

    def set_tab(self, tab: Tab | str) -> Tab:
        self.tab = Tab(tab)
        return self.tab

    def set_criteria(self, **fields: Any) -> FilterCriteria:
        """Replace only the given criteria fields; the rest stay as they are."""
        self.criteria = FilterCriteria.model_validate({**self.criteria.model_dump(), **fields})
        return self.criteria

    def reset_filters(self) -> FilterCriteria:
        self.criteria = FilterCriteria()
        return self.criteria

    # ── Derived data ────────────────────────────────────────────────────

    def get_view(self) -> list[ViewItem]:
        return derive_view(self.context())

    def get_stats(self) -> TrackerStats:
        return derive_stats(self.catalog, self.store.all())

    def get_view_response(self) -> ViewResponse:
        ctx = self.context()
        return ViewResponse(
            tab=ctx.tab,
            criteria=ctx.criteria,
            items=derive_view(ctx),
            stats=derive_stats(ctx.catalog, ctx.annotations),
            error=self.load_error,
        )

    def get_recommendations(self) -> list[ScoredRestaurant]:
        return get_recommendations(self.catalog, self.store.all())

    def get_restaurant(self, restaurant_id: int) -> RestaurantDetail | None:
        restaurant = self.catalog.get(restaurant_id)
        if restaurant is None:
            return None
        return RestaurantDetail(restaurant=restaurant, annotation=self.store.get(restaurant_id))

    def metadata(self) -> CatalogMetadata:
        return CatalogMetadata(
            cuisines=self.catalog.cuisines(),
            price_ranges=self.catalog.price_ranges(),
        )

    # ── Intents ─────────────────────────────────────────────────────────

    def record_visit(self, restaurant_id: int) -> Annotation:
        """Toggle visited; want-to-visit is always cleared."""
        with self._intent_lock:
            current = self.store.get(restaurant_id)
            return self.store.update(
                restaurant_id,
                AnnotationUpdate(visited=not current.visited, to_visit=False),
            )

    def record_to_visit(self, restaurant_id: int) -> Annotation:
        """Toggle want-to-visit; no-op once the restaurant is visited."""
        with self._intent_lock:
            current = self.store.get(restaurant_id)
            if current.visited:
                return current
            return self.store.update(restaurant_id, AnnotationUpdate(to_visit=not current.to_visit))

    def set_rating(self, restaurant_id: int, value: int) -> Annotation:
        return self.store.update(restaurant_id, AnnotationUpdate(rating=value))

    def set_comment(self, restaurant_id: int, text: str) -> Annotation:
        return self.store.update(restaurant_id, AnnotationUpdate(comment=text.strip()))

    def save_details(
        self,
        restaurant_id: int,
        rating: int,
        comment: str,
        visited: bool,
        to_visit: bool,
    ) -> Annotation:
        """Apply every field of the detail dialog in one store update."""
        return self.store.update(
            restaurant_id,
            AnnotationUpdate(
                rating=rating,
                comment=comment.strip(),
                visited=visited,
                to_visit=to_visit and not visited,
            ),
        )

    def clear_all(self) -> None:
        self.store.clear_all()


def build_controller(
    catalog_config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
    annotation_config: AnnotationConfig = DEFAULT_ANNOTATION_CONFIG,
    backend: KeyValueBackend | None = None,
) -> TrackerController:
    """
    Load the catalog and open the annotation store.

    A catalog that cannot be loaded is reported through ``load_error`` and
    replaced by an empty one, so every tab shows zero results.
    """
    load_error: str | None = None
    try:
        catalog = load_catalog(catalog_config)
    except CatalogLoadError:
        logger.warning("Catalog load failed, continuing with an empty catalog", exc_info=True)
        catalog = Catalog.empty()
        load_error = catalog_config.load_error_message

    store = AnnotationStore(
        backend if backend is not None else JsonFileBackend(annotation_config.storage_path),
        annotation_config,
    )
    return TrackerController(catalog, store, load_error=load_error)
