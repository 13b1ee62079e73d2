from __future__ import annotations

import json
import logging
from typing import Iterable

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import CatalogPayload, Restaurant

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS: list[str] = [
    "id",
    "name",
    "cuisine",
    "address",
    "price_range",
    "distance",
    "category",
]


class CatalogLoadError(RuntimeError):
    """Raised when the catalog source cannot be read or parsed."""


def _to_frame(restaurants: Iterable[Restaurant]) -> pd.DataFrame:
    df = pd.DataFrame(
        [r.model_dump() for r in restaurants],
        columns=CANONICAL_COLUMNS,
    )
    return df.astype({"id": "int64", "distance": "float64"})


class Catalog:
    """Read-only, in-memory restaurant catalog loaded once per session."""

    def __init__(self, restaurants: Iterable[Restaurant] = ()) -> None:
        self._restaurants: tuple[Restaurant, ...] = tuple(restaurants)
        self._by_id: dict[int, Restaurant] = {r.id: r for r in self._restaurants}
        self._df = _to_frame(self._restaurants)

    @classmethod
    def empty(cls) -> Catalog:
        return cls()

    @classmethod
    def from_payload(cls, payload: dict) -> Catalog:
        return cls(CatalogPayload.model_validate(payload).restaurants)

    def __len__(self) -> int:
        return len(self._restaurants)

    @property
    def frame(self) -> pd.DataFrame:
        """Return a copy of the catalog DataFrame in catalog order."""
        return self._df.copy()

    def restaurants(self) -> list[Restaurant]:
        return list(self._restaurants)

    def get(self, restaurant_id: int) -> Restaurant | None:
        return self._by_id.get(int(restaurant_id))

    def cuisines(self) -> list[str]:
        """Distinct cuisines in first-seen catalog order."""
        return list(dict.fromkeys(r.cuisine for r in self._restaurants))

    def price_ranges(self) -> list[str]:
        return sorted({r.price_range for r in self._restaurants}, key=lambda p: (len(p), p))


def load_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Catalog:
    """
    Read and validate the catalog document at ``config.catalog_path``.

    Raises ``CatalogLoadError`` when the file is missing, is not valid JSON,
    or its records fail validation.
    """
    try:
        raw = json.loads(config.catalog_path.read_text(encoding="utf-8"))
        catalog = Catalog.from_payload(raw)
    except (OSError, ValueError) as exc:
        raise CatalogLoadError(f"could not load catalog from {config.catalog_path}") from exc

    logger.info("Loaded %d restaurants from %s", len(catalog), config.catalog_path)
    return catalog
