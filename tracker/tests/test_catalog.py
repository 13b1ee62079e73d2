from __future__ import annotations

import json
from pathlib import Path

import pytest

from tracker.annotations.backends import InMemoryBackend
from tracker.catalog.config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from tracker.catalog.loader import CANONICAL_COLUMNS, Catalog, CatalogLoadError, load_catalog
from tracker.controller.controller import build_controller


def _write(tmp_path: Path, payload) -> CatalogConfig:
    path = tmp_path / "restaurants.json"
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload)
    return CatalogConfig(catalog_path=path)


def _record(rid: int, **overrides) -> dict:
    record = {
        "id": rid,
        "name": f"Place {rid}",
        "cuisine": "Thai",
        "address": f"{rid} Main Street",
        "priceRange": "$$",
        "distance": 1.5,
        "category": ["noodles"],
    }
    record.update(overrides)
    return record


def test_bundled_catalog_loads():
    catalog = load_catalog(DEFAULT_CATALOG_CONFIG)
    assert len(catalog) > 0
    assert list(catalog.frame.columns) == CANONICAL_COLUMNS


def test_load_catalog_reads_wire_field_names(tmp_path: Path):
    cfg = _write(tmp_path, {"restaurants": [_record(1, priceRange="$$$", distance=2)]})
    catalog = load_catalog(cfg)

    restaurant = catalog.get(1)
    assert restaurant is not None
    assert restaurant.price_range == "$$$"
    assert restaurant.distance == 2.0
    assert catalog.frame.loc[0, "price_range"] == "$$$"


def test_catalog_preserves_source_order(tmp_path: Path):
    cfg = _write(tmp_path, {"restaurants": [_record(3), _record(1), _record(2)]})
    catalog = load_catalog(cfg)
    assert [r.id for r in catalog.restaurants()] == [3, 1, 2]
    assert catalog.frame["id"].tolist() == [3, 1, 2]


def test_missing_file_raises_load_error(tmp_path: Path):
    cfg = CatalogConfig(catalog_path=tmp_path / "nope.json")
    with pytest.raises(CatalogLoadError):
        load_catalog(cfg)


def test_malformed_json_raises_load_error(tmp_path: Path):
    cfg = _write(tmp_path, "{not json")
    with pytest.raises(CatalogLoadError):
        load_catalog(cfg)


def test_missing_restaurants_field_raises_load_error(tmp_path: Path):
    cfg = _write(tmp_path, {"places": []})
    with pytest.raises(CatalogLoadError):
        load_catalog(cfg)


def test_duplicate_ids_rejected(tmp_path: Path):
    cfg = _write(tmp_path, {"restaurants": [_record(1), _record(1)]})
    with pytest.raises(CatalogLoadError):
        load_catalog(cfg)


def test_negative_distance_rejected(tmp_path: Path):
    cfg = _write(tmp_path, {"restaurants": [_record(1, distance=-0.5)]})
    with pytest.raises(CatalogLoadError):
        load_catalog(cfg)


def test_empty_catalog_has_canonical_columns():
    catalog = Catalog.empty()
    assert len(catalog) == 0
    assert catalog.frame.empty
    assert list(catalog.frame.columns) == CANONICAL_COLUMNS


def test_frame_is_a_copy(tmp_path: Path):
    catalog = load_catalog(_write(tmp_path, {"restaurants": [_record(1)]}))
    frame = catalog.frame
    frame.loc[0, "name"] = "Changed"
    assert catalog.frame.loc[0, "name"] == "Place 1"


def test_cuisines_in_first_seen_order(tmp_path: Path):
    cfg = _write(tmp_path, {"restaurants": [
        _record(1, cuisine="Mexican"),
        _record(2, cuisine="Italian"),
        _record(3, cuisine="Mexican"),
    ]})
    assert load_catalog(cfg).cuisines() == ["Mexican", "Italian"]


def test_price_ranges_ordered_by_tier(tmp_path: Path):
    cfg = _write(tmp_path, {"restaurants": [
        _record(1, priceRange="$$$"),
        _record(2, priceRange="$"),
        _record(3, priceRange="$$"),
        _record(4, priceRange="$"),
    ]})
    assert load_catalog(cfg).price_ranges() == ["$", "$$", "$$$"]


def test_unknown_id_lookup_returns_none():
    assert Catalog.empty().get(42) is None


# ── Startup behaviour ────────────────────────────────────────────────────


def test_build_controller_survives_missing_catalog(tmp_path: Path):
    cfg = CatalogConfig(catalog_path=tmp_path / "missing.json")
    controller = build_controller(catalog_config=cfg, backend=InMemoryBackend())

    assert controller.load_error == cfg.load_error_message
    assert len(controller.catalog) == 0
    assert controller.get_view() == []
    stats = controller.get_stats()
    assert stats.total == 0
    assert stats.average_rating == "-"


def test_build_controller_without_error(tmp_path: Path):
    cfg = _write(tmp_path, {"restaurants": [_record(1), _record(2)]})
    controller = build_controller(catalog_config=cfg, backend=InMemoryBackend())
    assert controller.load_error is None
    assert len(controller.get_view()) == 2
