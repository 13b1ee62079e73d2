from __future__ import annotations

from tracker.annotations.models import Annotation
from tracker.catalog.loader import Catalog
from tracker.catalog.models import Restaurant
from tracker.recommendations.models import FALLBACK_REASON, ScoredRestaurant
from tracker.recommendations.scoring import get_recommendations, score_candidates


def _restaurant(rid: int, **overrides) -> Restaurant:
    fields = {
        "id": rid,
        "name": f"Place {rid}",
        "cuisine": "Thai",
        "address": f"{rid} Main Street",
        "price_range": "$$",
        "distance": 1.0,
        "category": [],
    }
    fields.update(overrides)
    return Restaurant(**fields)


def _liked(rating: int = 5) -> Annotation:
    return Annotation(visited=True, rating=rating)


def _ids(recs: list[ScoredRestaurant]) -> list[int]:
    return [r.restaurant.id for r in recs]


def test_similar_italian_scenario():
    catalog = Catalog([
        _restaurant(1, name="Luigi's", cuisine="Italian", price_range="$$", distance=1, category=["pasta"]),
        _restaurant(2, name="Mario's", cuisine="Italian", price_range="$$", distance=2, category=["pasta"]),
    ])
    recs = get_recommendations(catalog, {1: _liked(5)})

    assert _ids(recs) == [2]
    # 5*3 cuisine + 5*2 price + 1*5 category + (3-2)*0.5 distance
    assert recs[0].recommendation_score == 30.5
    assert "Similar to Luigi's (Italian)" in recs[0].reasons
    assert recs[0].reason == "Similar to Luigi's (Italian)"


def test_empty_without_liked_restaurants():
    catalog = Catalog([_restaurant(i) for i in range(1, 30)])
    assert get_recommendations(catalog, {}) == []


def test_rating_below_four_is_not_liked():
    catalog = Catalog([_restaurant(1), _restaurant(2)])
    assert get_recommendations(catalog, {1: _liked(3)}) == []


def test_highly_rated_but_unvisited_is_not_liked():
    catalog = Catalog([_restaurant(1), _restaurant(2)])
    assert get_recommendations(catalog, {1: Annotation(rating=5, to_visit=True)}) == []


def test_visited_restaurants_are_never_candidates():
    catalog = Catalog([_restaurant(1), _restaurant(2), _restaurant(3)])
    recs = get_recommendations(catalog, {1: _liked(), 2: Annotation(visited=True)})
    assert _ids(recs) == [3]


def test_to_visit_status_does_not_exclude():
    catalog = Catalog([_restaurant(1), _restaurant(2)])
    recs = get_recommendations(catalog, {1: _liked(), 2: Annotation(to_visit=True)})
    assert _ids(recs) == [2]


def test_scores_accumulate_over_every_liked_restaurant():
    catalog = Catalog([
        _restaurant(1, name="A", cuisine="Thai", price_range="$"),
        _restaurant(2, name="B", cuisine="Thai", price_range="$$"),
        _restaurant(3, cuisine="Thai", price_range="$$", distance=3.0),
    ])
    recs = get_recommendations(catalog, {1: _liked(4), 2: _liked(5)})

    # liked A: 4*3 ; liked B: 5*3 + 5*2 ; distance: 0
    assert recs[0].recommendation_score == 37.0
    assert recs[0].reasons == ["Similar to A (Thai)", "Similar to B (Thai)"]


def test_shared_categories_weighted_by_rating():
    catalog = Catalog([
        _restaurant(1, cuisine="Thai", price_range="$", category=["spicy", "noodles", "late"]),
        _restaurant(2, cuisine="Lao", price_range="$$$", distance=3.0, category=["noodles", "spicy", "cheap"]),
    ])
    recs = get_recommendations(catalog, {1: _liked(4)})
    assert recs[0].recommendation_score == 8.0
    assert recs[0].reasons == []
    assert recs[0].reason == FALLBACK_REASON


def test_distance_penalty_can_drop_candidates():
    catalog = Catalog([
        _restaurant(1, cuisine="Thai", price_range="$"),
        _restaurant(2, cuisine="Greek", price_range="$$$$", distance=5.0),
        _restaurant(3, cuisine="Greek", price_range="$$$$", distance=3.0),
        _restaurant(4, cuisine="Greek", price_range="$$$$", distance=2.0),
    ])
    recs = get_recommendations(catalog, {1: _liked()})
    # 2 scores -1.0, 3 scores exactly 0, both dropped
    assert _ids(recs) == [4]
    assert recs[0].recommendation_score == 0.5


def test_ordered_by_score_with_catalog_order_on_ties():
    catalog = Catalog([
        _restaurant(1, cuisine="Thai", price_range="$"),
        _restaurant(2, cuisine="Greek", price_range="$$$", distance=1.0),
        _restaurant(3, cuisine="Thai", price_range="$$$", distance=1.0),
        _restaurant(4, cuisine="Greek", price_range="$$$", distance=1.0),
    ])
    recs = get_recommendations(catalog, {1: _liked()})
    assert _ids(recs) == [3, 2, 4]


def test_truncated_to_top_ten():
    catalog = Catalog(
        [_restaurant(1, cuisine="Thai")]
        + [_restaurant(i, cuisine="Thai", distance=i / 10) for i in range(2, 20)]
    )
    recs = get_recommendations(catalog, {1: _liked()})
    assert len(recs) == 10
    assert _ids(recs) == list(range(2, 12))


def test_score_candidates_frame_columns():
    catalog = Catalog([_restaurant(1), _restaurant(2)])
    df = score_candidates(catalog.frame, {1: _liked()})
    assert "_score" in df.columns
    assert "_reasons" in df.columns
    assert df["id"].tolist() == [2]


def test_score_candidates_empty_catalog():
    df = score_candidates(Catalog.empty().frame, {1: _liked()})
    assert df.empty
    assert "_score" in df.columns
