from __future__ import annotations

import logging
from typing import Mapping

import pandas as pd

from ..annotations.models import Annotation
from ..catalog.loader import Catalog
from .models import ScoredRestaurant

logger = logging.getLogger(__name__)

LIKED_MIN_RATING = 4
CUISINE_WEIGHT = 3
PRICE_WEIGHT = 2
DISTANCE_PIVOT = 3.0  # miles; farther than this is a penalty
DISTANCE_WEIGHT = 0.5
MAX_RECOMMENDATIONS = 10

SCORE_COLUMN = "_score"
REASONS_COLUMN = "_reasons"


def _annotation(annotations: Mapping[int, Annotation], restaurant_id) -> Annotation:
    return annotations.get(int(restaurant_id)) or Annotation()


def _score_row(row: pd.Series, liked: list[tuple[pd.Series, int]]) -> tuple[float, list[str]]:
    """Accumulate a candidate's score and reasons over every liked restaurant."""
    score = 0.0
    reasons: list[str] = []

    for liked_row, rating in liked:
        if row["cuisine"] == liked_row["cuisine"]:
            score += rating * CUISINE_WEIGHT
            reasons.append(f"Similar to {liked_row['name']} ({liked_row['cuisine']})")

        if row["price_range"] == liked_row["price_range"]:
            score += rating * PRICE_WEIGHT

        shared = [c for c in row["category"] if c in liked_row["category"]]
        score += len(shared) * rating

    # Closer is better, applied once per candidate
    score += (DISTANCE_PIVOT - float(row["distance"])) * DISTANCE_WEIGHT
    return score, reasons


def score_candidates(
    df: pd.DataFrame,
    annotations: Mapping[int, Annotation],
    limit: int = MAX_RECOMMENDATIONS,
) -> pd.DataFrame:
    """
    Rank unvisited restaurants by similarity to the user's liked visits.

    A restaurant is liked when it was visited and rated at least
    ``LIKED_MIN_RATING``. Without any liked restaurant the result is empty.
    The returned frame keeps the catalog columns and adds ``_score`` and
    ``_reasons``, ordered by descending score with catalog order on ties.
    """
    empty = df.iloc[0:0].copy()
    empty[SCORE_COLUMN] = pd.Series(dtype="float64")
    empty[REASONS_COLUMN] = pd.Series(dtype="object")

    liked: list[tuple[pd.Series, int]] = []
    for _, row in df.iterrows():
        ann = _annotation(annotations, row["id"])
        if ann.visited and ann.rating >= LIKED_MIN_RATING:
            liked.append((row, ann.rating))

    if not liked:
        return empty

    visited = df["id"].map(lambda rid: _annotation(annotations, rid).visited).astype(bool)
    candidates = df.loc[~visited].copy()
    if candidates.empty:
        return empty

    scored = [_score_row(row, liked) for _, row in candidates.iterrows()]
    candidates[SCORE_COLUMN] = pd.Series(
        [score for score, _ in scored], index=candidates.index, dtype="float64"
    )
    candidates[REASONS_COLUMN] = pd.Series(
        [reasons for _, reasons in scored], index=candidates.index, dtype="object"
    )

    candidates = candidates.loc[candidates[SCORE_COLUMN] > 0]
    top = candidates.sort_values(SCORE_COLUMN, key=lambda s: -s, kind="stable").head(limit)

    logger.debug("Scored %d candidates against %d liked restaurants", len(candidates), len(liked))
    return top


def get_recommendations(
    catalog: Catalog,
    annotations: Mapping[int, Annotation],
    limit: int = MAX_RECOMMENDATIONS,
) -> list[ScoredRestaurant]:
    top = score_candidates(catalog.frame, annotations, limit=limit)
    return to_scored_restaurants(top, catalog)


def to_scored_restaurants(df: pd.DataFrame, catalog: Catalog) -> list[ScoredRestaurant]:
    items: list[ScoredRestaurant] = []
    for _, row in df.iterrows():
        restaurant = catalog.get(row["id"])
        if restaurant is None:
            continue
        items.append(ScoredRestaurant(
            restaurant=restaurant,
            recommendation_score=float(row[SCORE_COLUMN]),
            reasons=list(row[REASONS_COLUMN]),
        ))
    return items
