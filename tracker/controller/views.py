from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

import pandas as pd

from ..annotations.models import Annotation
from ..catalog.loader import Catalog
from ..recommendations.filtering import filter_restaurants, sort_restaurants
from ..recommendations.models import FALLBACK_REASON, FilterCriteria
from ..recommendations.scoring import REASONS_COLUMN, SCORE_COLUMN, score_candidates
from .models import Tab, TrackerStats, ViewItem

NO_RATING = "-"


@dataclass(frozen=True)
class TrackerContext:
    """Everything the view derivation reads; nothing here is mutated."""

    catalog: Catalog
    annotations: Mapping[int, Annotation]
    tab: Tab = Tab.all
    criteria: FilterCriteria = field(default_factory=FilterCriteria)

    def annotation(self, restaurant_id) -> Annotation:
        return self.annotations.get(int(restaurant_id)) or Annotation()


def status_for(annotation: Annotation) -> str | None:
    if annotation.visited:
        return "visited"
    if annotation.to_visit:
        return "to-visit"
    return None


def select_tab(ctx: TrackerContext) -> pd.DataFrame:
    df = ctx.catalog.frame

    if ctx.tab is Tab.visited:
        mask = df["id"].map(lambda rid: ctx.annotation(rid).visited).astype(bool)
        return df.loc[mask]
    if ctx.tab is Tab.to_visit:
        mask = df["id"].map(
            lambda rid: ctx.annotation(rid).to_visit and not ctx.annotation(rid).visited
        ).astype(bool)
        return df.loc[mask]
    if ctx.tab is Tab.recommendations:
        return score_candidates(df, ctx.annotations)
    return df


def derive_frame(ctx: TrackerContext) -> pd.DataFrame:
    """Tab selection, then filtering, then sorting, for every tab alike."""
    ratings = {rid: a.rating for rid, a in ctx.annotations.items()}
    df = select_tab(ctx)
    df = filter_restaurants(df, ctx.criteria)
    return sort_restaurants(df, ctx.criteria.sort, ratings)


def derive_view(ctx: TrackerContext) -> list[ViewItem]:
    df = derive_frame(ctx)
    scored = SCORE_COLUMN in df.columns

    items: list[ViewItem] = []
    for _, row in df.iterrows():
        restaurant = ctx.catalog.get(row["id"])
        if restaurant is None:
            continue
        annotation = ctx.annotation(row["id"])
        extra = {}
        if scored:
            reasons = list(row[REASONS_COLUMN])
            extra = {
                "recommendation_score": float(row[SCORE_COLUMN]),
                "recommendation_reasons": reasons,
                "recommendation_reason": reasons[0] if reasons else FALLBACK_REASON,
            }
        items.append(ViewItem(
            restaurant=restaurant,
            annotation=annotation,
            status=status_for(annotation),
            **extra,
        ))
    return items


def format_average(ratings: list[int]) -> str:
    """Mean to one decimal, rounding halves up like ``Number.toFixed``."""
    if not ratings:
        return NO_RATING
    mean = Decimal(sum(ratings) / len(ratings))
    return str(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def derive_stats(catalog: Catalog, annotations: Mapping[int, Annotation]) -> TrackerStats:
    per_restaurant = [
        annotations.get(r.id) or Annotation() for r in catalog.restaurants()
    ]
    return TrackerStats(
        total=len(per_restaurant),
        visited=sum(1 for a in per_restaurant if a.visited),
        to_visit=sum(1 for a in per_restaurant if a.to_visit and not a.visited),
        average_rating=format_average([a.rating for a in per_restaurant if a.rating > 0]),
    )
