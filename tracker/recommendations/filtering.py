from __future__ import annotations

import unicodedata
from typing import Mapping

import pandas as pd

from .models import FilterCriteria, SortKey


def _collation_key(name: str) -> str:
    """Accent- and case-insensitive key; the raw casefold after NUL breaks ties."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold() + "\x00" + name.casefold()


def filter_restaurants(df: pd.DataFrame, criteria: FilterCriteria) -> pd.DataFrame:
    """Keep the rows satisfying every criterion that is set."""
    if df.empty:
        return df.copy()

    mask = pd.Series(True, index=df.index)

    if criteria.search:
        term = criteria.search.lower()
        searchable = (df["name"] + " " + df["cuisine"] + " " + df["address"]).str.lower()
        mask = mask & searchable.str.contains(term, regex=False)

    if criteria.cuisine:
        mask = mask & (df["cuisine"] == criteria.cuisine)

    if criteria.price_range:
        mask = mask & (df["price_range"] == criteria.price_range)

    if criteria.max_distance is not None:
        mask = mask & (df["distance"] <= criteria.max_distance)

    return df.loc[mask].copy()


def sort_restaurants(
    df: pd.DataFrame,
    sort: SortKey,
    ratings: Mapping[int, int] | None = None,
) -> pd.DataFrame:
    """
    Return a new frame ordered by ``sort``.

    Every ordering is stable, so rows that compare equal keep their input
    order. Price orders by the length of the tier symbol ("$" < "$$").
    """
    if df.empty:
        return df.copy()

    if sort is SortKey.name:
        return df.sort_values("name", key=lambda s: s.map(_collation_key), kind="stable")
    if sort is SortKey.distance:
        return df.sort_values("distance", kind="stable")
    if sort is SortKey.rating:
        ratings = ratings or {}
        return df.sort_values(
            "id",
            key=lambda ids: -ids.map(lambda rid: ratings.get(int(rid), 0)),
            kind="stable",
        )
    if sort is SortKey.price:
        return df.sort_values("price_range", key=lambda s: s.str.len(), kind="stable")
    raise ValueError(f"unknown sort key {sort!r}")
