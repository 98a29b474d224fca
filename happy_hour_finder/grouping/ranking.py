"""Rank order for deals inside a collection."""

import math
from typing import Iterable

from ..models import EnrichedDeal


def rank_key(deal: EnrichedDeal) -> tuple:
    """
    Sort key: active first, then manual sort_order, then distance, then price.

    Missing sort_order and missing distance sort last.
    """
    sort_order = deal.deal.sort_order
    return (
        0 if deal.is_active else 1,
        sort_order if sort_order is not None else math.inf,
        deal.distance_km if deal.distance_km is not None else math.inf,
        deal.deal.deal_price,
    )


def sort_by_rank(deals: Iterable[EnrichedDeal]) -> list[EnrichedDeal]:
    """Stable sort by rank_key; ties keep input order."""
    return sorted(deals, key=rank_key)
