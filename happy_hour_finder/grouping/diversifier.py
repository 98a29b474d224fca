"""Reorder ranked deals so identical drinks (or venues) are not adjacent."""

import logging
from typing import Any, Callable, Sequence

from ..models import DiversifyKey, EnrichedDeal
from ..utils.text import normalize_text

logger = logging.getLogger(__name__)


def _item_name_key(deal: EnrichedDeal) -> Any:
    return normalize_text(deal.item_name)


def _venue_key(deal: EnrichedDeal) -> Any:
    return deal.venue_id


KEY_FUNCTIONS: dict[str, Callable[[EnrichedDeal], Any]] = {
    DiversifyKey.ITEM_NAME: _item_name_key,
    DiversifyKey.VENUE_ID: _venue_key,
}


class Diversifier:
    """Greedy adjacency diversification.

    Repeatedly emits the highest-ranked remaining deal whose key differs from
    the one just emitted, falling back to the highest-ranked deal when every
    candidate repeats the key. Every remaining deal is a candidate; the
    active-first input order keeps active deals ahead unless a repeat forces
    a swap.
    """

    def __init__(self, key: str = DiversifyKey.ITEM_NAME):
        if key not in KEY_FUNCTIONS:
            raise ValueError(f"Unknown diversify key {key!r}, expected one of {DiversifyKey.ALL}")
        self.key = key
        self.key_fn = KEY_FUNCTIONS[key]

    def diversify(self, ranked: Sequence[EnrichedDeal]) -> list[EnrichedDeal]:
        """
        Reorder deals already sorted by rank.

        Args:
            ranked: Deals, highest rank first

        Returns:
            New list with the same deals
        """
        if ranked is None:
            raise TypeError("ranked must not be None")

        remaining = list(ranked)
        result: list[EnrichedDeal] = []
        last_key = None
        forced_repeats = 0

        while remaining:
            selected_index = 0

            if result:
                for i, deal in enumerate(remaining):
                    if self.key_fn(deal) != last_key:
                        selected_index = i
                        break

            selected = remaining.pop(selected_index)
            selected_key = self.key_fn(selected)
            if result and selected_key == last_key:
                forced_repeats += 1

            result.append(selected)
            last_key = selected_key

        if forced_repeats:
            logger.debug(f"Diversify by {self.key}: {forced_repeats} unavoidable adjacent repeats")

        return result
