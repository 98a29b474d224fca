"""Tiered search radius selection."""

import logging
from typing import Optional, Sequence

from ..models import EnrichedDeal

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_TIERS_KM = (5.0, 10.0, 15.0)


class RadiusExpander:
    """Pick the smallest radius tier that contains at least one active deal."""

    def __init__(self, tiers: Sequence[float] = DEFAULT_RADIUS_TIERS_KM):
        if tiers is None:
            raise TypeError("tiers must not be None")
        tiers = sorted(float(t) for t in tiers)
        if not tiers:
            raise ValueError("At least one radius tier is required")
        if tiers[0] <= 0:
            raise ValueError(f"Radius tiers must be positive, got {tiers}")
        self.tiers = tiers

    def within(self, deals: Sequence[EnrichedDeal], radius_km: float) -> list[EnrichedDeal]:
        """Deals at or inside the radius. Deals without a distance never qualify."""
        return [
            deal for deal in deals
            if deal.distance_km is not None and deal.distance_km <= radius_km
        ]

    def select(
        self, deals: Sequence[EnrichedDeal]
    ) -> tuple[list[EnrichedDeal], Optional[float]]:
        """
        Select deals by widening the radius until something is active.

        Returns:
            Tuple of (selected deals in input order, radius used in km). When
            no tier has an active deal, the smallest tier's subset is returned.
        """
        if deals is None:
            raise TypeError("deals must not be None")

        for radius in self.tiers:
            subset = self.within(deals, radius)
            if any(deal.is_active for deal in subset):
                logger.info(f"Radius {radius:g}km: {len(subset)} deals, active deals found")
                return subset, radius

        radius = self.tiers[0]
        subset = self.within(deals, radius)
        logger.info(f"No active deals within {self.tiers[-1]:g}km, falling back to {radius:g}km ({len(subset)} deals)")
        return subset, radius
