"""Join deals with venues and attach is_active / distance_km."""

import logging
from datetime import datetime
from typing import Optional, Sequence

from .geo.distance import distance_km
from .models import Deal, EnrichedDeal, Venue, ViewerLocation
from .schedule.time_resolver import TimeResolver

logger = logging.getLogger(__name__)


class DealEnricher:
    """Produce new EnrichedDeal records; inputs are never mutated."""

    def __init__(self, resolver: TimeResolver):
        self.resolver = resolver

    def enrich_one(
        self,
        deal: Deal,
        venue: Optional[Venue],
        viewer: Optional[ViewerLocation],
        now_local: datetime,
    ) -> EnrichedDeal:
        """Enrich a single deal."""
        distance = None
        if viewer is not None and venue is not None:
            distance = distance_km(viewer.lat, viewer.lng, venue.latitude, venue.longitude)

        return EnrichedDeal(
            deal=deal,
            venue=venue,
            is_active=self.resolver.is_active(deal, now_local),
            distance_km=distance,
        )

    def enrich(
        self,
        deals: Sequence[Deal],
        venues: Sequence[Venue],
        viewer: Optional[ViewerLocation],
        now_local: datetime,
    ) -> list[EnrichedDeal]:
        """
        Enrich all deals.

        Deals referencing an unknown venue are kept without venue or
        distance, so they can still appear when no viewer location is given.

        Returns:
            List of EnrichedDeal in input order
        """
        if deals is None:
            raise TypeError("deals must not be None")
        if venues is None:
            raise TypeError("venues must not be None")

        venue_map = {venue.id: venue for venue in venues}

        enriched = []
        missing_venues = 0
        for deal in deals:
            venue = venue_map.get(deal.venue_id)
            if venue is None:
                missing_venues += 1
                logger.debug(f"Deal {deal.id} references unknown venue {deal.venue_id}")
            enriched.append(self.enrich_one(deal, venue, viewer, now_local))

        if missing_venues:
            logger.warning(f"{missing_venues} deals reference unknown venues")

        return enriched
