"""Main collection pipeline orchestrator."""

import logging
from datetime import datetime
from typing import Optional, Sequence

from .cache import ResultCache, make_cache_key
from .config_loader import Config
from .enrichment import DealEnricher
from .geo.radius_expander import RadiusExpander
from .grouping import CollectionAssembler, Diversifier
from .models import (
    Collection,
    CollectionMeta,
    Deal,
    EnrichedDeal,
    PipelineResult,
    Venue,
    ViewerLocation,
)
from .schedule.time_resolver import TimeResolver

logger = logging.getLogger(__name__)


class CollectionPipeline:
    """Deals + venues + viewer + instant -> ordered display collections.

    Stateless between calls: the same inputs and instant always produce the
    same result. The only optional collaborator with state is an injected
    ResultCache.
    """

    def __init__(
        self,
        config: Config,
        metadata: dict[str, CollectionMeta],
        cache: Optional[ResultCache] = None,
    ):
        self.config = config
        self.metadata = metadata
        self.cache = cache

        self.resolver = TimeResolver(
            timezone_name=config.TIMEZONE,
            wrap_day_ranges=config.WRAP_DAY_RANGES,
        )
        self.enricher = DealEnricher(self.resolver)
        self.assembler = CollectionAssembler(
            metadata,
            unknown_policy=config.UNKNOWN_COLLECTION_POLICY,
            auto_title_priority=config.AUTO_TITLE_PRIORITY,
            active_collection=config.ACTIVE_COLLECTION,
        )
        self.diversifiers = {}

    def _diversifier(self, key: str) -> Diversifier:
        if key not in self.diversifiers:
            self.diversifiers[key] = Diversifier(key)
        return self.diversifiers[key]

    def select(
        self,
        enriched: Sequence[EnrichedDeal],
        viewer: Optional[ViewerLocation],
        radius_tiers: Sequence[float],
    ) -> tuple[list[EnrichedDeal], Optional[float]]:
        """Apply the radius ladder. Without a viewer every deal is kept."""
        if viewer is None:
            return list(enriched), None
        return RadiusExpander(radius_tiers).select(enriched)

    def diversify(self, collection: Collection) -> Collection:
        """Return a copy of the collection with its deals reordered for display."""
        deals = self._diversifier(collection.diversify_by).diversify(collection.deals)
        return collection.model_copy(update={"deals": deals})

    def run(
        self,
        deals: Sequence[Deal],
        venues: Sequence[Venue],
        viewer: Optional[ViewerLocation] = None,
        now: Optional[datetime] = None,
        radius_tiers: Optional[Sequence[float]] = None,
        data_version: Optional[str] = None,
    ) -> PipelineResult:
        """
        Run the pipeline.

        Args:
            deals: Deal snapshot
            venues: Venue snapshot (joined on venue_id)
            viewer: Viewer position; None disables distance filtering
            now: Reference instant; aware datetimes are converted to the
                venue timezone, naive ones are taken as local. Defaults to
                the current time.
            radius_tiers: Override for the configured radius ladder (km)
            data_version: Version of the deal data; required for caching

        Returns:
            PipelineResult with collections ordered by priority
        """
        if deals is None:
            raise TypeError("deals must not be None")
        if venues is None:
            raise TypeError("venues must not be None")

        tiers = list(radius_tiers) if radius_tiers is not None else list(self.config.RADIUS_TIERS_KM)
        now_local = self.resolver.now_local(now)

        cache_key = None
        if self.cache is not None and data_version is not None:
            cache_key = make_cache_key(
                viewer,
                now_local,
                data_version,
                tiers,
                coord_precision=self.config.CACHE_COORD_PRECISION,
                bucket_minutes=self.config.CACHE_TIME_BUCKET_MINUTES,
            )
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for {cache_key}")
                # Activity flags may be up to one time bucket old
                return cached.model_copy(update={"generated_at": now_local}, deep=True)

        # STEP 1: Enrich with is_active and distance
        enriched = self.enricher.enrich(deals, venues, viewer, now_local)
        active_count = sum(1 for deal in enriched if deal.is_active)
        logger.info(
            f"{len(enriched)} deals at {now_local:%a %H:%M} ({self.config.TIMEZONE}), "
            f"{active_count} active"
        )

        # STEP 2: Radius tiers
        selected, radius = self.select(enriched, viewer, tiers)

        # STEP 3: Collections
        collections = self.assembler.assemble(selected)

        # STEP 4: Diversify each collection for display
        collections = [self.diversify(collection) for collection in collections]

        result = PipelineResult(
            collections=collections,
            radius_km=radius,
            generated_at=now_local,
            total_deals=len(selected),
            active_deals=sum(1 for deal in selected if deal.is_active),
        )

        if cache_key is not None:
            self.cache.set(cache_key, result.model_copy(deep=True))

        return result
