"""Group deals into named, prioritised, de-duplicated collections."""

import logging
from typing import Optional, Sequence

from ..models import Collection, CollectionMeta, EnrichedDeal
from ..utils.text import normalize_slug, title_from_slug
from .ranking import sort_by_rank

logger = logging.getLogger(__name__)


class UnknownCollectionPolicy:
    """What to do with a tag that has no metadata."""

    AUTO_TITLE = "auto_title"
    DROP = "drop"

    ALL = (AUTO_TITLE, DROP)


class CollectionAssembler:
    """Assemble display collections from collection tags."""

    def __init__(
        self,
        metadata: dict[str, CollectionMeta],
        unknown_policy: str = UnknownCollectionPolicy.AUTO_TITLE,
        auto_title_priority: int = 999,
        active_collection: Optional[CollectionMeta] = None,
    ):
        """Initialize assembler.

        Args:
            metadata: Slug -> collection metadata
            unknown_policy: "auto_title" or "drop" for tags without metadata
            auto_title_priority: Priority given to auto-titled collections
            active_collection: Metadata for the computed "active nearby"
                collection; None disables it
        """
        if metadata is None:
            raise TypeError("metadata must not be None")
        if unknown_policy not in UnknownCollectionPolicy.ALL:
            raise ValueError(
                f"unknown_policy must be one of {UnknownCollectionPolicy.ALL}, got {unknown_policy!r}"
            )

        self.metadata = dict(metadata)
        self.unknown_policy = unknown_policy
        self.auto_title_priority = auto_title_priority
        self.active_collection = active_collection

        # Fallback lookup by normalized slug; first slug in sorted order wins
        self._by_normalized_slug: dict[str, CollectionMeta] = {}
        for slug in sorted(self.metadata):
            self._by_normalized_slug.setdefault(normalize_slug(slug), self.metadata[slug])

    def resolve_meta(self, tag: str) -> Optional[CollectionMeta]:
        """Find metadata for a tag, synthesising or dropping unknown tags per policy."""
        meta = self.metadata.get(tag) or self._by_normalized_slug.get(normalize_slug(tag))
        if meta is not None:
            return meta if meta.enabled else None

        if self.unknown_policy == UnknownCollectionPolicy.DROP:
            logger.debug(f"Dropping collection tag without metadata: {tag!r}")
            return None

        slug = normalize_slug(tag)
        if not slug:
            return None

        return CollectionMeta(
            slug=slug,
            display_name=title_from_slug(slug),
            priority=self.auto_title_priority,
        )

    def build_active_nearby(
        self, deals: Sequence[EnrichedDeal], meta: CollectionMeta
    ) -> Collection:
        """
        Build the "active nearby" collection from the radius-selected pool.

        Only active deals are eligible. At most one deal per venue is kept
        (best-ranked wins), unless every active deal comes from the same
        venue, in which case all of them are kept.
        """
        active = [deal for deal in sort_by_rank(deals) if deal.is_active]
        venue_ids = {deal.venue_id for deal in active}

        if len(venue_ids) <= 1:
            selected = active
        else:
            selected = []
            seen_venues = set()
            for deal in active:
                if deal.venue_id in seen_venues:
                    continue
                seen_venues.add(deal.venue_id)
                selected.append(deal)

        logger.debug(
            f"{meta.display_name}: {len(selected)} of {len(active)} active deals "
            f"from {len(venue_ids)} venues"
        )

        return Collection(
            name=meta.display_name,
            slug=meta.slug,
            description=meta.description,
            priority=meta.priority,
            diversify_by=meta.diversify_by,
            deals=selected,
        )

    def assemble(self, deals: Sequence[EnrichedDeal]) -> list[Collection]:
        """
        Assemble collections.

        Collections are unique by lowercase display name; tags sharing a
        display name merge into the collection created first. Empty
        collections are omitted. Output is sorted by priority, ties in
        creation order.
        """
        if deals is None:
            raise TypeError("deals must not be None")

        ranked = sort_by_rank(deals)
        buckets: dict[str, Collection] = {}
        seen_ids: dict[str, set] = {}

        active_key = None
        if self.active_collection is not None:
            active_key = self.active_collection.display_name.lower()
            buckets[active_key] = self.build_active_nearby(ranked, self.active_collection)

        for deal in ranked:
            for tag in sorted(set(deal.deal.tags)):
                meta = self.resolve_meta(tag)
                if meta is None:
                    continue

                key = meta.display_name.lower()
                if key == active_key:
                    # The active collection is computed, never tag-driven
                    continue

                collection = buckets.get(key)
                if collection is None:
                    collection = Collection(
                        name=meta.display_name,
                        slug=meta.slug,
                        description=meta.description,
                        priority=meta.priority,
                        diversify_by=meta.diversify_by,
                    )
                    buckets[key] = collection
                    seen_ids[key] = set()

                if deal.id in seen_ids[key]:
                    continue
                seen_ids[key].add(deal.id)
                collection.deals.append(deal)

        collections = [c for c in buckets.values() if c.deals]
        logger.info(f"Assembled {len(collections)} collections from {len(ranked)} deals")

        return sorted(collections, key=lambda c: c.priority)
