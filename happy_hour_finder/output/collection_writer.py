"""JSON / JSONL output for pipeline results."""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..models import Collection, EnrichedDeal, PipelineResult
from ..schedule.time_window import TimeWindow, compact_time_of
from ..utils.text import format_days, format_distance, format_time_range, walking_minutes


class CollectionWriter:
    """Serialize collections for API responses or offline snapshots."""

    def __init__(self):
        pass

    def _minutes_remaining(self, enriched: EnrichedDeal, now_local: datetime) -> Optional[int]:
        """Countdown for active deals, None otherwise."""
        if not enriched.is_active:
            return None

        window = TimeWindow.parse(enriched.deal.start_time, enriched.deal.end_time)
        if window is None:
            return None
        return window.minutes_remaining(compact_time_of(now_local))

    def _deal_to_record(self, enriched: EnrichedDeal, now_local: datetime) -> dict:
        """Convert EnrichedDeal to a flat record."""
        deal = enriched.deal
        venue = enriched.venue

        return {
            "id": deal.id,
            "venue_id": deal.venue_id,
            "venue_name": venue.name if venue else None,
            "venue": venue.display_fields if venue else {},
            "category": deal.category,
            "subcategory": deal.subcategory,
            "item_name": deal.item_name,
            "regular_price": deal.regular_price,
            "deal_price": deal.deal_price,
            "savings_pct": enriched.savings_pct,
            "valid_days": deal.valid_days,
            "days_display": format_days(deal.valid_days),
            "start_time": deal.start_time,
            "end_time": deal.end_time,
            "time_display": format_time_range(deal.start_time, deal.end_time),
            "is_active": enriched.is_active,
            "minutes_remaining": self._minutes_remaining(enriched, now_local),
            "distance_km": round(enriched.distance_km, 3) if enriched.distance_km is not None else None,
            "distance_display": format_distance(enriched.distance_km),
            "walking_minutes": walking_minutes(enriched.distance_km),
        }

    def _collection_to_record(self, collection: Collection, now_local: datetime) -> dict:
        return {
            "name": collection.name,
            "slug": collection.slug,
            "description": collection.description,
            "priority": collection.priority,
            "deals": [self._deal_to_record(deal, now_local) for deal in collection.deals],
        }

    def to_records(self, result: PipelineResult) -> dict:
        """Convert a PipelineResult to JSON-ready dicts."""
        return {
            "generated_at": result.generated_at.isoformat(),
            "radius_km": result.radius_km,
            "total_deals": result.total_deals,
            "active_deals": result.active_deals,
            "collections": [
                self._collection_to_record(c, result.generated_at) for c in result.collections
            ],
        }

    def dumps(self, result: PipelineResult) -> str:
        """Deterministic JSON string (sorted keys)."""
        return json.dumps(self.to_records(result), indent=2, sort_keys=True, ensure_ascii=False)

    def write(self, result: PipelineResult, output_path: str) -> None:
        """Write the result as one JSON document."""
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.dumps(result) + "\n")

    def write_jsonl(self, result: PipelineResult, output_path: str) -> None:
        """Write one collection per line."""
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            for collection in result.collections:
                record = self._collection_to_record(collection, result.generated_at)
                f.write(json.dumps(record, sort_keys=True, ensure_ascii=False) + "\n")
