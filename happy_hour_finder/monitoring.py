"""Data quality checks and run monitoring."""

import json
import logging
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from .geo.distance import has_valid_coordinates
from .models import Deal, Venue
from .schedule.day_parser import DayParser
from .schedule.time_window import parse_compact_time

logger = logging.getLogger(__name__)


class DataQualityChecker:
    """Check externally authored deal/venue data. Reports issues, never raises."""

    def __init__(self, day_parser: Optional[DayParser] = None):
        self.day_parser = day_parser or DayParser()

    def check_deal(self, deal: Deal, venue: Optional[Venue] = None) -> List[str]:
        """Check single deal for quality issues."""
        issues = []

        # Prices
        if deal.deal_price > deal.regular_price:
            issues.append(
                f"Deal price {deal.deal_price} above regular price {deal.regular_price}"
            )

        # Schedule
        if parse_compact_time(deal.start_time) is None:
            issues.append(f"Malformed start time: {deal.start_time!r}")
        if parse_compact_time(deal.end_time) is None:
            issues.append(f"Malformed end time: {deal.end_time!r}")

        if not deal.valid_days.strip():
            issues.append("Empty valid days")
        elif self.day_parser.is_reversed_range(deal.valid_days):
            issues.append(f"Reversed day range (wraps the week): {deal.valid_days!r}")
        elif not self.day_parser.parse(deal.valid_days):
            issues.append(f"Unrecognised valid days: {deal.valid_days!r}")

        # Venue
        if venue is None:
            issues.append(f"Unknown venue {deal.venue_id}")
        elif not has_valid_coordinates(venue.latitude, venue.longitude):
            issues.append(f"Venue {venue.id} has no usable coordinates")

        if not deal.tags:
            issues.append("No collection tags")

        return issues

    def check_dataset(self, deals: Sequence[Deal], venues: Sequence[Venue]) -> dict:
        """Check entire snapshot quality."""
        total_deals = len(deals)
        if total_deals == 0:
            return {"status": "ERROR", "message": "No deals found"}

        venue_map = {venue.id: venue for venue in venues}
        issues_by_deal = {}
        for deal in deals:
            deal_issues = self.check_deal(deal, venue_map.get(deal.venue_id))
            if deal_issues:
                issues_by_deal[deal.id] = deal_issues

        id_counts = Counter(deal.id for deal in deals)
        duplicate_ids = sorted(deal_id for deal_id, count in id_counts.items() if count > 1)

        stats = {
            "total_deals": total_deals,
            "total_venues": len(venues),
            "deals_with_issues": len(issues_by_deal),
            "deals_with_issues_pct": len(issues_by_deal) / total_deals * 100,
            "duplicate_deal_ids": duplicate_ids,
            "category_distribution": dict(Counter(deal.category for deal in deals)),
            "tag_distribution": dict(Counter(tag for deal in deals for tag in deal.tags)),
            "issues": issues_by_deal,
        }

        # Quality thresholds
        quality_issues = []
        if duplicate_ids:
            quality_issues.append(f"Duplicate deal ids: {duplicate_ids}")

        if stats["deals_with_issues_pct"] > 20:
            quality_issues.append(
                f"High issue rate: {stats['deals_with_issues_pct']:.1f}% of deals (threshold: 20%)"
            )

        stats["quality_issues"] = quality_issues
        stats["status"] = "WARNING" if quality_issues else "OK"

        return stats


class ProductionMonitor:
    """Monitor pipeline runs."""

    def __init__(self, output_dir: str = "output"):
        self.output_dir = Path(output_dir)
        self.metrics_file = self.output_dir / "metrics.jsonl"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def log_run(
        self,
        run_id: str,
        config: dict,
        stats: dict,
        duration_seconds: float,
        status: str = "SUCCESS",
    ):
        """Log metrics for a pipeline run."""
        metrics = {
            "run_id": run_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": status,
            "duration_seconds": duration_seconds,
            "config": {
                "timezone": config.get("TIMEZONE"),
                "radius_tiers_km": config.get("RADIUS_TIERS_KM"),
                "unknown_collection_policy": config.get("UNKNOWN_COLLECTION_POLICY"),
            },
            "stats": stats,
        }

        with open(self.metrics_file, "a") as f:
            f.write(json.dumps(metrics, default=str) + "\n")

        logger.info(f"Logged metrics for run {run_id}")

    def get_recent_runs(self, n: int = 10) -> List[dict]:
        """Get recent run metrics."""
        if not self.metrics_file.exists():
            return []

        with open(self.metrics_file, "r") as f:
            lines = f.readlines()

        return [json.loads(line) for line in lines[-n:]]

    def alert_if_needed(self, stats: dict):
        """Log alerts if quality issues detected."""
        if stats.get("status") == "ERROR":
            self._send_alert(level="ERROR", message=f"Data check failed: {stats.get('message')}")
        elif stats.get("quality_issues"):
            self._send_alert(
                level="WARNING",
                message=f"Quality issues detected: {', '.join(stats['quality_issues'])}",
            )

    def _send_alert(self, level: str, message: str):
        logger.warning(f"ALERT [{level}]: {message}")
