"""
Build display collections for one viewer position and instant.

Usage:
    python -m happy_hour_finder.cli.run_collections \
        --snapshot data/snapshot.json --lat 1.3000 --lng 103.8000

Output:
    output/collections.json (or --output)
"""

import argparse
import logging
import os
import sys
import time
import uuid
from pathlib import Path

from dateutil import parser as dateutil_parser
from dotenv import load_dotenv

from ..config_loader import Config, load_collection_metadata, load_config, load_snapshot
from ..models import ViewerLocation
from ..monitoring import DataQualityChecker, ProductionMonitor
from ..output import CollectionWriter
from ..pipeline import CollectionPipeline
from ..schedule.day_parser import DayParser

logger = logging.getLogger(__name__)


def setup_logging(config: Config):
    """Setup logging configuration."""
    log_file = config.LOG_FILE
    log_level = getattr(logging, config.LOG_LEVEL.upper())

    # Create logs directory
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.FileHandler(log_file), logging.StreamHandler(sys.stdout)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build happy hour collections")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config file (default: $HHF_CONFIG or config/config.yaml)"
    )
    parser.add_argument("--snapshot", required=True, help="JSON file with venues and deals")
    parser.add_argument("--lat", type=float, default=None, help="Viewer latitude")
    parser.add_argument("--lng", type=float, default=None, help="Viewer longitude")
    parser.add_argument(
        "--at",
        default=None,
        help="Reference time (ISO 8601). Naive times are venue-local. Default: now"
    )
    parser.add_argument(
        "--radius",
        type=float,
        action="append",
        default=None,
        help="Radius tier in km; repeat to override the configured ladder"
    )
    parser.add_argument("--output", default=None, help="Output JSON file")
    parser.add_argument("--jsonl", action="store_true", help="Write one collection per line")
    return parser


def main(argv=None):
    """Run the pipeline on a snapshot and write the collections."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    config_path = args.config or os.getenv("HHF_CONFIG", "config/config.yaml")
    config = load_config(config_path)
    setup_logging(config)

    if (args.lat is None) != (args.lng is None):
        logger.error("--lat and --lng must be given together")
        return 2

    metadata = load_collection_metadata(config.collections_path)
    deals, venues = load_snapshot(args.snapshot)
    logger.info(f"Loaded {len(deals)} deals, {len(venues)} venues, {len(metadata)} collection slugs")

    checker = DataQualityChecker(DayParser(wrap_ranges=config.WRAP_DAY_RANGES))
    monitor = ProductionMonitor(config.OUTPUT_DIR)
    stats = checker.check_dataset(deals, venues)
    monitor.alert_if_needed(stats)

    viewer = ViewerLocation(lat=args.lat, lng=args.lng) if args.lat is not None else None
    now = dateutil_parser.isoparse(args.at) if args.at else None

    run_id = str(uuid.uuid4())[:8]
    start_time = time.time()

    pipeline = CollectionPipeline(config, metadata)
    result = pipeline.run(deals, venues, viewer=viewer, now=now, radius_tiers=args.radius)

    writer = CollectionWriter()
    output_path = args.output or os.path.join(
        config.OUTPUT_DIR, "collections.jsonl" if args.jsonl else "collections.json"
    )
    if args.jsonl:
        writer.write_jsonl(result, output_path)
    else:
        writer.write(result, output_path)

    duration = time.time() - start_time
    monitor.log_run(
        run_id,
        config.model_dump(),
        {
            "collections": len(result.collections),
            "radius_km": result.radius_km,
            "total_deals": result.total_deals,
            "active_deals": result.active_deals,
            "data_status": stats.get("status"),
        },
        duration,
    )

    logger.info(f"✓ {len(result.collections)} collections written to {output_path}")
    for collection in result.collections:
        logger.info(f"  [{collection.priority}] {collection.name}: {len(collection.deals)} deals")

    return 0


if __name__ == "__main__":
    sys.exit(main())
