"""Happy hour deal directory: activity, distance, radius tiers and display collections."""

from .config_loader import Config, load_collection_metadata, load_config, load_snapshot
from .models import Collection, CollectionMeta, Deal, EnrichedDeal, PipelineResult, Venue, ViewerLocation
from .pipeline import CollectionPipeline

__all__ = [
    "Collection",
    "CollectionMeta",
    "CollectionPipeline",
    "Config",
    "Deal",
    "EnrichedDeal",
    "PipelineResult",
    "Venue",
    "ViewerLocation",
    "load_collection_metadata",
    "load_config",
    "load_snapshot",
]
