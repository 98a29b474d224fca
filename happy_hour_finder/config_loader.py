"""Configuration loader."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from .models import CollectionMeta, Deal, Venue


class Config(BaseModel):
    """Application configuration."""

    TIMEZONE: str = Field(default="Asia/Singapore")
    RADIUS_TIERS_KM: list[float] = Field(default=[5.0, 10.0, 15.0])
    WRAP_DAY_RANGES: bool = Field(default=False)
    UNKNOWN_COLLECTION_POLICY: str = Field(default="auto_title")
    AUTO_TITLE_PRIORITY: int = Field(default=999)
    ACTIVE_COLLECTION: CollectionMeta = Field(
        default_factory=lambda: CollectionMeta(
            slug="active_nearby",
            display_name="Active Nearby",
            description="Happy hour deals active right now near your location",
            priority=1,
        )
    )
    CACHE_COORD_PRECISION: int = Field(default=3)
    CACHE_TIME_BUCKET_MINUTES: int = Field(default=5)
    COLLECTIONS_FILE: str = Field(default="collections.yaml")
    OUTPUT_DIR: str = Field(default="output")
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/happy_hour_finder.log")

    @field_validator("RADIUS_TIERS_KM")
    @classmethod
    def _positive_tiers(cls, value: list[float]) -> list[float]:
        if not value:
            raise ValueError("RADIUS_TIERS_KM must not be empty")
        if any(tier <= 0 for tier in value):
            raise ValueError(f"RADIUS_TIERS_KM must be positive, got {value}")
        return sorted(value)

    @field_validator("UNKNOWN_COLLECTION_POLICY")
    @classmethod
    def _known_policy(cls, value: str) -> str:
        if value not in ("auto_title", "drop"):
            raise ValueError(f"UNKNOWN_COLLECTION_POLICY must be 'auto_title' or 'drop', got {value!r}")
        return value

    @field_validator("CACHE_TIME_BUCKET_MINUTES")
    @classmethod
    def _positive_bucket(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("CACHE_TIME_BUCKET_MINUTES must be positive")
        return value

    @property
    def config_dir(self) -> Path:
        """Return config directory path."""
        return Path(__file__).parent.parent / "config"

    @property
    def collections_path(self) -> Path:
        """Return path to the collection metadata file."""
        path = Path(self.COLLECTIONS_FILE)
        if path.is_absolute():
            return path
        return self.config_dir / path


def load_config(config_path: str) -> Config:
    """Load configuration from YAML file."""
    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}
    return Config(**data)


def load_collection_metadata(path: Any) -> dict[str, CollectionMeta]:
    """
    Load collection metadata.

    The file is a YAML mapping of slug -> {display_name, description,
    priority, enabled, diversify_by}.
    """
    metadata_path = Path(path)
    if not metadata_path.exists():
        raise FileNotFoundError(f"Collection metadata not found: {metadata_path}")

    with open(metadata_path, "r") as f:
        raw = yaml.safe_load(f) or {}

    return {
        str(slug): CollectionMeta(slug=str(slug), **(fields or {}))
        for slug, fields in raw.items()
    }


def load_snapshot(path: Any) -> tuple[list[Deal], list[Venue]]:
    """Load a JSON snapshot {"venues": [...], "deals": [...]}."""
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        raise FileNotFoundError(f"Snapshot not found: {snapshot_path}")

    with open(snapshot_path, "r") as f:
        data = json.load(f)

    venues = [Venue(**record) for record in data.get("venues", [])]
    deals = [Deal(**record) for record in data.get("deals", [])]
    return deals, venues
