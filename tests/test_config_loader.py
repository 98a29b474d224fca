"""Tests for configuration, metadata and snapshot loading."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from happy_hour_finder.config_loader import (
    Config,
    load_collection_metadata,
    load_config,
    load_snapshot,
)
from happy_hour_finder.models import CollectionMeta, Deal

ROOT = Path(__file__).parent.parent


def test_defaults():
    config = Config()

    assert config.TIMEZONE == "Asia/Singapore"
    assert config.RADIUS_TIERS_KM == [5.0, 10.0, 15.0]
    assert config.UNKNOWN_COLLECTION_POLICY == "auto_title"
    assert config.ACTIVE_COLLECTION.display_name == "Active Nearby"
    assert config.ACTIVE_COLLECTION.priority == 1


def test_load_repo_config():
    config = load_config(ROOT / "config" / "config.yaml")

    assert config.WRAP_DAY_RANGES is False
    assert config.collections_path.name == "collections.yaml"
    assert config.collections_path.parent.name == "config"


def test_load_yaml_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("RADIUS_TIERS_KM: [10, 2]\nUNKNOWN_COLLECTION_POLICY: drop\n")

    config = load_config(path)

    assert config.RADIUS_TIERS_KM == [2.0, 10.0]
    assert config.UNKNOWN_COLLECTION_POLICY == "drop"


def test_empty_yaml_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert load_config(path) == Config()


@pytest.mark.parametrize(
    "overrides",
    [
        {"RADIUS_TIERS_KM": []},
        {"RADIUS_TIERS_KM": [5, 0]},
        {"UNKNOWN_COLLECTION_POLICY": "surface"},
        {"CACHE_TIME_BUCKET_MINUTES": 0},
    ],
)
def test_invalid_config(overrides):
    with pytest.raises(ValidationError):
        Config(**overrides)


def test_absolute_collections_file(tmp_path):
    target = tmp_path / "meta.yaml"
    config = Config(COLLECTIONS_FILE=str(target))

    assert config.collections_path == target


def test_load_collection_metadata():
    metadata = load_collection_metadata(ROOT / "config" / "collections.yaml")

    assert metadata["beers_under_10"].display_name == "Beers Under $10"
    assert metadata["bottles_under_100"].diversify_by == "venue_id"
    assert metadata["weekend_specials"].enabled is False
    assert all(slug == meta.slug for slug, meta in metadata.items())


def test_metadata_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_collection_metadata(tmp_path / "nope.yaml")


def test_metadata_bad_diversify_key(tmp_path):
    path = tmp_path / "collections.yaml"
    path.write_text("beer:\n  display_name: Beer\n  diversify_by: colour\n")

    with pytest.raises(ValidationError):
        load_collection_metadata(path)


def test_load_snapshot(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({
        "venues": [{"id": 1, "name": "Bar", "latitude": 1.3, "longitude": 103.8}],
        "deals": [{
            "id": 7, "venue_id": 1, "item_name": "Lager",
            "regular_price": 10, "deal_price": 6,
            "valid_days": None, "start_time": 1700, "end_time": "20:00",
            "collection_tags": " beers_under_10 , ,craft_beer",
        }],
    }))

    deals, venues = load_snapshot(path)

    assert venues[0].name == "Bar"
    deal = deals[0]
    assert deal.valid_days == ""
    assert deal.start_time == "1700"
    assert deal.tags == ["beers_under_10", "craft_beer"]


def test_snapshot_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_snapshot(tmp_path / "missing.json")


def test_negative_price_rejected():
    with pytest.raises(ValidationError):
        Deal(id=1, venue_id=1, item_name="Lager", deal_price=-1)


def test_models_are_frozen():
    meta = CollectionMeta(slug="x", display_name="X")
    with pytest.raises(ValidationError):
        meta.priority = 5
