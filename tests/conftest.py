"""Shared fixtures for the happy hour finder test suite."""

import pytest

from happy_hour_finder.models import CollectionMeta, Deal, EnrichedDeal, Venue


@pytest.fixture
def make_deal():
    """Factory that builds Deal models with sensible defaults.

    Any keyword argument overrides the default.
    """

    def _make(
        *,
        id=1,
        venue_id=1,
        item_name="Lager",
        category="Beer",
        regular_price=14.0,
        deal_price=8.0,
        valid_days="all days",
        start_time="08:00",
        end_time="23:00",
        collection_tags="",
        **overrides,
    ):
        return Deal(
            id=id,
            venue_id=venue_id,
            item_name=item_name,
            category=category,
            regular_price=regular_price,
            deal_price=deal_price,
            valid_days=valid_days,
            start_time=start_time,
            end_time=end_time,
            collection_tags=collection_tags,
            **overrides,
        )

    return _make


@pytest.fixture
def make_venue():
    def _make(*, id=1, name="Harbour Taproom", latitude=1.3000, longitude=103.8000, **overrides):
        return Venue(id=id, name=name, latitude=latitude, longitude=longitude, **overrides)

    return _make


@pytest.fixture
def make_enriched(make_deal):
    """Factory for EnrichedDeal with explicit is_active / distance_km."""

    def _make(*, is_active=True, distance_km=1.0, venue=None, **deal_fields):
        return EnrichedDeal(
            deal=make_deal(**deal_fields),
            venue=venue,
            is_active=is_active,
            distance_km=distance_km,
        )

    return _make


@pytest.fixture
def metadata():
    return {
        "beers_under_10": CollectionMeta(
            slug="beers_under_10", display_name="Beers Under $10", priority=2
        ),
        "wine_deals": CollectionMeta(
            slug="wine_deals", display_name="Wine Deals", priority=22
        ),
        "cocktails_under_15": CollectionMeta(
            slug="cocktails_under_15", display_name="Cocktails Under $15", priority=3
        ),
        "weekend_specials": CollectionMeta(
            slug="weekend_specials", display_name="Weekend Specials", priority=60, enabled=False
        ),
    }
