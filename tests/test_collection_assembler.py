"""Tests for collection assembly."""

import pytest

from happy_hour_finder.grouping import CollectionAssembler, UnknownCollectionPolicy
from happy_hour_finder.models import CollectionMeta

ACTIVE = CollectionMeta(slug="active_nearby", display_name="Active Nearby", priority=1)


@pytest.fixture
def assembler(metadata):
    return CollectionAssembler(metadata, active_collection=ACTIVE)


def names(collections):
    return [c.name for c in collections]


def test_equivalent_tags_merge(assembler, make_enriched):
    deal = make_enriched(id=301, collection_tags="wine_deals,Wine Deals")

    collections = assembler.assemble([deal])

    wine = [c for c in collections if c.name.lower() == "wine deals"]
    assert len(wine) == 1
    assert [d.id for d in wine[0].deals] == [301]


def test_names_unique_case_insensitive(make_enriched):
    metadata = {
        "wine_deals": CollectionMeta(slug="wine_deals", display_name="Wine Deals", priority=5),
        "wine_specials": CollectionMeta(slug="wine_specials", display_name="WINE DEALS", priority=5),
    }
    assembler = CollectionAssembler(metadata)
    deals = [
        make_enriched(id=1, collection_tags="wine_deals"),
        make_enriched(id=2, collection_tags="wine_specials"),
    ]

    collections = assembler.assemble(deals)

    assert len(collections) == 1
    assert {d.id for d in collections[0].deals} == {1, 2}


def test_sorted_by_priority(assembler, make_enriched):
    deals = [
        make_enriched(id=1, collection_tags="wine_deals", is_active=False),
        make_enriched(id=2, collection_tags="cocktails_under_15", is_active=False),
        make_enriched(id=3, collection_tags="beers_under_10", is_active=False),
    ]

    collections = assembler.assemble(deals)

    assert names(collections) == ["Beers Under $10", "Cocktails Under $15", "Wine Deals"]
    priorities = [c.priority for c in collections]
    assert priorities == sorted(priorities)


def test_empty_collections_omitted(assembler, make_enriched):
    # Nothing active, so the active collection is empty and left out
    deals = [make_enriched(id=1, collection_tags="beers_under_10", is_active=False)]

    collections = assembler.assemble(deals)

    assert names(collections) == ["Beers Under $10"]
    assert all(c.deals for c in collections)


def test_no_deals(assembler):
    assert assembler.assemble([]) == []


def test_unknown_tag_auto_titled(metadata, make_enriched):
    assembler = CollectionAssembler(metadata, unknown_policy=UnknownCollectionPolicy.AUTO_TITLE)

    collections = assembler.assemble([make_enriched(id=1, collection_tags="late_night_pints")])

    assert names(collections) == ["Late Night Pints"]
    assert collections[0].priority == 999


def test_unknown_tag_dropped(metadata, make_enriched):
    assembler = CollectionAssembler(metadata, unknown_policy=UnknownCollectionPolicy.DROP)

    collections = assembler.assemble([make_enriched(id=1, collection_tags="late_night_pints")])

    assert collections == []


def test_disabled_metadata_ignored(assembler, make_enriched):
    deal = make_enriched(id=1, collection_tags="weekend_specials", is_active=False)

    assert assembler.assemble([deal]) == []


def test_deal_appears_once_per_collection(assembler, make_enriched):
    deal = make_enriched(id=1, collection_tags="beers_under_10,beers_under_10", is_active=False)

    collections = assembler.assemble([deal])

    assert [d.id for d in collections[0].deals] == [1]


def test_active_nearby_one_deal_per_venue(assembler, make_enriched):
    deals = [
        make_enriched(id=1, venue_id=1, distance_km=0.5, deal_price=9),
        make_enriched(id=2, venue_id=1, distance_km=0.5, deal_price=7),
        make_enriched(id=3, venue_id=2, distance_km=1.5),
        make_enriched(id=4, venue_id=3, distance_km=0.2, is_active=False),
    ]

    collections = assembler.assemble(deals)

    active = collections[0]
    assert active.name == "Active Nearby"
    # Cheaper deal wins the tie at venue 1; inactive deals are never included
    assert [d.id for d in active.deals] == [2, 3]


def test_active_nearby_single_venue_keeps_all(assembler, make_enriched):
    deals = [
        make_enriched(id=1, venue_id=1, item_name="Lager"),
        make_enriched(id=2, venue_id=1, item_name="IPA"),
    ]

    collections = assembler.assemble(deals)

    assert [d.id for d in collections[0].deals] == [1, 2]


def test_active_first_inside_collection(assembler, make_enriched):
    deals = [
        make_enriched(id=1, collection_tags="beers_under_10", is_active=False, distance_km=0.1),
        make_enriched(id=2, collection_tags="beers_under_10", is_active=True, distance_km=3.0),
    ]

    collections = assembler.assemble(deals)
    beers = next(c for c in collections if c.slug == "beers_under_10")

    assert [d.id for d in beers.deals] == [2, 1]


def test_tag_matching_active_name_is_skipped(metadata, make_enriched):
    metadata = dict(metadata)
    metadata["active_nearby"] = CollectionMeta(
        slug="active_nearby", display_name="Active Nearby", priority=1
    )
    assembler = CollectionAssembler(metadata, active_collection=ACTIVE)

    collections = assembler.assemble(
        [make_enriched(id=1, collection_tags="active_nearby", is_active=False)]
    )

    assert collections == []


def test_invalid_policy():
    with pytest.raises(ValueError):
        CollectionAssembler({}, unknown_policy="surface")


def test_none_input(assembler):
    with pytest.raises(TypeError):
        assembler.assemble(None)
