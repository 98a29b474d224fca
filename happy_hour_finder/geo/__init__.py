"""Geographic modules."""

from .distance import distance_km, has_valid_coordinates, haversine_km
from .radius_expander import DEFAULT_RADIUS_TIERS_KM, RadiusExpander

__all__ = [
    "DEFAULT_RADIUS_TIERS_KM",
    "RadiusExpander",
    "distance_km",
    "has_valid_coordinates",
    "haversine_km",
]
