"""Great-circle distance between viewer and venue."""

import math
from typing import Optional

EARTH_RADIUS_KM = 6371.0


def has_valid_coordinates(lat: Optional[float], lng: Optional[float]) -> bool:
    """True if both values are finite and within latitude/longitude bounds."""
    if lat is None or lng is None:
        return False
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometres on a 6371 km sphere."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Clamp rounding noise so asin never sees a value above 1
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def distance_km(
    viewer_lat: Optional[float],
    viewer_lng: Optional[float],
    venue_lat: Optional[float],
    venue_lng: Optional[float],
) -> Optional[float]:
    """Distance from viewer to venue, None when either point lacks usable coordinates."""
    if not has_valid_coordinates(viewer_lat, viewer_lng):
        return None
    if not has_valid_coordinates(venue_lat, venue_lng):
        return None
    return haversine_km(float(viewer_lat), float(viewer_lng), float(venue_lat), float(venue_lng))
