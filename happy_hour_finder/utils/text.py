"""Text processing and display formatting utilities."""

import re
import unicodedata
from typing import Optional

from ..schedule.time_window import parse_compact_time


def normalize_text(text: str) -> str:
    """Normalize text: lowercase, ASCII-fold, collapse whitespace."""
    # ASCII-fold (remove diacritics)
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")

    # Lowercase
    text = text.lower()

    # Collapse whitespace
    text = re.sub(r"\s+", " ", text)

    return text.strip()


def normalize_slug(tag: str) -> str:
    """Normalize a collection tag so 'Wine Deals' and 'wine-deals' both become 'wine_deals'."""
    slug = normalize_text(tag)
    slug = re.sub(r"[\s\-]+", "_", slug)
    return slug.strip("_")


def title_from_slug(slug: str) -> str:
    """Auto-title an unknown slug: 'beers_under_10' -> 'Beers Under 10'."""
    words = [word for word in slug.replace("_", " ").split(" ") if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def format_time_12h(time_str: str) -> Optional[str]:
    """Format '17:00' or '1700' as '5:00 PM'. Returns None if unparseable."""
    value = parse_compact_time(time_str)
    if value is None:
        return None

    hour, minute = divmod(value, 100)
    period = "PM" if 12 <= hour < 24 else "AM"
    hour = hour % 12
    hour = 12 if hour == 0 else hour  # Midnight and noon show as 12

    return f"{hour}:{minute:02d} {period}"


def format_time_range(start_time: str, end_time: str) -> str:
    """Display range, e.g. '5:00 PM - 8:00 PM'. Falls back to the raw strings."""
    start = format_time_12h(start_time) or start_time
    end = format_time_12h(end_time) or end_time
    return f"{start} - {end}"


def format_days(valid_days: str) -> str:
    """Human-readable day range."""
    lowered = normalize_text(valid_days)
    if lowered in ("all days", "everyday", "every day", "daily"):
        return "Every day"
    if lowered == "weekdays":
        return "Mon-Fri"
    if lowered == "weekends":
        return "Sat-Sun"
    return valid_days.strip()


def format_distance(distance_km: Optional[float]) -> Optional[str]:
    """'850m' below one kilometre, '1.2km' otherwise."""
    if distance_km is None:
        return None
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m"
    return f"{distance_km:.1f}km"


def walking_minutes(distance_km: Optional[float]) -> Optional[int]:
    """Approximate walking time at 5 km/h (12 minutes per km)."""
    if distance_km is None:
        return None
    return round(distance_km * 12)
