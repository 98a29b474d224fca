"""Parse free-text valid_days into a set of weekday indices."""

import logging
import re
from datetime import datetime

logger = logging.getLogger(__name__)

# Canonical ordering, Sun=0 .. Sat=6
DAY_ABBREVIATIONS = ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]
ALL_DAYS = frozenset(range(7))
WEEKDAYS = frozenset(range(1, 6))
WEEKENDS = frozenset({0, 6})

_DAY = r"(sun|mon|tue|wed|thu|fri|sat)[a-z]*"


def day_index(moment: datetime) -> int:
    """Weekday index of a datetime in the Sun=0 .. Sat=6 ordering."""
    # datetime.weekday() is Mon=0 .. Sun=6
    return (moment.weekday() + 1) % 7


class DayParser:
    """Turn strings like 'mon-fri', 'Tue,Thu' or 'all days' into weekday sets."""

    def __init__(self, wrap_ranges: bool = False):
        """
        Args:
            wrap_ranges: Treat reversed ranges such as 'fri-mon' as wrapping
                across the week boundary. Off by default: a reversed range
                matches no day.
        """
        self.wrap_ranges = wrap_ranges

        self.all_day_patterns = [
            r"all",
            r"every\s*day",
            r"daily",
        ]
        self.range_pattern = re.compile(rf"\b{_DAY}\s*(?:-|–|\bto\b)\s*{_DAY}")
        self.day_pattern = re.compile(rf"\b{_DAY}")

    def parse(self, valid_days: str) -> frozenset[int]:
        """
        Parse valid_days text.

        Returns:
            Frozen set of weekday indices (Sun=0 .. Sat=6); empty when the
            text names no recognisable day.
        """
        if not valid_days or not valid_days.strip():
            return frozenset()

        text = valid_days.lower()

        for pattern in self.all_day_patterns:
            if re.search(pattern, text):
                return ALL_DAYS

        days: set[int] = set()
        if "weekday" in text:
            days |= WEEKDAYS
        if "weekend" in text:
            days |= WEEKENDS

        # Ranges first, then strip them so their endpoints are not re-read as single days
        for match in self.range_pattern.finditer(text):
            start = DAY_ABBREVIATIONS.index(match.group(1))
            end = DAY_ABBREVIATIONS.index(match.group(2))
            days |= self._expand_range(start, end, valid_days)
        remainder = self.range_pattern.sub(" ", text)

        for match in self.day_pattern.finditer(remainder):
            days.add(DAY_ABBREVIATIONS.index(match.group(1)))

        if not days:
            logger.debug(f"No recognisable days in valid_days={valid_days!r}")

        return frozenset(days)

    def _expand_range(self, start: int, end: int, raw: str) -> set[int]:
        if start <= end:
            return set(range(start, end + 1))

        if self.wrap_ranges:
            return set(range(start, 7)) | set(range(0, end + 1))

        logger.debug(f"Reversed day range in {raw!r} matches no day (wrapping disabled)")
        return set()

    def is_reversed_range(self, valid_days: str) -> bool:
        """True if the text holds a range whose start comes after its end, e.g. 'fri-mon'."""
        text = (valid_days or "").lower()
        for match in self.range_pattern.finditer(text):
            start = DAY_ABBREVIATIONS.index(match.group(1))
            end = DAY_ABBREVIATIONS.index(match.group(2))
            if start > end:
                return True
        return False

    def matches(self, valid_days: str, moment: datetime) -> bool:
        """Check whether the day of `moment` is eligible."""
        return day_index(moment) in self.parse(valid_days)
