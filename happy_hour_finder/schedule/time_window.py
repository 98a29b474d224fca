"""Time-of-day window parsing and matching."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def parse_compact_time(time_str: Optional[str]) -> Optional[int]:
    """
    Parse a window boundary into compact HHMM form (e.g. 1730).

    Accepts "HH:MM" and bare "HHMM"/"HMM". Returns None for anything that
    does not parse or is out of range, so callers can treat the deal as
    inactive instead of failing.
    """
    if time_str is None:
        return None

    text = str(time_str).strip()
    if not text:
        return None

    try:
        if ":" in text:
            parts = text.split(":")
            if len(parts) < 2:
                return None
            hours = int(parts[0])
            minutes = int(parts[1])
        else:
            value = int(text)
            hours, minutes = divmod(value, 100)
    except ValueError:
        return None

    if hours < 0 or hours > 24 or minutes < 0 or minutes > 59:
        return None
    if hours == 24 and minutes > 0:
        return None

    return hours * 100 + minutes


def compact_time_of(moment: datetime) -> int:
    """Current time in compact HHMM form."""
    return moment.hour * 100 + moment.minute


def _to_minutes(compact: int) -> int:
    hours, minutes = divmod(compact, 100)
    return hours * 60 + minutes


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive daily window in compact HHMM form. start > end crosses midnight."""

    start: int
    end: int

    @classmethod
    def parse(cls, start_time: Optional[str], end_time: Optional[str]) -> Optional["TimeWindow"]:
        """Build a window from raw strings; None if either side is malformed."""
        start = parse_compact_time(start_time)
        end = parse_compact_time(end_time)
        if start is None or end is None:
            return None
        return cls(start=start, end=end)

    @property
    def crosses_midnight(self) -> bool:
        return self.start > self.end

    def contains(self, current: int) -> bool:
        """Check whether a compact HHMM time falls inside the window."""
        if not self.crosses_midnight:
            return self.start <= current <= self.end
        # Overnight window, e.g. 22:00 - 02:00
        return current >= self.start or current <= self.end

    def minutes_remaining(self, current: int) -> Optional[int]:
        """Minutes until the window closes, None if current is outside it."""
        if not self.contains(current):
            return None

        now_minutes = _to_minutes(current)
        end_minutes = _to_minutes(self.end)
        if end_minutes < now_minutes:
            end_minutes += 24 * 60
        return end_minutes - now_minutes
