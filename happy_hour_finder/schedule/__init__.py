"""Schedule resolution modules."""

from .day_parser import DayParser
from .time_resolver import TimeResolver
from .time_window import TimeWindow, parse_compact_time

__all__ = ["DayParser", "TimeResolver", "TimeWindow", "parse_compact_time"]
