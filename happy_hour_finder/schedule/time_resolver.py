"""Decide whether a deal is active at a given local instant."""

import logging
from datetime import datetime, timezone
from typing import Optional

from dateutil import tz

from ..models import Deal
from .day_parser import DayParser
from .time_window import TimeWindow, compact_time_of

logger = logging.getLogger(__name__)


class TimeResolver:
    """Resolve day and time-of-day windows for deals in one shared civil timezone."""

    def __init__(self, timezone_name: str = "Asia/Singapore", wrap_day_ranges: bool = False):
        self.timezone_name = timezone_name
        self.tzinfo = tz.gettz(timezone_name)
        if self.tzinfo is None:
            raise ValueError(f"Unknown timezone: {timezone_name}")

        self.day_parser = DayParser(wrap_ranges=wrap_day_ranges)

    def now_local(self, instant: Optional[datetime] = None) -> datetime:
        """
        Convert an instant to venue-local time.

        Aware datetimes are converted; naive ones are taken as already local.
        With no instant, the current wall-clock time is used.
        """
        if instant is None:
            instant = datetime.now(timezone.utc)

        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.tzinfo)

        return instant.astimezone(self.tzinfo)

    def is_active(self, deal: Deal, now_local: datetime) -> bool:
        """
        Check whether a deal is active.

        Active iff the day of `now_local` is in the deal's valid days and the
        time of day falls in its window. Malformed schedules are inactive.
        """
        if not self.day_parser.matches(deal.valid_days, now_local):
            return False

        window = TimeWindow.parse(deal.start_time, deal.end_time)
        if window is None:
            logger.debug(
                f"Deal {deal.id} has unparseable window "
                f"{deal.start_time!r}-{deal.end_time!r}, treating as inactive"
            )
            return False

        return window.contains(compact_time_of(now_local))
