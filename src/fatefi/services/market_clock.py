"""Calendar dates and wall-clock time in the market's civil timezone."""
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from fatefi.utils import utc_now


class MarketClock:
    """Maps the current UTC instant to dates in a fixed IANA timezone.

    The result depends only on the instant and the zone, never on the
    server's locale or local timezone.
    """

    def __init__(
        self,
        tz_name: str = "Asia/Kolkata",
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._tz = ZoneInfo(tz_name)
        self._now = now

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def local_now(self) -> datetime:
        """Current aware datetime in the market zone."""
        now = self._now()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self._tz)

    def today(self) -> str:
        """Current market date, YYYY-MM-DD."""
        return self.local_now().date().isoformat()

    def yesterday(self) -> str:
        """Market date before today, YYYY-MM-DD."""
        return (self.local_now().date() - timedelta(days=1)).isoformat()

    def hour_minute(self) -> tuple[int, int]:
        local = self.local_now()
        return local.hour, local.minute
