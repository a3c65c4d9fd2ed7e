from datetime import datetime, timezone

from fatefi.services import MarketClock
from tests.conftest import FakeNow


def test_dates_follow_market_zone_not_utc():
    # 20:00 UTC on the 13th is already 01:30 on the 14th in Kolkata
    clock = MarketClock("Asia/Kolkata", now=FakeNow(datetime(2025, 3, 13, 20, 0, tzinfo=timezone.utc)))
    assert clock.today() == "2025-03-14"
    assert clock.yesterday() == "2025-03-13"
    assert clock.hour_minute() == (1, 30)


def test_naive_now_is_treated_as_utc():
    clock = MarketClock("Asia/Kolkata", now=FakeNow(datetime(2025, 3, 13, 18, 31)))
    assert clock.hour_minute() == (0, 1)
    assert clock.today() == "2025-03-14"


def test_yesterday_crosses_year_boundary():
    clock = MarketClock("UTC", now=FakeNow(datetime(2025, 1, 1, 0, 5, tzinfo=timezone.utc)))
    assert clock.yesterday() == "2024-12-31"
