import httpx
import pytest

from fatefi.providers import CoinGeckoProvider, MirrorStore
from fatefi.services import PriceTracker
from tests.conftest import FakePriceProvider, memory_engine


def test_apply_price_builds_ohlc(engine, clock):
    tracker = PriceTracker(FakePriceProvider(), clock, engine=engine)
    for price in (100.0, 105.0, 98.0, 102.0):
        tracker.apply_price(price)

    snapshot = tracker.get_today()
    assert snapshot.date == "2025-03-14"
    assert (snapshot.open_price, snapshot.high_price, snapshot.low_price, snapshot.latest_price) == (
        100.0,
        105.0,
        98.0,
        102.0,
    )
    assert snapshot.close_price is None
    assert snapshot.resolved is False


def test_apply_price_keeps_one_row_per_date(engine, clock):
    tracker = PriceTracker(FakePriceProvider(), clock, engine=engine)
    a = tracker.apply_price(10.0, "2025-03-13")
    b = tracker.apply_price(11.0, "2025-03-13")
    c = tracker.apply_price(12.0, "2025-03-14")
    assert a.id == b.id
    assert c.id != a.id
    assert tracker.get_day("2025-03-13").latest_price == 11.0


def test_resolved_snapshot_is_frozen(engine, clock, make_snapshot):
    make_snapshot("2025-03-14", 100.0, 101.0, resolved=True, close_price=101.0)
    tracker = PriceTracker(FakePriceProvider(), clock, engine=engine)

    snapshot = tracker.apply_price(150.0)
    assert snapshot.latest_price == 101.0
    assert snapshot.high_price == 101.0


async def test_record_price_fetches_and_mirrors(engine, clock):
    mirror = MirrorStore(engine=memory_engine())
    tracker = PriceTracker(FakePriceProvider(3000.0), clock, engine=engine, mirror=mirror)

    snapshot = await tracker.record_price()
    assert snapshot.open_price == 3000.0

    mirrored = await mirror.safe_get_day("2025-03-14")
    assert mirrored.latest_price == 3000.0
    assert mirrored.resolved is False


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("down"),
        httpx.ReadTimeout("slow"),
        ValueError("Coin 'ethereum' not found"),
    ],
)
async def test_record_price_skips_failed_fetch(engine, clock, error):
    tracker = PriceTracker(FakePriceProvider(error), clock, engine=engine)
    assert await tracker.record_price() is None
    assert tracker.get_today() is None


async def test_record_price_skips_malformed_feed_row(engine, clock):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"ethereum": 3000})),
        base_url=CoinGeckoProvider.BASE_URL,
    )
    tracker = PriceTracker(CoinGeckoProvider(client=client), clock, engine=engine)

    with pytest.raises(ValueError):
        await tracker.fetch_price()
    assert await tracker.record_price() is None
