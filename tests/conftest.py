"""Shared fixtures: in-memory database, fixed market clock, fake price feed."""
from datetime import datetime, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from fatefi.db import PriceSnapshot, TarotDraw, User
from fatefi.db.sessions import init_db
from fatefi.providers.core import PriceProviderABC
from fatefi.schemas import MarketQuote
from fatefi.services import MarketClock


class FakeNow:
    """Settable UTC instant for MarketClock."""

    def __init__(self, value: datetime) -> None:
        self.value = value

    def __call__(self) -> datetime:
        return self.value


class FakePriceProvider(PriceProviderABC):
    """Returns queued prices in order; raises when a queued item is an exception."""

    def __init__(self, *prices) -> None:
        self.prices = list(prices)
        self.closed = False

    async def get_quote(self, symbol: str) -> MarketQuote:
        item = self.prices.pop(0)
        if isinstance(item, Exception):
            raise item
        return MarketQuote(symbol=symbol, value=item)

    async def close(self) -> None:
        self.closed = True


def memory_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    eng = memory_engine()
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def now():
    # 2025-03-14 10:00 in Asia/Kolkata
    return FakeNow(datetime(2025, 3, 14, 4, 30, tzinfo=timezone.utc))


@pytest.fixture
def clock(now):
    return MarketClock("Asia/Kolkata", now=now)


@pytest.fixture
def make_user(engine):
    def _make(wallet: str = "0xabc", **fields) -> User:
        with Session(engine, expire_on_commit=False) as session:
            user = User(wallet_address=wallet, **fields)
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    return _make


@pytest.fixture
def make_draw(engine):
    def _make(date: str, card_name: str = "The Sun", orientation: str = "upright") -> TarotDraw:
        with Session(engine, expire_on_commit=False) as session:
            draw = TarotDraw(card_name=card_name, orientation=orientation, date=date)
            session.add(draw)
            session.commit()
            session.refresh(draw)
            return draw

    return _make


@pytest.fixture
def make_snapshot(engine):
    def _make(date: str, open_price: float, latest_price: float, **fields) -> PriceSnapshot:
        with Session(engine, expire_on_commit=False) as session:
            snapshot = PriceSnapshot(
                date=date,
                open_price=open_price,
                high_price=max(open_price, latest_price),
                low_price=min(open_price, latest_price),
                latest_price=latest_price,
                **fields,
            )
            session.add(snapshot)
            session.commit()
            session.refresh(snapshot)
            return snapshot

    return _make
