import httpx
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from fastapi.testclient import TestClient

from fatefi.main import app
from fatefi.providers import MarketSnapshot, MirrorStore
from fatefi.services import (AuthService, DrawService, LeaderboardService,
                             PredictionService, PriceTracker)
from fatefi.services.tarot import draw_card_for_date
from tests.conftest import FakePriceProvider, memory_engine


@pytest.fixture
def feed():
    return FakePriceProvider()


@pytest.fixture
def mirror():
    return MirrorStore(engine=memory_engine())


@pytest.fixture
def client(engine, clock, feed, mirror):
    # lifespan is not entered: services are wired against the test database
    app.state.clock = clock
    app.state.mirror = mirror
    app.state.price_tracker = PriceTracker(feed, clock, engine=engine)
    app.state.draw_service = DrawService(clock, engine=engine)
    app.state.prediction_service = PredictionService(clock, engine=engine)
    app.state.leaderboard_service = LeaderboardService(engine)
    app.state.auth_service = AuthService("test-secret", engine=engine)
    return TestClient(app)


@pytest.fixture
def user(make_user):
    return make_user("0xplayer")


@pytest.fixture
def headers(client, user):
    token = app.state.auth_service.create_token(user)
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "fatefi-api"


@pytest.mark.parametrize(
    "path",
    ["/api/tarot/today", "/api/predictions/mine", "/api/market/price", "/api/leaderboard", "/api/auth/me"],
)
def test_routes_require_token(client, path):
    response = client.get(path)
    assert response.status_code == 401
    assert response.json()["detail"] == "No token provided"


def test_bad_token_rejected(client):
    response = client.get("/api/tarot/today", headers={"Authorization": "Bearer junk"})
    assert response.status_code == 401


def test_wallet_sign_in_flow(client):
    account = Account.create()
    response = client.get("/api/auth/nonce", params={"address": account.address})
    assert response.status_code == 200
    message = response.json()["message"]

    signed = Account.sign_message(encode_defunct(text=message), private_key=account.key)
    response = client.post(
        "/api/auth/verify",
        json={"address": account.address, "signature": "0x" + bytes(signed.signature).hex()},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["wallet_address"] == account.address.lower()

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert response.status_code == 200
    assert response.json()["id"] == body["user"]["id"]


def test_nonce_requires_address(client):
    assert client.get("/api/auth/nonce").status_code == 400


def test_verify_bad_signature(client):
    account = Account.create()
    client.get("/api/auth/nonce", params={"address": account.address})
    response = client.post("/api/auth/verify", json={"address": account.address, "signature": "0xdead"})
    assert response.status_code == 401


def test_tarot_today_creates_deterministic_draw(client, headers):
    response = client.get("/api/tarot/today", headers=headers)
    assert response.status_code == 200
    body = response.json()
    card, orientation = draw_card_for_date("2025-03-14")
    assert body["date"] == "2025-03-14"
    assert (body["card_name"], body["orientation"]) == (card.name, orientation.value)

    again = client.get("/api/tarot/today", headers=headers).json()
    assert again["id"] == body["id"]

    history = client.get("/api/tarot/history", headers=headers).json()
    assert [d["date"] for d in history] == ["2025-03-14"]


def test_prediction_lifecycle(client, headers):
    response = client.post("/api/predictions", json={"selected_option": "bullish"}, headers=headers)
    assert response.status_code == 400  # no draw yet

    client.get("/api/tarot/today", headers=headers)
    assert client.get("/api/predictions/today", headers=headers).json() is None

    response = client.post("/api/predictions", json={"selected_option": "bullish"}, headers=headers)
    assert response.status_code == 201
    created = response.json()
    assert (created["selected_option"], created["result"], created["score"]) == ("bullish", "pending", 0)

    response = client.post("/api/predictions", json={"selected_option": "bearish"}, headers=headers)
    assert response.status_code == 409

    assert client.get("/api/predictions/today", headers=headers).json()["id"] == created["id"]
    mine = client.get("/api/predictions/mine", headers=headers).json()
    assert [p["draw_date"] for p in mine] == ["2025-03-14"]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"selected_option": "moon"},
        {"selected_option": "high", "prediction_type": "direction"},
        {"selected_option": "bullish", "prediction_type": "sideways"},
    ],
)
def test_invalid_prediction_rejected(client, headers, body):
    client.get("/api/tarot/today", headers=headers)
    response = client.post("/api/predictions", json=body, headers=headers)
    assert response.status_code == 400


def test_market_price_live_and_fallback(client, headers, feed):
    feed.prices = [3000.0]
    body = client.get("/api/market/price", headers=headers).json()
    assert body == {"current_price": 3000.0, "today": None}

    app.state.price_tracker.apply_price(3000.0)
    app.state.price_tracker.apply_price(3030.0)
    feed.prices = [httpx.ConnectError("down")]
    body = client.get("/api/market/price", headers=headers).json()
    assert body["current_price"] == 3030.0
    assert body["today"]["open_price"] == 3000.0
    assert body["today"]["change_pct"] == "1.00"


def test_market_yesterday(client, headers, make_snapshot):
    assert client.get("/api/market/yesterday", headers=headers).json() is None

    make_snapshot("2025-03-13", 3000.0, 2940.0, resolved=True, close_price=2940.0, resolved_outcome="bearish")
    body = client.get("/api/market/yesterday", headers=headers).json()
    assert body["close_price"] == 2940.0
    assert body["change_pct"] == "-2.00"
    assert (body["resolved"], body["outcome"]) == (True, "bearish")


def test_market_yesterday_prefers_mirror(client, headers, mirror, make_snapshot):
    make_snapshot("2025-03-13", 3000.0, 2940.0)
    mirror.upsert(
        MarketSnapshot(
            date="2025-03-13",
            open_price=3000.0,
            latest_price=3100.0,
            close_price=3100.0,
            resolved=True,
            resolved_outcome="high",
        )
    )
    body = client.get("/api/market/yesterday", headers=headers).json()
    assert body["outcome"] == "high"
    assert body["close_price"] == 3100.0


def test_leaderboard(client, headers, make_user):
    make_user("0xtop", total_points=40)
    body = client.get("/api/leaderboard", headers=headers).json()
    assert [e["wallet_address"] for e in body] == ["0xtop", "0xplayer"]
    assert body[0]["rank"] == 1
