"""Main module for the FateFi API."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fatefi.config import settings
from fatefi.db.sessions import engine, init_db
from fatefi.providers import CoinGeckoProvider, MirrorStore, OracleClient
from fatefi.routers import (auth_router, leaderboard_router, market_router,
                            predictions_router, tarot_router)
from fatefi.schemas import HealthOut
from fatefi.services import (AuthService, DayResolver, DrawService,
                             LeaderboardService, MarketClock,
                             PredictionService, PriceTracker, Scheduler,
                             ScoringEngine)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create providers, services and the scheduler; tear them down on shutdown."""
    init_db(engine)

    clock = MarketClock(settings.market_timezone)

    # Providers (singletons)
    price_provider = CoinGeckoProvider(
        api_key=settings.coingecko_api_key, timeout=settings.price_timeout_s
    )
    mirror = MirrorStore(settings.mirror_database_url, timeout=settings.mirror_timeout_s)
    oracle = OracleClient(
        settings.oracle_url,
        token=settings.oracle_token,
        model=settings.oracle_model,
        timeout=settings.oracle_timeout_s,
    )
    if not mirror.enabled:
        logger.info("Mirror database not configured; snapshots stay local only")

    tracker = PriceTracker(
        price_provider, clock, engine=engine, mirror=mirror, asset=settings.price_asset
    )
    scoring = ScoringEngine(
        engine,
        points_correct=settings.points_correct,
        streak_bonus=settings.streak_bonus,
    )
    resolver = DayResolver(
        scoring,
        engine=engine,
        mirror=mirror,
        volatility_threshold=settings.volatility_threshold,
    )
    draws = DrawService(clock, engine=engine, oracle=oracle)
    scheduler = Scheduler(
        tracker,
        resolver,
        draws,
        clock,
        engine=engine,
        price_interval=settings.price_interval_s,
        check_interval=settings.check_interval_s,
        resolve_window=settings.resolve_window,
        create_window=settings.create_window,
    )

    fastapi_app.state.clock = clock
    fastapi_app.state.mirror = mirror
    fastapi_app.state.price_tracker = tracker
    fastapi_app.state.draw_service = draws
    fastapi_app.state.prediction_service = PredictionService(clock, engine=engine)
    fastapi_app.state.leaderboard_service = LeaderboardService(engine)
    fastapi_app.state.auth_service = AuthService(
        settings.jwt_secret, engine=engine, expire_days=settings.jwt_expire_days
    )
    fastapi_app.state.scheduler = scheduler

    if settings.scheduler_enabled:
        scheduler.start()
    else:
        logger.info("Scheduler disabled")

    yield

    await scheduler.stop()
    for provider in (price_provider, oracle):
        try:
            await provider.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing provider %s: %s", type(provider).__name__, exc)
    mirror.close()


app = FastAPI(
    title="FateFi",
    description="Daily tarot draws scored against the ETH market",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(tarot_router)
app.include_router(predictions_router)
app.include_router(market_router)
app.include_router(leaderboard_router)


@app.get("/api/health", response_model=HealthOut)
def health() -> HealthOut:
    """Return health check status."""
    return HealthOut(status="ok", service="fatefi-api", timestamp=datetime.now(timezone.utc))


def run():
    """Run the server (uvicorn). Use for `poetry run start`."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("fatefi.main:app", host="0.0.0.0", port=3001)
