"""Service layer: the daily draw / price / resolution / scoring pipeline."""
from fatefi.services.auth import AuthService
from fatefi.services.draws import DrawService
from fatefi.services.leaderboard import LeaderboardService
from fatefi.services.market_clock import MarketClock
from fatefi.services.predictions import PredictionService
from fatefi.services.prices import PriceTracker
from fatefi.services.resolver import DayResolver, classify_outcome
from fatefi.services.scheduler import Scheduler
from fatefi.services.scoring import ScoringEngine

__all__ = [
    "AuthService",
    "DayResolver",
    "DrawService",
    "LeaderboardService",
    "MarketClock",
    "PredictionService",
    "PriceTracker",
    "Scheduler",
    "ScoringEngine",
    "classify_outcome",
]
