"""API routers for the FateFi game.

Includes routes for:
- /api/auth - Wallet nonce sign-in and JWT issue
- /api/tarot - Today's card and draw history
- /api/predictions - Submit and list predictions
- /api/market - Live ETH price and yesterday's outcome
- /api/leaderboard - Ranked players
"""
from fatefi.routers.auth import router as auth_router
from fatefi.routers.leaderboard import router as leaderboard_router
from fatefi.routers.market import router as market_router
from fatefi.routers.predictions import router as predictions_router
from fatefi.routers.tarot import router as tarot_router

__all__ = [
    "auth_router",
    "tarot_router",
    "predictions_router",
    "market_router",
    "leaderboard_router",
]
