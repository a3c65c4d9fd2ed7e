"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

Lifespan (main.py) creates providers and services once and attaches them to
app.state; these getters are used by Depends().
"""
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fatefi.core import AuthError, ErrorMapper
from fatefi.db import User
from fatefi.providers import MirrorStore
from fatefi.services import (AuthService, DrawService, LeaderboardService,
                             MarketClock, PredictionService, PriceTracker)

_bearer = HTTPBearer(auto_error=False)
_auth_errors = ErrorMapper(api_name="Auth")


def get_clock(request: Request) -> MarketClock:
    return request.app.state.clock


def get_price_tracker(request: Request) -> PriceTracker:
    return request.app.state.price_tracker


def get_mirror(request: Request) -> MirrorStore:
    return request.app.state.mirror


def get_draw_service(request: Request) -> DrawService:
    return request.app.state.draw_service


def get_prediction_service(request: Request) -> PredictionService:
    return request.app.state.prediction_service


def get_leaderboard_service(request: Request) -> LeaderboardService:
    return request.app.state.leaderboard_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> User:
    """Resolve the bearer token to a user; 401 when missing or invalid."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="No token provided")
    auth = get_auth_service(request)
    try:
        user = auth.get_user(auth.decode_token(credentials.credentials))
    except AuthError as exc:
        _auth_errors.raise_http(exc)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user


# Type aliases for route injection
Clock = Annotated[MarketClock, Depends(get_clock)]
Tracker = Annotated[PriceTracker, Depends(get_price_tracker)]
Mirror = Annotated[MirrorStore, Depends(get_mirror)]
Draws = Annotated[DrawService, Depends(get_draw_service)]
Predictions = Annotated[PredictionService, Depends(get_prediction_service)]
Leaderboard = Annotated[LeaderboardService, Depends(get_leaderboard_service)]
Auth = Annotated[AuthService, Depends(get_auth_service)]
CurrentUser = Annotated[User, Depends(get_current_user)]
