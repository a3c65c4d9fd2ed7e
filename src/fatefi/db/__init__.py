"""Database package: models and session management."""
from fatefi.db.models import (OPTIONS_BY_TYPE, VALID_OPTIONS, Nonce,
                              Orientation, Outcome, Prediction, PredictionResult,
                              PredictionType, PriceSnapshot, TarotDraw, User)

__all__ = [
    "Nonce",
    "OPTIONS_BY_TYPE",
    "Orientation",
    "Outcome",
    "Prediction",
    "PredictionResult",
    "PredictionType",
    "PriceSnapshot",
    "TarotDraw",
    "User",
    "VALID_OPTIONS",
]
