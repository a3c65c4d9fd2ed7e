"""Prediction routes. All require a bearer token."""
import logging

from fastapi import APIRouter, Query

from fatefi.core import ErrorMapper, FateFiError
from fatefi.deps import CurrentUser, Predictions
from fatefi.schemas import PredictionCreate, PredictionOut, PredictionWithDraw

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/predictions", tags=["predictions"])

_errors = ErrorMapper(api_name="Predictions")


@router.post("", response_model=PredictionOut, status_code=201)
async def submit_prediction(
    body: PredictionCreate,
    user: CurrentUser,
    predictions: Predictions,
) -> PredictionOut:
    """Submit a prediction for today's draw.

    400 on an invalid option or when today's draw does not exist yet;
    409 when the user already predicted today.
    """
    try:
        prediction = predictions.submit(
            user.id, body.selected_option, prediction_type=body.prediction_type
        )
    except FateFiError as exc:
        _errors.raise_http(exc)
    return PredictionOut.model_validate(prediction)


@router.get("/mine", response_model=list[PredictionWithDraw])
async def get_my_predictions(
    user: CurrentUser,
    predictions: Predictions,
    limit: int = Query(default=50, ge=1, le=200),
) -> list[PredictionWithDraw]:
    """Get the current user's predictions, newest first, with their draws."""
    return predictions.mine(user.id, limit)


@router.get("/today", response_model=PredictionOut | None)
async def get_today_prediction(user: CurrentUser, predictions: Predictions) -> PredictionOut | None:
    """Get the current user's prediction for today, or null."""
    prediction = predictions.today(user.id)
    return PredictionOut.model_validate(prediction) if prediction else None
