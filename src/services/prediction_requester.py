# src/services/prediction_requester.py

"""Submits a complete selection and returns the predicted price."""

import logging
import math
from typing import Any

from src.config.settings import Settings
from src.models.errors import ServiceError, ValidationError
from src.models.prediction import PredictionResult
from src.models.selection import Selection, is_valid_year
from src.services.predictor_api import PredictorAPI

logger = logging.getLogger("estate_predict.requester")


def _parse_price(data: Any) -> float:
    """Pull a non-negative finite ``predicted_price`` out of *data*."""
    if not isinstance(data, dict) or "predicted_price" not in data:
        raise ServiceError("Response lacks 'predicted_price'")

    raw = data["predicted_price"]
    if isinstance(raw, bool):
        raise ServiceError(f"Unusable predicted_price: {raw!r}")
    try:
        price = float(raw)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ServiceError(f"Unusable predicted_price: {raw!r}") from exc

    if not math.isfinite(price) or price < 0:
        raise ServiceError(f"Unusable predicted_price: {raw!r}")
    return price


class PredictionRequester:
    """Request/response boundary for ``POST /predict``.

    Has no side effects beyond the HTTP call; recording the result in
    the history is the caller's job.
    """

    def __init__(self, api: PredictorAPI) -> None:
        self.api = api

    async def predict(
        self, state: str, city: str, year: int | None,
    ) -> PredictionResult:
        """Predict the price for (*state*, *city*, *year*).

        Raises:
            ValidationError: A field is empty or the year is out of range.
            ServiceError: The call failed or returned no usable price.
        """
        missing = [
            name
            for name, value in (("state", state), ("city", city), ("year", year))
            if value in ("", None)
        ]
        if missing:
            raise ValidationError(f"Missing {', '.join(missing)}")
        if not is_valid_year(year):
            raise ValidationError(
                f"Year must be between {Settings.YEAR_MIN} "
                f"and {Settings.YEAR_MAX}"
            )

        payload: dict[str, Any] = {"city": city, "state": state, "year": year}
        logger.info("Requesting prediction for %s", payload)
        data = await self.api.post_json(Settings.PREDICT_PATH, payload)
        price = _parse_price(data)

        logger.info(
            "Predicted %.2f for %s, %s (%s)", price, city, state, year,
        )
        return PredictionResult(
            selection=Selection(state=state, city=city, year=year),
            price=price,
        )
