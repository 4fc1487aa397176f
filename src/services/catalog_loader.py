# src/services/catalog_loader.py

"""Loads the state and per-state city catalogs from the service."""

import locale
import logging
from typing import Any
from urllib.parse import quote

from src.config.settings import Settings
from src.models.errors import CatalogUnavailable, ServiceError, ValidationError
from src.services.predictor_api import PredictorAPI

logger = logging.getLogger("estate_predict.catalog")


def collation_key(name: str) -> tuple[str, str]:
    """Case-insensitive locale collation, ties broken by the exact name."""
    return locale.strxfrm(name.casefold()), name


def _clean_names(raw: Any, field_name: str) -> list[str]:
    """Drop blank / non-string entries and duplicates, then sort.

    Raises:
        CatalogUnavailable: *raw* is not a list.
    """
    if not isinstance(raw, list):
        raise CatalogUnavailable(
            f"Response field '{field_name}' is not a list"
        )

    names: set[str] = set()
    dropped = 0
    for item in raw:
        if isinstance(item, str) and item.strip():
            names.add(item)
        else:
            dropped += 1

    if dropped:
        logger.debug(
            "Dropped %d invalid '%s' entries", dropped, field_name,
        )
    return sorted(names, key=collation_key)


class CatalogLoader:
    """Fetches the valid states and the cities of one state."""

    def __init__(self, api: PredictorAPI) -> None:
        self.api = api

    async def _fetch_field(self, path: str, field_name: str) -> list[str]:
        try:
            data = await self.api.get_json(path)
        except ServiceError as exc:
            raise CatalogUnavailable(exc.message) from exc

        if not isinstance(data, dict) or field_name not in data:
            logger.warning(
                "Response from %s lacks '%s' field", path, field_name,
            )
            raise CatalogUnavailable(
                f"Response from {path} lacks '{field_name}'"
            )
        return _clean_names(data[field_name], field_name)

    async def load_states(self) -> list[str]:
        """Return every state the service can price, sorted."""
        states = await self._fetch_field(Settings.STATES_PATH, "states")
        logger.info("Loaded %d states", len(states))
        return states

    async def load_cities(self, state: str) -> list[str]:
        """Return the cities of *state*, sorted.

        Raises:
            ValidationError: *state* is empty.
            CatalogUnavailable: The request failed or the payload has
                no ``cities`` list.
        """
        if not state:
            raise ValidationError("Select a state before loading cities")

        path = Settings.CITIES_PATH.format(state=quote(state, safe=""))
        cities = await self._fetch_field(path, "cities")
        logger.info("Loaded %d cities for %s", len(cities), state)
        return cities
