# src/services/selection_controller.py

"""Dependent state -> city -> year selection with async catalog loads.

The controller owns every piece of form state: the loaded catalogs,
the current :class:`Selection`, the workflow phase, loading flags, the
last prediction and the inline error message. Front ends (the Textual
app, the headless CLI) call the ``choose_*`` / ``submit`` operations
and re-render from the controller whenever ``on_change`` fires.

Responses are applied "last request wins". Each city fetch captures
``_cities_generation`` and each submission captures
``_selection_generation`` when issued; a response whose token no longer
matches was overtaken by a newer user action and is dropped.
"""

import logging
from collections.abc import Callable

from src.models.errors import CatalogUnavailable, ServiceError, ValidationError
from src.models.prediction import HistoryEntry, PredictionResult
from src.models.selection import (
    Selection,
    SelectionPhase,
    is_valid_year,
    year_options,
)
from src.services.catalog_loader import CatalogLoader
from src.services.prediction_requester import PredictionRequester
from src.services.predictor_api import PredictorAPI
from src.storage.history_cache import HistoryCache

logger = logging.getLogger("estate_predict.controller")


class SelectionController:
    """Drives the cascading selection workflow for one session."""

    def __init__(
        self,
        api: PredictorAPI | None = None,
        history: HistoryCache | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.api = api or PredictorAPI()
        self.catalog = CatalogLoader(self.api)
        self.requester = PredictionRequester(self.api)
        self.history = history or HistoryCache()
        self.on_change = on_change

        self.states: list[str] = []
        self.cities: list[str] = []
        self.years: list[int] = year_options()
        self.selection = Selection()
        self.phase = SelectionPhase.IDLE
        self.prediction: PredictionResult | None = None
        self.error: str | None = None

        self.states_loading = False
        self.cities_loading = False
        self._cities_generation = 0
        self._selection_generation = 0
        self._pending_submission: int | None = None

        self.history.load()

    # ── Lifecycle ────────────────────────────────────────

    async def start(self) -> bool:
        """Populate the state list; called once when the form opens."""
        return await self.load_states()

    async def close(self) -> None:
        """Release the HTTP session."""
        await self.api.close()

    # ── Derived UI state ─────────────────────────────────

    @property
    def submitting(self) -> bool:
        """True while a prediction request is in flight."""
        return self._pending_submission is not None

    @property
    def loading(self) -> bool:
        """True while any remote call is outstanding."""
        return self.states_loading or self.cities_loading or self.submitting

    @property
    def city_enabled(self) -> bool:
        """The city control accepts input once cities have arrived."""
        return (
            bool(self.selection.state)
            and not self.cities_loading
            and bool(self.cities)
        )

    @property
    def year_enabled(self) -> bool:
        """The year control accepts input once a city is chosen."""
        return bool(self.selection.city)

    @property
    def submit_enabled(self) -> bool:
        """Predict is offered for a complete selection with nothing pending."""
        return self.selection.is_complete and not self.submitting

    @property
    def history_entries(self) -> list[HistoryEntry]:
        """The persisted prediction log, oldest first."""
        return self.history.entries

    # ── Internals ────────────────────────────────────────

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _set_selection(self, selection: Selection) -> None:
        """Replace the selection, invalidating in-flight predictions."""
        if selection != self.selection:
            self._selection_generation += 1
        self.selection = selection
        self.prediction = None
        self.error = None

    # ── Catalog ──────────────────────────────────────────

    async def load_states(self) -> bool:
        """Fetch the state catalog; on failure the list stays empty."""
        self.states_loading = True
        self.error = None
        self._notify()
        try:
            states = await self.catalog.load_states()
        except CatalogUnavailable as exc:
            logger.error("State catalog unavailable: %s", exc.message)
            self.states = []
            self.error = f"Could not load states: {exc.message}"
            return False
        else:
            self.states = states
            return True
        finally:
            self.states_loading = False
            self._notify()

    # ── Transitions ──────────────────────────────────────

    async def choose_state(self, state: str) -> bool:
        """Select *state*, reset downstream fields and load its cities.

        Returns ``True`` when the cities for *state* were applied (or
        the selection was cleared), ``False`` when the choice was
        rejected, the load failed, or a newer choice overtook it.
        """
        if state and state not in self.states:
            logger.warning("Ignoring unknown state %r", state)
            return False

        self._cities_generation += 1
        token = self._cities_generation
        self._set_selection(Selection(state=state))
        self.cities = []

        if not state:
            self.cities_loading = False
            self.phase = SelectionPhase.IDLE
            self._notify()
            return True

        self.phase = SelectionPhase.STATE_CHOSEN
        self.cities_loading = True
        self._notify()
        logger.info("State %s chosen, loading cities", state)

        try:
            cities = await self.catalog.load_cities(state)
        except (CatalogUnavailable, ValidationError) as exc:
            if token == self._cities_generation:
                logger.error(
                    "City catalog for %s unavailable: %s", state, exc.message,
                )
                self.error = f"Could not load cities for {state}: {exc.message}"
            else:
                logger.debug("Ignoring stale city failure for %s", state)
            return False
        else:
            if token != self._cities_generation:
                logger.info(
                    "Discarding stale city list for %s (now %r)",
                    state,
                    self.selection.state,
                )
                return False
            self.cities = cities
            if self.selection != Selection(state=state):
                self._set_selection(Selection(state=state))
                self.phase = SelectionPhase.STATE_CHOSEN
            return True
        finally:
            if token == self._cities_generation:
                self.cities_loading = False
                self._notify()

    def choose_city(self, city: str) -> bool:
        """Select *city* within the current state; clears the year."""
        if not self.selection.state or self.cities_loading:
            logger.warning("City %r chosen before cities loaded", city)
            return False
        if city and city not in self.cities:
            logger.warning(
                "Ignoring city %r not offered for %s",
                city,
                self.selection.state,
            )
            return False

        self._set_selection(self.selection.with_city(city))
        self.phase = (
            SelectionPhase.CITY_CHOSEN if city else SelectionPhase.STATE_CHOSEN
        )
        self._notify()
        return True

    def choose_year(self, year: int | None) -> bool:
        """Select *year* (or clear it with ``None``) for the current city."""
        if not self.selection.city:
            logger.warning("Year %r chosen before a city", year)
            return False
        if year is not None and not is_valid_year(year):
            logger.warning("Ignoring out-of-range year %r", year)
            return False

        self._set_selection(self.selection.with_year(year))
        self.phase = (
            SelectionPhase.YEAR_CHOSEN
            if year is not None
            else SelectionPhase.CITY_CHOSEN
        )
        self._notify()
        return True

    async def submit(self) -> PredictionResult | None:
        """Request a prediction for the current selection.

        Returns the applied result, or ``None`` when the submission was
        rejected, failed, or went stale before it resolved. Failures
        keep the selection so the user can simply submit again.
        """
        if self.submitting:
            logger.warning("Prediction already in flight, submit ignored")
            return None

        selection = self.selection
        if not selection.is_complete:
            self.error = "Select a state, city and year before predicting"
            logger.info("Submit blocked, incomplete selection %s", selection)
            self._notify()
            return None

        generation = self._selection_generation
        self._pending_submission = generation
        self.phase = SelectionPhase.SUBMITTING
        self.prediction = None
        self.error = None
        self._notify()

        try:
            result = await self.requester.predict(
                selection.state, selection.city, selection.year,
            )
        except (ValidationError, ServiceError) as exc:
            if generation != self._selection_generation:
                logger.debug("Ignoring stale prediction failure: %s", exc)
                return None
            logger.error("Prediction failed for %s: %s", selection, exc.message)
            self.phase = SelectionPhase.FAILED
            self.error = f"Error: {exc.message}"
            return None
        else:
            if generation != self._selection_generation:
                logger.info(
                    "Discarding stale prediction for %s", selection,
                )
                return None
            self.prediction = result
            self.phase = SelectionPhase.RESOLVED
            self.history.record(HistoryEntry.from_result(result))
            return result
        finally:
            self._pending_submission = None
            self._notify()

    # ── History ──────────────────────────────────────────

    def clear_history(self) -> None:
        """Drop every recorded prediction."""
        self.history.clear()
        self._notify()
