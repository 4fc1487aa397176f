# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from typing import Any, cast

from textual.widgets import Button, DataTable, LoadingIndicator, Select, Static

from src.models.errors import ServiceError
from src.models.prediction import HistoryEntry
from src.services.selection_controller import SelectionController
from src.storage.history_cache import HistoryCache
from src.ui.app import EstatePredictApp
from tests.fakes import STATES_OK, FakePredictorAPI


class TestEstatePredictApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    def setUp(self) -> None:
        self.history_path = Path(tempfile.mkdtemp()) / "history.json"

    def _app(
        self, responses: dict[str, Any] | None = None,
    ) -> tuple[EstatePredictApp, FakePredictorAPI]:
        api = FakePredictorAPI(responses)
        controller = SelectionController(
            api=api,  # type: ignore[arg-type]
            history=HistoryCache(path=self.history_path),
        )
        return EstatePredictApp(controller), api

    async def test_app_composes_without_crash(self) -> None:
        """Verify the app starts and renders all widgets."""
        app, _ = self._app()
        async with app.run_test() as pilot:
            app.query_one("#state_select", Select)
            app.query_one("#city_select", Select)
            app.query_one("#year_select", Select)
            app.query_one("#predict_btn", Button)
            app.query_one("#status", Static)
            app.query_one("#history_table", DataTable)
            await pilot.pause()

    async def test_states_loaded_on_mount(self) -> None:
        """Startup loads states; downstream controls stay disabled."""
        app, api = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            self.assertEqual(api.paths(), ["/states"])
            self.assertEqual(app.controller.states, ["CA", "NY"])
            self.assertFalse(app.query_one("#state_select", Select).disabled)
            self.assertTrue(app.query_one("#city_select", Select).disabled)
            self.assertTrue(app.query_one("#year_select", Select).disabled)
            self.assertTrue(app.query_one("#predict_btn", Button).disabled)

    async def test_loading_indicator_hidden_after_load(self) -> None:
        """The loader is hidden once the state catalog arrives."""
        app, _ = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            loader = app.query_one("#loader", LoadingIndicator)
            self.assertFalse(loader.display)

    async def test_states_failure_shows_error(self) -> None:
        """A failed state load keeps the state control disabled."""
        app, _ = self._app({"/states": ServiceError("HTTP 503")})
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            self.assertIn("HTTP 503", app.controller.error or "")
            self.assertTrue(app.query_one("#state_select", Select).disabled)
            self.assertFalse(app.query_one("#loader", LoadingIndicator).display)

    async def test_full_prediction_flow(self) -> None:
        """Pick CA, San Francisco, 2024 and predict 950000."""
        app, api = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()

            app.query_one("#state_select", Select).value = "CA"
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            city_select = app.query_one("#city_select", Select)
            self.assertFalse(city_select.disabled)
            city_select.value = "San Francisco"
            await pilot.pause()

            year_select = app.query_one("#year_select", Select)
            self.assertFalse(year_select.disabled)
            year_select.value = 2024
            await pilot.pause()

            self.assertFalse(app.query_one("#predict_btn", Button).disabled)
            app.action_predict()
            await app.workers.wait_for_complete()
            await pilot.pause()

            prediction = app.controller.prediction
            assert prediction is not None
            self.assertEqual(prediction.price, 950000)
            self.assertIn("/predict", api.paths("POST"))
            table = cast(
                DataTable[str],
                app.query_one("#history_table", DataTable),
            )
            self.assertEqual(table.row_count, 1)

    async def test_city_error_keeps_city_disabled(self) -> None:
        """A failed city load leaves the city control disabled."""
        responses = dict(STATES_OK)
        responses["/cities/CA"] = ServiceError("Request to /cities/CA failed")
        app, _ = self._app(responses)
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()

            app.query_one("#state_select", Select).value = "CA"
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            self.assertTrue(app.query_one("#city_select", Select).disabled)
            self.assertEqual(app.controller.selection.state, "CA")
            self.assertIsNotNone(app.controller.error)

    async def test_predict_without_selection_sends_nothing(self) -> None:
        """Pressing predict early is a no-op on the network."""
        app, api = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            app.action_predict()
            await app.workers.wait_for_complete()
            await pilot.pause()
            self.assertEqual(api.paths("POST"), [])
            self.assertIsNotNone(app.controller.error)

    async def test_history_shown_and_cleared(self) -> None:
        """Stored history fills the table; clearing empties it."""
        HistoryCache(path=self.history_path).record(
            HistoryEntry("NY", "Buffalo", 2020, 250000.0, datetime(2026, 1, 2))
        )
        app, _ = self._app()
        async with app.run_test(notifications=True) as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            table = cast(
                DataTable[str],
                app.query_one("#history_table", DataTable),
            )
            self.assertEqual(table.row_count, 1)

            app.action_clear_history()
            await pilot.pause()
            self.assertEqual(table.row_count, 0)
            self.assertFalse(self.history_path.exists())


if __name__ == "__main__":
    unittest.main()
