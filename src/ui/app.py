# src/ui/app.py

"""Terminal UI for the estate_predict price predictor."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Label,
    LoadingIndicator,
    Select,
    Static,
)

from src.models.prediction import HistoryEntry, format_price
from src.models.selection import SelectionPhase
from src.services.selection_controller import SelectionController

logger = logging.getLogger("estate_predict.ui")

_PHASE_STATUS: dict[SelectionPhase, str] = {
    SelectionPhase.IDLE: "Select a state to begin",
    SelectionPhase.STATE_CHOSEN: "Select a city",
    SelectionPhase.CITY_CHOSEN: "Select a year",
    SelectionPhase.YEAR_CHOSEN: "Ready to predict",
    SelectionPhase.SUBMITTING: "🔍 Predicting...",
    SelectionPhase.RESOLVED: "✅ Prediction ready",
    SelectionPhase.FAILED: "❌ Prediction failed",
}


class EstatePredictApp(App[object]):
    """Terminal UI for the estate_predict price predictor."""

    CSS_PATH = "styles.css"
    TITLE = "Real Estate Price Predictor"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("p", "predict", "Predict"),
        Binding("r", "reload_states", "Reload States"),
        Binding("x", "clear_history", "Clear History"),
    ]

    def __init__(self, controller: SelectionController | None = None) -> None:
        super().__init__()
        self.controller = controller or SelectionController()
        self.controller.on_change = self.refresh_form
        self._shown_states: list[str] = []
        self._shown_cities: list[str] = []
        self._shown_history: list[HistoryEntry] = []
        self._form_ready = False

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🏠 Real Estate Price Predictor", id="title"),
            Horizontal(
                Label("State", classes="field_label"),
                Select([], prompt="Select State", id="state_select"),
                classes="field_row",
            ),
            Horizontal(
                Label("City", classes="field_label"),
                Select(
                    [], prompt="Select City", id="city_select", disabled=True,
                ),
                classes="field_row",
            ),
            Horizontal(
                Label("Year", classes="field_label"),
                Select(
                    [(str(y), y) for y in self.controller.years],
                    prompt="Select Year",
                    id="year_select",
                    disabled=True,
                ),
                classes="field_row",
            ),
            Button(
                "Predict", variant="primary", id="predict_btn", disabled=True,
            ),
            LoadingIndicator(id="loader"),
            Static("", id="status"),
            Static("", id="prediction"),
            Static("Recent predictions", id="history_title"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="history_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the history table and start loading states."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#history_table", DataTable),
        )
        table.add_columns("State", "City", "Year", "Price", "Date")
        self._form_ready = True
        self.refresh_form()
        self.run_worker(
            self.controller.start(), group="catalog", exclusive=True,
        )

    async def on_unmount(self) -> None:
        """Close the controller's HTTP session."""
        self._form_ready = False
        await self.controller.close()

    # ── Rendering ────────────────────────────────────────

    def refresh_form(self) -> None:
        """Re-render every widget from the controller's state."""
        if not self._form_ready:
            return
        c = self.controller

        state_select = self.query_one("#state_select", Select)
        if c.states != self._shown_states:
            self._shown_states = list(c.states)
            state_select.set_options([(s, s) for s in c.states])
        state_select.disabled = c.states_loading or not c.states

        city_select = self.query_one("#city_select", Select)
        if c.cities != self._shown_cities:
            self._shown_cities = list(c.cities)
            city_select.set_options([(city, city) for city in c.cities])
        city_select.disabled = not c.city_enabled

        year_select = self.query_one("#year_select", Select)
        if c.selection.year is None and isinstance(year_select.value, int):
            year_select.clear()
        year_select.disabled = not c.year_enabled

        self.query_one("#predict_btn", Button).disabled = not c.submit_enabled
        self.query_one("#loader", LoadingIndicator).display = c.loading

        status = self.query_one("#status", Static)
        if c.error:
            status.update(Text(c.error, style="bold red"))
        elif c.states_loading:
            status.update("Loading states...")
        elif c.cities_loading:
            status.update(f"Loading cities for {c.selection.state}...")
        else:
            status.update(_PHASE_STATUS[c.phase])

        prediction = self.query_one("#prediction", Static)
        if c.prediction is not None:
            prediction.update(
                Text(
                    f"Predicted Price: {format_price(c.prediction.price)}",
                    style="bold green",
                )
            )
        else:
            prediction.update("")

        self._populate_history()

    def _populate_history(self) -> None:
        """Fill the history table, newest prediction on top."""
        entries = self.controller.history_entries
        if entries == self._shown_history:
            return
        self._shown_history = entries

        table = cast(
            DataTable[str | Text],
            self.query_one("#history_table", DataTable),
        )
        table.clear()
        for entry in reversed(entries):
            table.add_row(
                entry.state,
                entry.city,
                str(entry.year),
                Text(format_price(entry.price), style="green"),
                entry.timestamp.strftime("%Y-%m-%d %H:%M"),
            )

    # ── Events ───────────────────────────────────────────

    def on_select_changed(self, event: Select.Changed) -> None:
        """Forward user choices to the controller."""
        c = self.controller
        value = event.value
        select_id = event.select.id

        if select_id == "state_select":
            state = value if isinstance(value, str) else ""
            if state != c.selection.state:
                self.run_worker(
                    c.choose_state(state), group="cities", exclusive=True,
                )
        elif select_id == "city_select":
            city = value if isinstance(value, str) else ""
            if city != c.selection.city and not c.choose_city(city):
                self.notify("Select a state first", severity="warning")
        elif select_id == "year_select":
            year = value if isinstance(value, int) else None
            if year != c.selection.year and not c.choose_year(year):
                self.notify("Select a city first", severity="warning")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "predict_btn":
            self.action_predict()

    # ── Actions ──────────────────────────────────────────

    def action_predict(self) -> None:
        """Submit the current selection for a price prediction."""
        if self.controller.submitting:
            self.notify("A prediction is already running", severity="warning")
            return
        self.run_worker(self.controller.submit(), group="predict")

    def action_reload_states(self) -> None:
        """Fetch the state catalog again (e.g. after a failed start)."""
        self.run_worker(
            self.controller.load_states(), group="catalog", exclusive=True,
        )

    def action_clear_history(self) -> None:
        """Forget the stored prediction history."""
        count = len(self.controller.history_entries)
        self.controller.clear_history()
        self.notify(f"Cleared {count} history entries")
