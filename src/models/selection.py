# src/models/selection.py

"""Selection tuple and the phases of the dependent-selection workflow."""

from dataclasses import dataclass
from enum import Enum, auto

from src.config.settings import Settings


class SelectionPhase(Enum):
    """Where the form currently sits in the state -> city -> year flow."""

    IDLE = auto()
    STATE_CHOSEN = auto()
    CITY_CHOSEN = auto()
    YEAR_CHOSEN = auto()
    SUBMITTING = auto()
    RESOLVED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class Selection:
    """The user's (state, city, year) choice.

    Empty strings and ``None`` mean "not chosen". A city requires a
    state and a year requires a city.
    """

    state: str = ""
    city: str = ""
    year: int | None = None

    def __post_init__(self) -> None:
        if self.city and not self.state:
            raise ValueError("city chosen without a state")
        if self.year is not None and not self.city:
            raise ValueError("year chosen without a city")

    @property
    def is_complete(self) -> bool:
        """True when state, city and year are all chosen."""
        return bool(self.state and self.city and self.year is not None)

    def with_state(self, state: str) -> "Selection":
        """Return a selection for *state* with city and year cleared."""
        return Selection(state=state)

    def with_city(self, city: str) -> "Selection":
        """Return a selection for *city* with year cleared."""
        return Selection(state=self.state, city=city)

    def with_year(self, year: int | None) -> "Selection":
        """Return a selection with *year* set (or cleared)."""
        return Selection(state=self.state, city=self.city, year=year)


def is_valid_year(year: object) -> bool:
    """Check that *year* is an int inside the supported range."""
    return (
        isinstance(year, int)
        and not isinstance(year, bool)
        and Settings.YEAR_MIN <= year <= Settings.YEAR_MAX
    )


def year_options() -> list[int]:
    """All selectable years, ascending."""
    return list(range(Settings.YEAR_MIN, Settings.YEAR_MAX + 1))
