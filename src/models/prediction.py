# src/models/prediction.py

"""Prediction result and history entry models."""

from dataclasses import dataclass, field
from datetime import datetime

from src.models.selection import Selection


@dataclass
class PredictionResult:
    """A predicted price for the selection that produced it."""

    selection: Selection
    price: float
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class HistoryEntry:
    """Immutable snapshot of one successful prediction."""

    state: str
    city: str
    year: int
    price: float
    timestamp: datetime

    @classmethod
    def from_result(cls, result: PredictionResult) -> "HistoryEntry":
        """Snapshot a completed prediction."""
        sel = result.selection
        if not sel.is_complete or sel.year is None:
            raise ValueError("history requires a complete selection")
        return cls(
            state=sel.state,
            city=sel.city,
            year=sel.year,
            price=result.price,
            timestamp=result.created_at,
        )


def format_price(value: float) -> str:
    """Render a price like ``$950,000`` (cents only when present)."""
    if float(value).is_integer():
        return f"${int(value):,}"
    return f"${value:,.2f}"
