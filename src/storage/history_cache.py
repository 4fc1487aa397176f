# src/storage/history_cache.py

"""Bounded, JSON-persisted log of the most recent predictions."""

import json
import logging
import math
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.models.errors import PersistenceError
from src.models.prediction import HistoryEntry
from src.models.selection import is_valid_year

logger = logging.getLogger("estate_predict.history")


def _entry_to_dict(entry: HistoryEntry) -> dict[str, Any]:
    return {
        "city": entry.city,
        "state": entry.state,
        "year": entry.year,
        "price": entry.price,
        "date": entry.timestamp.isoformat(),
    }


def _entry_from_dict(raw: Any) -> HistoryEntry:
    """Rebuild one entry, raising ``ValueError`` on any malformed field."""
    if not isinstance(raw, dict):
        raise ValueError(f"history record is not an object: {raw!r}")

    state, city = raw.get("state"), raw.get("city")
    if not isinstance(state, str) or not state:
        raise ValueError(f"bad state: {state!r}")
    if not isinstance(city, str) or not city:
        raise ValueError(f"bad city: {city!r}")

    year = raw.get("year")
    if not is_valid_year(year):
        raise ValueError(f"bad year: {year!r}")

    price = raw.get("price")
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise ValueError(f"bad price: {price!r}")
    try:
        price = float(price)
    except OverflowError as exc:
        raise ValueError(f"bad price: {price!r}") from exc
    if not math.isfinite(price) or price < 0:
        raise ValueError(f"bad price: {price!r}")

    return HistoryEntry(
        state=state,
        city=city,
        year=int(year),  # type: ignore[arg-type]
        price=price,
        timestamp=datetime.fromisoformat(str(raw.get("date"))),
    )


class HistoryCache:
    """Append-then-truncate log of successful predictions.

    The whole log is rewritten on every append; the file is replaced
    atomically so a crash never leaves a half-written record behind.
    """

    def __init__(
        self,
        path: Path | None = None,
        limit: int | None = None,
    ) -> None:
        self.path: Path = path or Settings.HISTORY_PATH
        self.limit: int = Settings.HISTORY_LIMIT if limit is None else limit
        self._entries: list[HistoryEntry] = []
        logger.debug(
            "HistoryCache initialised (path=%s, limit=%d)",
            self.path,
            self.limit,
        )

    @property
    def entries(self) -> list[HistoryEntry]:
        """Snapshot of the log, oldest first."""
        return list(self._entries)

    def _newest(self, entries: list[HistoryEntry]) -> list[HistoryEntry]:
        # entries[-0:] would keep everything
        if self.limit <= 0:
            return []
        return entries[-self.limit:]

    def load(self) -> list[HistoryEntry]:
        """Read the persisted log, falling back to empty on any problem."""
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError("history file is not a list")
            entries = [_entry_from_dict(item) for item in raw]
        except FileNotFoundError:
            logger.debug("No history file at %s", self.path)
            entries = []
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning(
                "Ignoring unreadable history at %s: %s", self.path, exc,
            )
            entries = []

        self._entries = self._newest(entries)
        logger.info("Loaded %d history entries", len(self._entries))
        return self.entries

    def record(self, entry: HistoryEntry) -> list[HistoryEntry]:
        """Append *entry*, keep the newest ``limit`` entries, persist."""
        self._entries.append(entry)
        self._entries = self._newest(self._entries)
        try:
            self._persist()
        except PersistenceError as exc:
            logger.error("History not saved: %s", exc, exc_info=True)
        return self.entries

    def clear(self) -> None:
        """Forget every entry and remove the persisted record."""
        count = len(self._entries)
        self._entries = []
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.error(
                "Failed to remove history file %s: %s",
                self.path,
                exc,
                exc_info=True,
            )
        logger.info("History cleared (%d entries removed)", count)

    def _persist(self) -> None:
        """Write the log to a sibling temp file, then swap it in."""
        data = [_entry_to_dict(e) for e in self._entries]
        tmp_name = ""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise PersistenceError(
                f"Could not write {self.path}: {exc}"
            ) from exc

        logger.info(
            "Saved %d history entries to %s", len(data), self.path,
        )
