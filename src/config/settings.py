# src/config/settings.py

"""Central configuration for the estate_predict client."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the estate_predict client."""

    # --- Remote prediction service ---
    API_BASE_URL: str = os.getenv(
        "ESTATE_PREDICT_API_URL", "http://localhost:8000"
    ).rstrip("/")
    REQUEST_TIMEOUT: int = int(
        os.getenv("ESTATE_PREDICT_TIMEOUT", "15")
    )                                   # Seconds before a request times out
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }

    # --- Endpoints ---
    STATES_PATH: str = "/states"
    CITIES_PATH: str = "/cities/{state}"
    PREDICT_PATH: str = "/predict"

    # --- Selection ---
    YEAR_MIN: int = 2012
    YEAR_MAX: int = 2100

    # --- History ---
    HISTORY_LIMIT: int = 5              # Most recent predictions kept

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    HISTORY_PATH: Path = Path(
        os.getenv(
            "ESTATE_PREDICT_HISTORY_PATH",
            str(DATA_DIR / "prediction_history.json"),
        )
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv(
        "ESTATE_PREDICT_LOG_LEVEL", "WARNING"
    )
