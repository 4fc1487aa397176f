# src/models/errors.py

"""Error taxonomy for catalog loads, predictions and history storage."""


class EstatePredictError(Exception):
    """Base class for all estate_predict failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CatalogUnavailable(EstatePredictError):
    """States or cities could not be loaded from the service."""


class ValidationError(EstatePredictError):
    """A required selection field is missing or out of range."""


class ServiceError(EstatePredictError):
    """The prediction call failed or returned unusable data."""


class PersistenceError(EstatePredictError):
    """The history log could not be written to disk."""
