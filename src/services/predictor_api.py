# src/services/predictor_api.py

"""Async JSON client for the remote price prediction service."""

import json
import logging
from typing import Any

from curl_cffi.requests import AsyncSession

from src.config.settings import Settings
from src.models.errors import ServiceError

logger = logging.getLogger("estate_predict.api")

# Envelope layers unwrapped before giving up
_MAX_UNWRAP_DEPTH = 3


def decode_payload(raw: Any) -> Any:
    """Unwrap a possibly double-encoded response body.

    The service answers either with the structured object itself
    (``{"states": [...]}``), with a JSON string holding that object,
    or with an envelope whose ``body`` field is such a string
    (``{"body": "{\\"states\\": [...]}"}``). All three decode to the
    same structure.

    Raises:
        ValueError: A string layer is not valid JSON.
    """
    data = raw
    for _ in range(_MAX_UNWRAP_DEPTH):
        if isinstance(data, str):
            data = json.loads(data)
        elif isinstance(data, dict) and data.get("body"):
            data = data["body"]
        else:
            break
    return data


class PredictorAPI:
    """Thin async wrapper around the service's JSON endpoints.

    Transport errors, non-2xx statuses and undecodable bodies all
    surface as :class:`ServiceError`. Interpreting the decoded payload
    is left to the callers.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: Any | None = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self._session = session
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _get_session(self) -> Any:
        """Create the HTTP session on first use, inside the event loop."""
        if self._session is None:
            self._session = AsyncSession()
        return self._session

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("HTTP session closed")

    async def get_json(self, path: str) -> Any:
        """GET *path* and return the decoded payload."""
        return await self._request("GET", path)

    async def post_json(self, path: str, payload: dict[str, Any]) -> Any:
        """POST *payload* as JSON to *path* and return the decoded payload."""
        return await self._request("POST", path, payload)

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        session = self._get_session()
        headers = dict(self.settings.DEFAULT_HEADERS)

        try:
            if method == "POST":
                resp = await session.post(
                    url,
                    headers=headers,
                    json=payload,
                    timeout=self._request_timeout,
                )
            else:
                resp = await session.get(
                    url,
                    headers=headers,
                    timeout=self._request_timeout,
                )
        except Exception as exc:
            logger.warning(
                "%s %s failed: %s", method, url, exc, exc_info=True,
            )
            raise ServiceError(f"Request to {path} failed: {exc}") from exc

        logger.debug(
            "%s %s -> HTTP %d: %.500s",
            method,
            path,
            resp.status_code,
            resp.text,
        )

        if not 200 <= resp.status_code < 300:
            message = self._error_message(resp)
            logger.warning("%s %s rejected: %s", method, path, message)
            raise ServiceError(message)

        try:
            data = decode_payload(resp.json())
        except (ValueError, RecursionError) as exc:
            logger.warning(
                "Undecodable body from %s: %s", path, exc, exc_info=True,
            )
            raise ServiceError(
                f"Malformed response from {path}"
            ) from exc

        logger.debug("Decoded %s payload: %r", path, data)
        return data

    @staticmethod
    def _error_message(resp: Any) -> str:
        """Prefer the service's own ``error`` text over the bare status."""
        try:
            data = decode_payload(resp.json())
        except (ValueError, RecursionError):
            data = None
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return f"HTTP {resp.status_code}"
