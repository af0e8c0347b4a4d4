import logging
from dataclasses import dataclass
from typing import Any

import requests
from pydantic import ValidationError as SchemaError

from hostellite.core.config import settings
from hostellite.core.errors import (
    ApiError, AuthError, HostelliteError, NetworkError, NotFoundError, ValidationError,
)
from hostellite.services.session_store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class ApiConfig:
    base_url: str           # e.g. https://findyourhostelbackendk.onrender.com/api
    timeout: float = 25

    @classmethod
    def from_settings(cls) -> "ApiConfig":
        return cls(base_url=settings.API_BASE_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)


def _error_message(data: Any, status_code: int) -> str:
    if isinstance(data, dict):
        msg = data.get("message") or data.get("error")
        if msg:
            return str(msg)
    return f"Request failed ({status_code})"


def parse_model(model, data):
    """Validate a response body, turning schema mismatches into ApiError."""
    try:
        return model.model_validate(data)
    except SchemaError as e:
        raise ApiError(f"Unexpected response from server: {e.error_count()} invalid field(s)") from e


def _error_for_status(status_code: int, message: str) -> HostelliteError:
    if status_code == 401:
        return AuthError(message, status_code)
    if status_code in (400, 422):
        return ValidationError(message, status_code)
    if status_code == 404:
        return NotFoundError(message, status_code)
    return ApiError(message, status_code)


class ApiClient:
    """JSON over HTTP against the hostel backend, bearer-authenticated from the session store.

    `http` is anything with a requests-compatible `request(method, url, **kw)`; a
    `requests.Session` by default.
    """

    def __init__(self, cfg: ApiConfig, session: SessionStore, http=None):
        self.cfg = cfg
        self.session = session
        self.http = http or requests.Session()

    def _headers(self, auth: bool) -> dict:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if auth:
            headers["Authorization"] = f"Bearer {self.session.require_token()}"
        return headers

    def request(self, method: str, path: str, payload: dict | None = None, auth: bool = True) -> Any:
        headers = self._headers(auth)
        url = f"{self.cfg.base_url}{path}"
        try:
            r = self.http.request(
                method=method.upper(), url=url, json=payload, headers=headers, timeout=self.cfg.timeout,
            )
        except requests.Timeout as e:
            logger.warning("%s %s timed out after %ss", method.upper(), path, self.cfg.timeout)
            raise NetworkError(f"Request timed out: {e}") from e
        except requests.RequestException as e:
            logger.warning("%s %s transport error: %s", method.upper(), path, e)
            raise NetworkError(f"Network error: {e}") from e

        try:
            data = r.json() if r.text else None
        except ValueError:
            data = {"raw": r.text}
        if r.status_code >= 400:
            msg = _error_message(data, r.status_code)
            logger.info("%s %s -> %s: %s", method.upper(), path, r.status_code, msg)
            raise _error_for_status(r.status_code, msg)
        return data

    def get(self, path: str, auth: bool = True) -> Any:
        return self.request("GET", path, auth=auth)

    def post(self, path: str, payload: dict | None = None, auth: bool = True) -> Any:
        return self.request("POST", path, payload, auth=auth)

    def delete(self, path: str, auth: bool = True) -> Any:
        return self.request("DELETE", path, auth=auth)
