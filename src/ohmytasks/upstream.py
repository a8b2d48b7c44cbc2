from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class UpstreamError(Exception):
    """
    A failed call to the upstream task API.

    ``status_code`` is None for transport failures (DNS, refused connection,
    timeout); ``body`` holds the best-effort decoded response body.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamNotConfigured(RuntimeError):
    """Raised when no upstream endpoint is configured."""


def _safe_body(resp: requests.Response) -> Any:
    try:
        return resp.json() if resp.content else {}
    except ValueError:
        return resp.text


# PUBLIC_INTERFACE
class UpstreamClient:
    """
    Thin ``requests`` wrapper around the external task-storage endpoint.

    Every method returns the decoded JSON body (or raw text when the body is
    not JSON) and raises UpstreamError for transport failures and non-2xx
    responses.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not endpoint:
            raise UpstreamNotConfigured("TASKS_API_ENDPOINT is not configured")
        self.endpoint = endpoint
        self._api_key = api_key
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def session(self) -> requests.Session:
        return self._session

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["x-api-key"] = self._api_key
        return headers

    def request(
        self,
        method: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            resp = self._session.request(
                method,
                self.endpoint,
                params=params,
                json=json_body,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("Upstream %s error: %s", method, e)
            raise UpstreamError(f"{method} {self.endpoint} failed: {e}") from e

        body = _safe_body(resp)
        if not resp.ok:
            logger.error("Upstream %s returned HTTP %s", method, resp.status_code)
            raise UpstreamError(
                f"HTTP {resp.status_code}: {resp.text or resp.reason}",
                status_code=resp.status_code,
                body=body,
            )
        return body

    def get(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", params=params)

    def post(self, json_body: Dict[str, Any]) -> Any:
        return self.request("POST", json_body=json_body)

    def put(self, params: Dict[str, Any], json_body: Dict[str, Any]) -> Any:
        return self.request("PUT", params=params, json_body=json_body)

    def delete(self, params: Dict[str, Any]) -> Any:
        return self.request("DELETE", params=params)
