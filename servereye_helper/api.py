"""Server-Eye REST API client."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from . import config
from .auth import SESSION_COOKIE, Credential
from .errors import ApiError, AuthError, NotFound, PermissionDenied

__all__ = ["ServerEyeClient", "NODE_TYPE_AGENT", "NODE_TYPE_SENSORHUB"]

logger = logging.getLogger(__name__)

_USER_AGENT = "servereye-helper/1.0"

# Node "type" values returned by /me/nodes.
NODE_TYPE_CUSTOMER = 0
NODE_TYPE_CONNECTOR = 1
NODE_TYPE_SENSORHUB = 2
NODE_TYPE_AGENT = 3


def _snippet(resp: requests.Response) -> str:
    return (resp.text or "")[:300].replace("\n", " ")


class ServerEyeClient:
    """Thin wrapper over the Server-Eye v2 REST API.

    Every call takes the ``Credential`` to use; the client itself holds no
    session state beyond the pooled HTTP connection.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or config.SE_BASE_URL).rstrip("/")
        self.timeout = config.SE_TIMEOUT_S if timeout is None else timeout
        self.max_retries = config.SE_MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = config.SE_RETRY_DELAY_S if retry_delay is None else retry_delay
        self.session = session or requests.Session()

    def _request_with_retry(
        self, method: str, url: str, **kwargs: Any
    ) -> requests.Response:
        """Make an HTTP request with retry logic for transient failures."""
        last_error: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
                # Retry on 5xx errors
                if resp.status_code >= 500 and attempt < self.max_retries:
                    logger.debug(
                        "%s %s -> HTTP %d, retrying", method, url, resp.status_code
                    )
                    time.sleep(self.retry_delay * (attempt + 1))
                    continue
                return resp
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                last_error = e
                if attempt < self.max_retries:
                    logger.debug("%s %s failed (%s), retrying", method, url, e)
                    time.sleep(self.retry_delay * (attempt + 1))
                    continue
                raise
        # Should not reach here, but just in case
        if last_error:
            raise last_error
        raise RuntimeError("Request failed after retries")

    def _call(
        self,
        method: str,
        path: str,
        auth: Credential | None = None,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        headers = {"User-Agent": _USER_AGENT, "Accept": "application/json"}
        cookies: dict[str, str] = {}
        if auth is not None:
            headers.update(auth.headers())
            cookies.update(auth.cookies())
        resp = self._request_with_retry(
            method,
            url,
            headers=headers,
            cookies=cookies or None,
            params=params,
            json=json_body,
        )
        if resp.status_code == 401:
            raise AuthError(f"Server-Eye rejected the credential for {path}")
        if resp.status_code == 403:
            raise PermissionDenied(f"no permission for {path}")
        if resp.status_code == 404:
            raise NotFound(f"{path} not found")
        if not resp.ok:
            raise ApiError(resp.status_code, _snippet(resp))
        return resp

    def _get(
        self, path: str, auth: Credential, params: dict[str, Any] | None = None
    ) -> Any:
        return self._call("GET", path, auth, params=params).json()

    def _get_list(
        self, path: str, auth: Credential, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        data = self._get(path, auth, params=params)
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]

    # Authentication

    def login(self, email: str, password: str, code: str | None = None) -> str:
        body: dict[str, Any] = {"email": email, "password": password}
        if code:
            body["code"] = code
        resp = self._call("POST", "/auth/login", json_body=body)
        cookie = resp.cookies.get(SESSION_COOKIE)
        if not cookie:
            raise AuthError("login succeeded but no session cookie was returned")
        return cookie

    def me(self, auth: Credential) -> dict[str, Any]:
        return self._get("/me", auth)

    # Entities

    def fetch_agent(self, agent_id: str, auth: Credential) -> dict[str, Any]:
        return self._get(f"/agent/{agent_id}", auth)

    def fetch_container(self, container_id: str, auth: Credential) -> dict[str, Any]:
        return self._get(f"/container/{container_id}", auth)

    def fetch_customer(self, customer_id: str, auth: Credential) -> dict[str, Any]:
        return self._get(f"/customer/{customer_id}", auth)

    # Lists

    def list_nodes(self, auth: Credential) -> list[dict[str, Any]]:
        return self._get_list("/me/nodes", auth)

    def list_container_agents(
        self, container_id: str, auth: Credential
    ) -> list[dict[str, Any]]:
        return self._get_list(f"/container/{container_id}/agents", auth)

    def list_agent_notifications(
        self, agent_id: str, auth: Credential
    ) -> list[dict[str, Any]]:
        return self._get_list(f"/agent/{agent_id}/notification", auth)

    def list_container_notifications(
        self, container_id: str, auth: Credential
    ) -> list[dict[str, Any]]:
        return self._get_list(f"/container/{container_id}/notification", auth)

    def list_dispatch_times(
        self, customer_id: str, auth: Credential
    ) -> list[dict[str, Any]]:
        return self._get_list(f"/customer/{customer_id}/dispatchTime", auth)

    def agent_state(self, agent_id: str, auth: Credential) -> dict[str, Any] | None:
        """Latest state of a sensor including its message, or None."""
        states = self._get_list(
            f"/agent/{agent_id}/state",
            auth,
            params={"limit": 1, "includeMessage": "true"},
        )
        return states[0] if states else None

    def container_state(
        self, container_id: str, auth: Credential
    ) -> dict[str, Any] | None:
        states = self._get_list(
            f"/container/{container_id}/state",
            auth,
            params={"limit": 1, "includeMessage": "true"},
        )
        return states[0] if states else None
