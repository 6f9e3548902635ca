"""Client for the public user API."""

from __future__ import annotations

from typing import Any

import requests

from .errors import GorestError


class GorestClient:
    """Small JSON client for listing, fetching and creating users."""

    def __init__(
        self,
        base_url: str,
        access_token: str,
        session: requests.Session | None = None,
        timeout: float = 3.0,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
        }

    def _request(self, method: str, path: str, body: Any = None) -> requests.Response:
        return self.session.request(
            method,
            self.base_url + path,
            headers=self._headers,
            json=body,
            timeout=self.timeout,
        )

    def get_all_users(self) -> list[dict[str, Any]]:
        """Return the list of users."""
        return self._request("GET", "users/").json()

    def get_user(self, user_id: str) -> dict[str, Any]:
        """Return one user's details."""
        return self._request("GET", f"users/{user_id}").json()

    def create_user(self, user: dict[str, Any]) -> dict[str, Any]:
        """Create a user, raising GorestError with the API's error entries on failure."""
        response = self._request("POST", "users", user)
        if response.status_code >= 300:
            data = response.json()
            if isinstance(data, dict):
                data = [data]
            raise GorestError(data)
        return response.json()