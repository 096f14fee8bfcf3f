"""
REST client for the appliance's rule and configuration-set APIs.
"""

import json
import logging
from typing import Any

import requests

from sniview.core.exceptions import BackendError, InvalidSelectionError
from sniview.core.models import NEW_SET_ID, SetConfig

__all__ = ["SniviewApiClient", "error_message"]

logger = logging.getLogger(__name__)


def error_message(response: requests.Response) -> str:
    """
    Human-readable message for a failed response.

    Prefers the backend's JSON ``message`` field, then the serialized JSON
    body, then the raw text, then the status line.
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text or f"HTTP {response.status_code} {response.reason or ''}".strip()
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return json.dumps(body)


class SniviewApiClient:
    """
    Implements RulesApiPort and SetsApiPort over HTTP.

    Every failure, including connection errors, is raised as BackendError.

    Example:
        client = SniviewApiClient("http://192.168.1.1:7000")
        sets = client.list_sets()
        client.add_domain("example.com", sets[0].id)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Appliance web UI address, e.g. http://192.168.1.1:7000
            timeout: Per-request timeout in seconds
            session: Shared requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, payload: Any = None) -> Any:
        url = self.url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BackendError(str(e)) from e

        if not response.ok:
            message = error_message(response)
            raise BackendError(message, status_code=response.status_code, body=response.text)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _check_set_id(set_id: str) -> None:
        if not set_id:
            raise InvalidSelectionError("A target set id is required")
        if set_id == NEW_SET_ID:
            raise InvalidSelectionError("Create the set before inserting into it")

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def add_domain(
        self,
        domain: str,
        set_id: str,
        set_name: str | None = None,
    ) -> dict[str, Any]:
        """Add a domain to a set's manual domain list."""
        self._check_set_id(set_id)
        payload: dict[str, Any] = {"domain": domain, "set_id": set_id}
        if set_name:
            payload["set_name"] = set_name
        result = self._request("POST", "/api/geosite/domain", payload)
        return result if isinstance(result, dict) else {}

    def add_ips(
        self,
        cidrs: list[str],
        set_id: str,
        set_name: str | None = None,
    ) -> dict[str, Any]:
        """Add one or more CIDRs to a set."""
        self._check_set_id(set_id)
        payload: dict[str, Any] = {"cidr": list(cidrs), "set_id": set_id}
        if set_name:
            payload["set_name"] = set_name
        result = self._request("PUT", "/api/geoip", payload)
        return result if isinstance(result, dict) else {}

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    def list_sets(self) -> list[SetConfig]:
        """Return the configured sets in backend order."""
        config = self._request("GET", "/api/config")
        if not isinstance(config, dict):
            return []
        sets = config.get("sets")
        if not isinstance(sets, list):
            return []
        return [SetConfig.from_dict(s) for s in sets if isinstance(s, dict)]

    def create_set(self, name: str, enabled: bool = True) -> SetConfig:
        result = self._request("POST", "/api/sets", {"name": name, "enabled": enabled})
        if not isinstance(result, dict) or not result.get("id"):
            raise BackendError(f"Unexpected response creating set: {result!r}")
        return SetConfig.from_dict(result)

    def update_set(self, set_config: SetConfig) -> SetConfig:
        result = self._request("PUT", f"/api/sets/{set_config.id}", set_config.to_dict())
        return SetConfig.from_dict(result) if isinstance(result, dict) else set_config

    def delete_set(self, set_id: str) -> None:
        self._request("DELETE", f"/api/sets/{set_id}")

    def reorder_sets(self, set_ids: list[str]) -> None:
        self._request("POST", "/api/sets/reorder", {"set_ids": list(set_ids)})

    def duplicate_set(self, set_config: SetConfig) -> SetConfig:
        """Create a copy of a set named ``"<name> (copy)"``."""
        payload = {k: v for k, v in set_config.to_dict().items() if k != "id"}
        payload["name"] = f"{set_config.name} (copy)"
        result = self._request("POST", "/api/sets", payload)
        if not isinstance(result, dict) or not result.get("id"):
            raise BackendError(f"Unexpected response duplicating set: {result!r}")
        return SetConfig.from_dict(result)
