"""
Async HTTP client for the Keyhost API.
"""

import logging
from typing import Any, Dict, Optional, Union
from uuid import UUID

import httpx

from keyhost.client.forms import FormValidationError, PropertyForm

logger = logging.getLogger(__name__)


class KeyhostAPIError(Exception):
    """Error response from the API."""

    def __init__(self, status_code: int, message: str, payload: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}
        super().__init__(f"{status_code}: {message}")


class KeyhostClient:
    """
    Thin wrapper over ``httpx.AsyncClient`` that understands the API envelope.

    Successful calls return the envelope's ``data``; error envelopes raise
    ``KeyhostAPIError``. Property writes validate the form first, so an
    invalid form never reaches the network.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        api_prefix: str = "/api",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.api_prefix = api_prefix.rstrip("/")
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "KeyhostClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        response = await self._client.request(method, path, headers=self._headers(), **kwargs)

        try:
            payload = response.json() if response.content else {}
        except ValueError:
            payload = {"message": response.text}

        if response.is_error:
            message = payload.get("message") or response.reason_phrase
            logger.debug(f"{method} {path} failed with {response.status_code}: {message}")
            raise KeyhostAPIError(response.status_code, message, payload)
        return payload

    async def _data(self, method: str, path: str, **kwargs: Any) -> Any:
        payload = await self._request(method, f"{self.api_prefix}{path}", **kwargs)
        return payload.get("data")

    async def health(self) -> Dict[str, Any]:
        """Raw ``/health`` body."""
        return await self._request("GET", "/health")

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and keep the access token for later calls."""
        data = await self._data("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    async def public_settings(self) -> Dict[str, Any]:
        return await self._data("GET", "/settings/public")

    async def list_properties(self, **filters: Any) -> Dict[str, Any]:
        params = {key: value for key, value in filters.items() if value is not None}
        return await self._data("GET", "/properties", params=params)

    async def list_owner_properties(self, page: int = 1, limit: int = 12) -> Dict[str, Any]:
        return await self._data("GET", "/property-owner/properties", params={"page": page, "limit": limit})

    async def create_property(self, form: PropertyForm) -> Dict[str, Any]:
        """
        Submit a new listing.

        Raises:
            FormValidationError: Before any request when the form is invalid
            KeyhostAPIError: When the API rejects the listing
        """
        payload = form.to_payload()
        payload.setdefault("images", [])
        return await self._data("POST", "/property-owner/properties", json=payload)

    async def update_property(self, property_id: Union[UUID, str], form: PropertyForm) -> Dict[str, Any]:
        """
        Replace a listing's fields with the form's values.

        Raises:
            FormValidationError: Before any request when the form is invalid
        """
        payload = form.to_payload()
        return await self._data("PUT", f"/property-owner/properties/{property_id}", json=payload)

    async def delete_property(self, property_id: Union[UUID, str]) -> None:
        await self._request("DELETE", f"{self.api_prefix}/property-owner/properties/{property_id}")

    async def admin_dashboard(self) -> Dict[str, Any]:
        return await self._data("GET", "/admin/dashboard")


__all__ = ["KeyhostClient", "KeyhostAPIError", "FormValidationError"]
