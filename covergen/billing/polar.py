import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

POLAR_API_URLS = {
    "sandbox": "https://sandbox-api.polar.sh/v1",
    "production": "https://api.polar.sh/v1",
}


class PolarAPIError(RuntimeError):
    pass


class PolarClient:
    """
    Minimal Polar API client. Built once in create_app() and kept in
    ``app.extensions["polar"]`` so tests can swap in a fake.
    """

    def __init__(self, access_token: str | None, server: str = "sandbox", timeout: float = 10.0,
                 transport: httpx.BaseTransport | None = None):
        if server not in POLAR_API_URLS:
            raise ValueError(f"Unknown Polar server: {server}")
        self._access_token = access_token
        self.server = server
        self.base_url = POLAR_API_URLS[server]
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._access_token)

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.configured:
            raise PolarAPIError("POLAR_ACCESS_TOKEN is not configured")
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }
        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                response = client.post(path, headers=headers, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("polar.api.http_error", extra={"path": path, "status_code": e.response.status_code})
            raise PolarAPIError(f"Polar API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("polar.api.transport_error", extra={"path": path, "error": type(e).__name__})
            raise PolarAPIError("Polar API unreachable") from e
        return response.json()

    def create_customer_portal_url(self, customer_id: str) -> str:
        """Create a customer session and return its portal URL."""
        data = self._post("/customer-sessions/", {"customer_id": customer_id})
        url = data.get("customer_portal_url")
        if not url:
            raise PolarAPIError("Polar did not return a customer portal URL")
        return url

    def __repr__(self) -> str:
        return f"<PolarClient server={self.server!r} configured={self.configured}>"
