from datetime import UTC, datetime, timedelta
from typing import Any

import requests
import structlog

from core.settings import Settings

_TOKEN_CACHE: tuple[str, datetime] | None = None

# Refresh a little before PayPal says the token expires.
TOKEN_EXPIRY_MARGIN = timedelta(seconds=60)

log = structlog.get_logger(__name__)


class PayPalService:
    """Minimal PayPal REST client: OAuth2 client credentials and order lookup."""

    def __init__(self, settings: Settings):
        self.base = settings.PAYPAL_BASE.rstrip("/")
        self.client = settings.PAYPAL_CLIENT_ID
        self.secret = settings.PAYPAL_SECRET

    def _token(self) -> str:
        global _TOKEN_CACHE
        if _TOKEN_CACHE and _TOKEN_CACHE[1] > datetime.now(UTC):
            return _TOKEN_CACHE[0]

        r = requests.post(
            f"{self.base}/v1/oauth2/token",
            auth=(self.client, self.secret),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data={"grant_type": "client_credentials"},
        )
        r.raise_for_status()
        data = r.json()
        tok = data["access_token"]
        lifetime = timedelta(seconds=int(data.get("expires_in", 300)))
        _TOKEN_CACHE = (tok, datetime.now(UTC) + lifetime - TOKEN_EXPIRY_MARGIN)
        return tok

    def get_order(self, order_id: str) -> dict[str, Any]:
        """Fetch ``/v2/checkout/orders/{order_id}`` as returned by PayPal."""
        token = self._token()
        r = requests.get(
            f"{self.base}/v2/checkout/orders/{order_id}",
            headers={"Authorization": f"Bearer {token}"},
        )
        log.info("paypal.order_fetched", order_id=order_id, status_code=r.status_code)
        return r.json()
