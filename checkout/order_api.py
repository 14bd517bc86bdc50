"""
Order API client used by the checkout page.

Two endpoints: order creation returns the PayPal order id, capture returns a
provider-order-shaped body. Neither call is retried.
"""

import json
from typing import Any

import requests
import structlog

from checkout.errors import RemoteError

log = structlog.get_logger(__name__)

HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def error_detail(body: Any) -> dict[str, Any] | None:
    """First entry of the ``details`` array PayPal uses for failures."""
    if not isinstance(body, dict):
        return None
    detail = _first(body.get("details"))
    return detail if isinstance(detail, dict) else None


def describe_create_failure(body: Any) -> str:
    detail = error_detail(body)
    if detail:
        return f"{detail.get('issue')} {detail.get('description')} ({body.get('debug_id')})"
    return json.dumps(body)


def find_transaction(body: Any) -> dict[str, Any] | None:
    """Capture record of the first purchase unit, else its authorization."""
    if not isinstance(body, dict):
        return None
    unit = _first(body.get("purchase_units"))
    payments = unit.get("payments") if isinstance(unit, dict) else None
    if not isinstance(payments, dict):
        return None
    transaction = _first(payments.get("captures")) or _first(
        payments.get("authorizations")
    )
    return transaction if isinstance(transaction, dict) else None


def describe_capture_failure(body: Any, transaction: dict[str, Any] | None) -> str:
    if transaction:
        return f"Transaction {transaction.get('status')}: {transaction.get('id')}"
    detail = error_detail(body)
    if detail:
        return f"{detail.get('description')} ({body.get('debug_id')})"
    return json.dumps(body)


class OrderAPIClient:
    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _post(self, url: str, payload: dict[str, Any]) -> Any:
        try:
            r = requests.post(url, json=payload, headers=HEADERS, timeout=self.timeout)
            log.info("order_api.response", url=url, status_code=r.status_code)
            return r.json()
        except (requests.RequestException, ValueError) as e:
            log.error("order_api.request_failed", url=url, error=str(e))
            raise RemoteError(str(e), url=url) from e

    def create_order(self, payload: dict[str, Any]) -> str:
        """Create the PayPal order; returns its id."""
        url = f"{self.base_url}/api/orders"
        body = self._post(url, payload)
        order_id = body.get("id") if isinstance(body, dict) else None
        if not order_id:
            raise RemoteError(describe_create_failure(body), url=url, body=body)
        return order_id

    def capture_order(self, paypal_order_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Capture an approved order; returns the raw response body."""
        url = f"{self.base_url}/api/orders/{paypal_order_id}/capture"
        body = self._post(url, payload)
        if not isinstance(body, dict):
            raise RemoteError(json.dumps(body), url=url, body=body)
        return body
