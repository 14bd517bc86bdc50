"""
Checkout orchestration for the PayPal payment page.

Drives SDK readiness, order creation, capture and host application
notification for a single checkout attempt.
"""

from checkout.errors import (
    CartValidationError,
    CheckoutError,
    RemoteError,
    SDKTimeoutError,
)
from checkout.orchestrator import CheckoutOrchestrator, CheckoutSession, CheckoutState

__all__ = [
    "CartValidationError",
    "CheckoutError",
    "CheckoutOrchestrator",
    "CheckoutSession",
    "CheckoutState",
    "RemoteError",
    "SDKTimeoutError",
]
