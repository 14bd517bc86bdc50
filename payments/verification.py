"""
Server-side verification of a PayPal order before it is recorded.

The order is fetched from PayPal and accepted when it is COMPLETED and its
first purchase unit carries exactly the expected amount.
"""

from typing import Any

import structlog
from sqlalchemy.orm import Session

from core.logging import BusinessEvents
from core.metrics import payment_verifications
from db.models import PaymentVerification
from payments.paypal_service import PayPalService

log = structlog.get_logger(__name__)


def is_valid_order(order: dict[str, Any], expected_amount: Any) -> bool:
    # Exact comparison of the value as sent; "10" and "10.00" do not match.
    return (
        order.get("status") == "COMPLETED"
        and order["purchase_units"][0]["amount"]["value"] == expected_amount
    )


def payer_email(order: dict[str, Any]) -> str:
    payer = order.get("payer") or {}
    return payer.get("email_address") or "unknown"


def verify_payment(
    db: Session, service: PayPalService, order_id: str, expected_amount: Any
) -> dict[str, Any]:
    """
    Verify a PayPal order and record it when it checks out.

    Args:
        db: Database session
        service: PayPal REST client
        order_id: PayPal order id
        expected_amount: Amount the caller expects, compared as given

    Returns:
        ``{"success": True}`` or ``{"success": False, "details": <order>}``
    """
    # expected_amount is supplied by the caller and is not checked against a
    # server-side order record.
    log.info(
        BusinessEvents.VERIFICATION_ATTEMPT,
        order_id=order_id,
        expected_amount=expected_amount,
    )
    order = service.get_order(order_id)

    if not is_valid_order(order, expected_amount):
        log.warning(
            BusinessEvents.PAYMENT_REJECTED,
            order_id=order_id,
            status=order.get("status"),
            expected_amount=expected_amount,
        )
        payment_verifications.labels(outcome="rejected").inc()
        return {"success": False, "details": order}

    # Unconditional upsert; concurrent verifications of one order: last write wins.
    db.merge(
        PaymentVerification(
            order_id=order_id,
            status="verified",
            amount=str(expected_amount),
            payer=payer_email(order),
        )
    )
    db.commit()

    log.info(BusinessEvents.PAYMENT_VERIFIED, order_id=order_id, amount=expected_amount)
    payment_verifications.labels(outcome="verified").inc()
    return {"success": True}
