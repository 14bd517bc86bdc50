"""
Cart snapshot and order payload models.

The cart comes from the host application with camelCase keys and loosely typed
values. Numbers are coerced the way a browser's ``parseFloat(x) || default``
would, so a payload never carries NaN or a missing field.
"""

import math
import re
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# parseFloat only reads ASCII digits; "٣" is not a number to the browser.
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)

Number = int | float


def to_number(value: Any, default: Number = 0) -> Number:
    """Parse ``value`` like parseFloat, falling back to ``default`` when falsy.

    Whole numbers come back as ``int`` so the JSON payload reads ``1``, not ``1.0``.
    """
    if isinstance(value, bool):
        value = str(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value if value is not None else "").strip())
        if not match:
            return default
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number) or number == 0:
        return default
    return int(number) if number.is_integer() else number


def _text(value: Any) -> str:
    if not value:
        return ""
    return str(value)


class CartItem(BaseModel):
    id: str = ""
    product_id: str = Field("", alias="productId")
    name: str = ""
    quantity: Number = 1
    unit: str = ""
    price: Number = 0
    total_price: Number = Field(0, alias="totalPrice")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("id", "product_id", "name", "unit", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, value: Any) -> Number:
        return to_number(value, default=1)

    @field_validator("price", "total_price", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> Number:
        return to_number(value)


class CartSnapshot(BaseModel):
    """Cart state handed over by the host application for one checkout attempt."""

    user_id: str = Field("", alias="userId")
    items: tuple[CartItem, ...] = ()
    cart_total: Number = Field(0, alias="cartTotal")
    delivery_fee: Number = Field(0, alias="deliveryFee")
    express_fee: Number = Field(0, alias="expressFee")
    tip: Number = 0
    final_total: Number = Field(0, alias="finalTotal")
    delivery_address: str = Field("", alias="deliveryAddress")
    delivery_label: str = Field("", alias="deliveryLabel")
    wilaya: str = ""
    receiver_name: str = Field("", alias="receiverName")
    receiver_phone: str = Field("", alias="receiverPhone")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator(
        "user_id",
        "delivery_address",
        "delivery_label",
        "wilaya",
        "receiver_name",
        "receiver_phone",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator(
        "cart_total", "delivery_fee", "express_fee", "tip", "final_total", mode="before"
    )
    @classmethod
    def coerce_amount(cls, value: Any) -> Number:
        return to_number(value)

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, value: Any) -> tuple:
        if not isinstance(value, (list, tuple)):
            return ()
        return tuple(item if item is not None else {} for item in value)

    @classmethod
    def from_host(cls, data: dict[str, Any] | None) -> "CartSnapshot":
        return cls.model_validate(data or {})

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0


def iso_timestamp(now: datetime | None = None) -> str:
    """UTC timestamp in the ``2024-01-31T12:00:00.000Z`` form."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_order_payload(cart: CartSnapshot, now: datetime | None = None) -> dict[str, Any]:
    """Payload for ``POST /api/orders``."""
    payload = cart.model_dump(by_alias=True)
    payload["items"] = [item.model_dump(by_alias=True) for item in cart.items]
    payload["paymentMethod"] = "paypal"
    payload["timestamp"] = iso_timestamp(now)
    return payload


def build_capture_payload(
    cart: CartSnapshot, paypal_order_id: str, now: datetime | None = None
) -> dict[str, Any]:
    """Payload for ``POST /api/orders/{id}/capture``."""
    payload = build_order_payload(cart, now)
    payload["paypalOrderId"] = paypal_order_id
    payload["paymentStatus"] = "completed"
    return payload
