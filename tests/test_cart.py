"""
Cart snapshot coercion and order payload tests.
"""

import json
import math
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from checkout.schemas import (
    CartSnapshot,
    build_capture_payload,
    build_order_payload,
    iso_timestamp,
    to_number,
)

NOW = datetime(2025, 3, 1, 12, 30, 45, 123456, tzinfo=UTC)


@pytest.mark.parametrize(
    "value, expected",
    [
        (10, 10.0),
        ("12.5", 12.5),
        ("  7 ", 7.0),
        ("3.2kg", 3.2),
        ("-4", -4.0),
        ("1e2", 100.0),
        (".5", 0.5),
    ],
)
def test_to_number_parses_leading_number(value, expected):
    assert to_number(value) == expected


@pytest.mark.parametrize(
    "value", [None, "", "abc", "NaN", float("nan"), True, [], {}, "٣", "١٠"]
)
def test_to_number_falls_back_to_default(value):
    assert to_number(value) == 0
    assert to_number(value, default=1) == 1


def test_to_number_never_returns_nan_or_inf():
    for value in (float("nan"), float("inf"), "Infinity"):
        result = to_number(value)
        assert not math.isnan(result)
        assert not math.isinf(result)


def test_cart_snapshot_coerces_numeric_fields():
    cart = CartSnapshot.from_host(
        {
            "userId": "u1",
            "items": [
                {"id": "a", "quantity": "2", "price": "4.50", "totalPrice": "9"},
                {"id": "b", "quantity": "lots", "price": None},
            ],
            "cartTotal": "9",
            "deliveryFee": "abc",
            "tip": "1.5",
            "finalTotal": 10.5,
        }
    )

    assert cart.cart_total == 9.0
    assert cart.delivery_fee == 0
    assert cart.express_fee == 0
    assert cart.tip == 1.5
    assert cart.final_total == 10.5
    assert cart.items[0].quantity == 2.0
    assert cart.items[0].price == 4.5
    assert cart.items[1].quantity == 1
    assert cart.items[1].price == 0
    assert cart.items[1].total_price == 0


def test_cart_snapshot_defaults_missing_fields():
    cart = CartSnapshot.from_host(None)

    assert cart.is_empty
    assert cart.user_id == ""
    assert cart.final_total == 0
    assert cart.receiver_phone == ""


def test_cart_snapshot_ignores_non_list_items():
    cart = CartSnapshot.from_host({"items": "oops"})
    assert cart.is_empty


def test_cart_snapshot_is_frozen():
    cart = CartSnapshot.from_host({"finalTotal": 10})
    with pytest.raises(ValidationError):
        cart.final_total = 20


def test_iso_timestamp_format():
    assert iso_timestamp(NOW) == "2025-03-01T12:30:45.123Z"


def test_build_order_payload():
    cart = CartSnapshot.from_host(
        {
            "userId": "u1",
            "items": [{"id": "a", "productId": "p1", "name": "Tomates", "unit": "kg"}],
            "finalTotal": "10",
            "deliveryAddress": "12 rue Didouche",
            "wilaya": "Alger",
            "receiverName": "Amina",
            "receiverPhone": "0555",
        }
    )

    payload = build_order_payload(cart, NOW)

    assert payload["userId"] == "u1"
    assert payload["finalTotal"] == 10
    assert payload["cartTotal"] == 0
    assert payload["paymentMethod"] == "paypal"
    assert payload["timestamp"] == "2025-03-01T12:30:45.123Z"
    assert payload["wilaya"] == "Alger"
    assert payload["items"] == [
        {
            "id": "a",
            "productId": "p1",
            "name": "Tomates",
            "quantity": 1,
            "unit": "kg",
            "price": 0,
            "totalPrice": 0,
        }
    ]
    assert "paypalOrderId" not in payload
    assert "paymentStatus" not in payload


def test_build_capture_payload_matches_creation_payload():
    cart = CartSnapshot.from_host(
        {"userId": "u1", "items": [{"id": "a", "price": 10}], "finalTotal": 10}
    )

    created = build_order_payload(cart, NOW)
    captured = build_capture_payload(cart, "PAY123", NOW)

    assert captured["paypalOrderId"] == "PAY123"
    assert captured["paymentStatus"] == "completed"
    assert {k: v for k, v in captured.items() if k not in ("paypalOrderId", "paymentStatus")} == created


def test_to_number_keeps_whole_numbers_integral():
    assert isinstance(to_number("3"), int)
    assert isinstance(to_number(10.0), int)
    assert isinstance(to_number("2.5"), float)


def test_order_payload_serializes_whole_numbers_without_fraction():
    cart = CartSnapshot.from_host(
        {"items": [{"id": "a", "quantity": "1", "price": 10, "totalPrice": "2.5"}], "finalTotal": 10}
    )

    body = json.dumps(build_order_payload(cart, NOW))

    assert '"quantity": 1,' in body
    assert '"price": 10,' in body
    assert '"totalPrice": 2.5' in body
    assert '"finalTotal": 10,' in body
