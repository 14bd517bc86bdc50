from dataclasses import dataclass
from typing import Protocol

from checkout.messages import format_price
from checkout.schemas import CartSnapshot


@dataclass(frozen=True)
class OrderSummary:
    """Display lines of the order summary box; optional lines are None when hidden."""

    cart_total: str
    delivery_fee: str
    final_total: str
    express_fee: str | None = None
    tip: str | None = None

    @classmethod
    def from_cart(cls, cart: CartSnapshot) -> "OrderSummary":
        return cls(
            cart_total=format_price(cart.cart_total),
            delivery_fee=format_price(cart.delivery_fee),
            final_total=format_price(cart.final_total),
            express_fee=format_price(cart.express_fee) if cart.express_fee > 0 else None,
            tip=format_price(cart.tip) if cart.tip > 0 else None,
        )


class CheckoutView(Protocol):
    """The page elements the orchestrator writes to."""

    def show_message(self, html: str, kind: str = "info") -> None: ...

    def show_summary(self, summary: OrderSummary) -> None: ...
