from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

BUTTON_CONTAINER = "#paypal-button-container"

BUTTON_STYLE = {
    "shape": "rect",
    "layout": "vertical",
    "color": "gold",
    "label": "paypal",
}


@dataclass(frozen=True)
class ButtonCallbacks:
    create_order: Callable[[], Awaitable[str]]
    on_approve: Callable[[dict[str, Any]], Awaitable[None]]
    on_error: Callable[[Exception], None]


class PaymentSDK(Protocol):
    """The slice of the PayPal JS SDK the checkout page relies on."""

    def is_ready(self) -> bool:
        """True once the SDK script has loaded and exposes its buttons API."""
        ...

    async def render_buttons(
        self, callbacks: ButtonCallbacks, style: dict[str, str], container: str
    ) -> None: ...
