"""
Host application bridge.

The checkout page runs inside a WebView. The host app may expose a named
message channel, a generic handler bridge, or nothing at all, in which case a
plain redirect is the only way out.
"""

from collections.abc import Callable
from typing import Any, Protocol
from urllib.parse import urlencode

import structlog

from core.logging import BusinessEvents

log = structlog.get_logger(__name__)

CANCEL_TOKEN = "cancel"
ORDER_CREATED_HANDLER = "orderCreated"


class MessageChannel(Protocol):
    def post_message(self, message: str) -> None: ...


class HandlerBridge(Protocol):
    def call_handler(self, name: str, payload: dict[str, Any]) -> Any: ...


class Navigator(Protocol):
    def redirect(self, url: str) -> None: ...

    def back(self) -> None: ...


class HostBridge:
    def __init__(
        self,
        navigator: Navigator,
        success_url: str,
        success_channel: MessageChannel | None = None,
        handler_bridge: HandlerBridge | None = None,
        cancel_channel: MessageChannel | None = None,
    ):
        self.navigator = navigator
        self.success_url = success_url
        self.success_channel = success_channel
        self.handler_bridge = handler_bridge
        self.cancel_channel = cancel_channel

    def _success_notifiers(
        self,
    ) -> tuple[tuple[str, Callable[[str, str], None] | None], ...]:
        """Notifiers in priority order; ``None`` marks a capability the host lacks."""
        channel = self.success_channel
        handler = self.handler_bridge
        return (
            (
                "message_channel",
                (lambda order_id, _: channel.post_message(order_id)) if channel else None,
            ),
            (
                "handler_bridge",
                (
                    lambda order_id, paypal_order_id: handler.call_handler(
                        ORDER_CREATED_HANDLER,
                        {
                            "orderId": order_id,
                            "paypalOrderId": paypal_order_id,
                            "status": "success",
                        },
                    )
                )
                if handler
                else None,
            ),
            ("redirect", self._redirect_to_success),
        )

    def _redirect_to_success(self, order_id: str, paypal_order_id: str) -> None:
        self.navigator.redirect(f"{self.success_url}?{urlencode({'orderId': order_id})}")

    def notify_success(self, order_id: str, paypal_order_id: str) -> str:
        """Tell the host app about the new order; returns the channel used."""
        for name, notify in self._success_notifiers():
            if notify is None:
                continue
            notify(order_id, paypal_order_id)
            log.info(
                BusinessEvents.HOST_NOTIFIED,
                channel=name,
                order_id=order_id,
                paypal_order_id=paypal_order_id,
            )
            return name
        raise RuntimeError("no host notifier available")

    def notify_cancel(self) -> str:
        if self.cancel_channel is not None:
            self.cancel_channel.post_message(CANCEL_TOKEN)
            return "message_channel"
        log.info("checkout.cancel_channel_missing", fallback="history.back")
        self.navigator.back()
        return "history"

    def open_orders(self, path: str = "/orders") -> None:
        self.navigator.redirect(path)
