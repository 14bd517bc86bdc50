"""
Checkout orchestration sequence.

WAITING_FOR_SDK -> READY -> CREATING -> CAPTURING -> SUCCESS, with FAILED
reachable from every step and CANCELLED from any step before a terminal one.
Only the SDK readiness wait is retried; create and capture run exactly once
per user action.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog
import tenacity
from starlette.concurrency import run_in_threadpool

from checkout import messages
from checkout.bridge import HostBridge, MessageChannel, HandlerBridge, Navigator
from checkout.errors import (
    CartValidationError,
    CheckoutError,
    RemoteError,
    SDKTimeoutError,
)
from checkout.order_api import (
    OrderAPIClient,
    describe_capture_failure,
    error_detail,
    find_transaction,
)
from checkout.schemas import CartSnapshot, build_capture_payload, build_order_payload
from checkout.sdk import BUTTON_CONTAINER, BUTTON_STYLE, ButtonCallbacks, PaymentSDK
from checkout.view import CheckoutView, OrderSummary
from core.logging import BusinessEvents
from core.settings import Settings

log = structlog.get_logger(__name__)

SDK_POLL_INTERVAL = 0.1  # seconds
SDK_MAX_POLL_ATTEMPTS = 50
HOST_NOTIFY_DELAY = 0.5
MISSING_ORDER_REDIRECT_DELAY = 5.0


class CheckoutState(str, Enum):
    waiting_for_sdk = "waiting_for_sdk"
    ready = "ready"
    creating = "creating"
    capturing = "capturing"
    success = "success"
    failed = "failed"
    cancelled = "cancelled"


TERMINAL_STATES = {CheckoutState.success, CheckoutState.failed, CheckoutState.cancelled}


@dataclass
class CheckoutSession:
    """State of one checkout attempt, carried from order creation to capture."""

    cart: CartSnapshot
    state: CheckoutState = CheckoutState.waiting_for_sdk
    paypal_order_id: str | None = None
    order_id: str | None = None
    error: Exception | None = None
    cancelled: bool = False
    sdk_attempts: int = 0


class _SDKNotReady(Exception):
    pass


class CheckoutOrchestrator:
    def __init__(
        self,
        sdk: PaymentSDK,
        view: CheckoutView,
        bridge: HostBridge,
        order_api: OrderAPIClient,
        session: CheckoutSession,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.sdk = sdk
        self.view = view
        self.bridge = bridge
        self.order_api = order_api
        self.session = session
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cart_data: dict[str, Any] | None,
        sdk: PaymentSDK,
        view: CheckoutView,
        navigator: Navigator,
        success_channel: MessageChannel | None = None,
        handler_bridge: HandlerBridge | None = None,
        cancel_channel: MessageChannel | None = None,
        **kwargs,
    ) -> "CheckoutOrchestrator":
        bridge = HostBridge(
            navigator,
            success_url=settings.PAYMENT_SUCCESS_URL,
            success_channel=success_channel,
            handler_bridge=handler_bridge,
            cancel_channel=cancel_channel,
        )
        order_api = OrderAPIClient(
            settings.ORDER_API_URL, timeout=settings.ORDER_API_TIMEOUT
        )
        session = CheckoutSession(cart=CartSnapshot.from_host(cart_data))
        return cls(sdk, view, bridge, order_api, session, **kwargs)

    def _fail(self, error: Exception, html: str) -> None:
        self.session.error = error
        if self.session.cancelled:
            return
        self.session.state = CheckoutState.failed
        self.view.show_message(html, "error")

    async def wait_for_sdk(self) -> None:
        """Poll the SDK until it is ready, giving up after a fixed number of checks."""
        retrying = tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(SDK_MAX_POLL_ATTEMPTS),
            wait=tenacity.wait_fixed(SDK_POLL_INTERVAL),
            retry=tenacity.retry_if_exception_type(_SDKNotReady),
            sleep=self._sleep,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    self.session.sdk_attempts += 1
                    if not self.sdk.is_ready():
                        log.debug(
                            BusinessEvents.SDK_WAITING,
                            attempt=self.session.sdk_attempts,
                        )
                        raise _SDKNotReady()
        except _SDKNotReady:
            raise SDKTimeoutError(
                f"PayPal SDK failed to load after {SDK_MAX_POLL_ATTEMPTS} attempts"
            ) from None
        log.info(BusinessEvents.SDK_READY, attempt=self.session.sdk_attempts)

    def render_summary(self) -> None:
        cart = self.session.cart
        if not cart.final_total:
            log.warning(BusinessEvents.SUMMARY_SKIPPED, reason="cart data not available")
            return
        self.view.show_summary(OrderSummary.from_cart(cart))

    async def start(self) -> None:
        """Wait for the SDK, show the summary and render the PayPal buttons."""
        try:
            await self.wait_for_sdk()
        except SDKTimeoutError as e:
            log.error(BusinessEvents.SDK_TIMEOUT, attempts=self.session.sdk_attempts)
            self._fail(e, messages.SDK_TIMEOUT)
            raise
        except Exception as e:
            log.error(BusinessEvents.SDK_TIMEOUT, error=str(e))
            self._fail(e, messages.SDK_TIMEOUT)
            raise

        if self.session.cancelled:
            log.info(BusinessEvents.CHECKOUT_CANCELLED, step="sdk_wait")
            return
        self.session.state = CheckoutState.ready
        self.render_summary()

        callbacks = ButtonCallbacks(
            create_order=self.create_order,
            on_approve=self.approve,
            on_error=self.on_error,
        )
        if self.session.cancelled:
            log.info(BusinessEvents.CHECKOUT_CANCELLED, step="render")
            return
        try:
            await self.sdk.render_buttons(callbacks, BUTTON_STYLE, BUTTON_CONTAINER)
        except Exception as e:
            log.error(BusinessEvents.BUTTONS_RENDER_FAILED, error=str(e))
            error = CheckoutError(f"PayPal buttons could not be rendered: {e}")
            self._fail(error, messages.RENDER_FAILED)
            raise error from e
        log.info(BusinessEvents.BUTTONS_RENDERED, container=BUTTON_CONTAINER)

    async def create_order(self) -> str:
        """``createOrder`` button callback: returns the PayPal order id."""
        session = self.session
        if session.cancelled:
            raise CheckoutError("checkout was cancelled")
        self.view.show_message("")
        session.state = CheckoutState.creating
        url = self.order_api.base_url

        try:
            if session.cart.is_empty:
                raise CartValidationError(messages.EMPTY_CART)
            payload = build_order_payload(session.cart)
            log.info(
                BusinessEvents.ORDER_CREATE_ATTEMPT,
                user_id=session.cart.user_id,
                items=len(session.cart.items),
                final_total=session.cart.final_total,
                url=url,
            )
            paypal_order_id = await run_in_threadpool(
                self.order_api.create_order, payload
            )
        except CheckoutError as e:
            log.error(BusinessEvents.ORDER_CREATE_FAILED, error=str(e), url=url)
            self._fail(e, messages.create_failed(e, url))
            raise

        # Last write wins: a new attempt replaces the previous order id.
        session.paypal_order_id = paypal_order_id
        log.info(BusinessEvents.ORDER_CREATED, paypal_order_id=paypal_order_id)
        if session.cancelled:
            session.state = CheckoutState.cancelled
        return paypal_order_id

    async def approve(self, data: dict[str, Any]) -> None:
        """``onApprove`` button callback: capture, then hand over to the host app."""
        session = self.session
        if session.cancelled:
            log.info(BusinessEvents.CHECKOUT_CANCELLED, step="approve")
            return

        paypal_order_id = data.get("orderID") or session.paypal_order_id
        session.state = CheckoutState.capturing
        url = self.order_api.base_url

        try:
            payload = build_capture_payload(session.cart, paypal_order_id)
            log.info(
                BusinessEvents.CAPTURE_ATTEMPT,
                paypal_order_id=paypal_order_id,
                final_total=session.cart.final_total,
            )
            body = await run_in_threadpool(
                self.order_api.capture_order, paypal_order_id, payload
            )
            transaction = find_transaction(body)
            if (
                error_detail(body)
                or not transaction
                or transaction.get("status") == "DECLINED"
            ):
                raise RemoteError(
                    describe_capture_failure(body, transaction), url=url, body=body
                )
        except CheckoutError as e:
            log.error(
                BusinessEvents.CAPTURE_FAILED,
                paypal_order_id=paypal_order_id,
                error=str(e),
                url=url,
            )
            self._fail(e, messages.capture_failed(e, url))
            raise

        if session.cancelled:
            session.state = CheckoutState.cancelled
            log.info(BusinessEvents.CHECKOUT_CANCELLED, step="capture")
            return

        order_id = body.get("orderId") or paypal_order_id
        session.state = CheckoutState.success
        if not order_id:
            log.error(BusinessEvents.ORDER_ID_MISSING, response=body)
            self.view.show_message(messages.order_id_missing(), "error")
            await self._sleep(MISSING_ORDER_REDIRECT_DELAY)
            self.bridge.open_orders()
            return

        session.order_id = order_id
        log.info(
            BusinessEvents.CAPTURE_SUCCEEDED,
            order_id=order_id,
            paypal_order_id=paypal_order_id,
            transaction_id=transaction.get("id"),
            transaction_status=transaction.get("status"),
        )
        self.view.show_message(
            messages.payment_succeeded(
                transaction.get("status"), transaction.get("id"), order_id
            ),
            "success",
        )
        # Give the page a moment to paint the confirmation.
        await self._sleep(HOST_NOTIFY_DELAY)
        self.bridge.notify_success(order_id, paypal_order_id)

    def on_error(self, error: Exception) -> None:
        """``onError`` button callback for failures raised inside the SDK."""
        log.error(BusinessEvents.SDK_ERROR, error=str(error))
        self._fail(RemoteError(str(error)), messages.sdk_error(error))

    def cancel(self) -> str:
        """Cancel button: hand control back to the host app."""
        session = self.session
        session.cancelled = True
        if session.state not in TERMINAL_STATES:
            session.state = CheckoutState.cancelled
        log.info(BusinessEvents.CHECKOUT_CANCELLED, state=session.state.value)
        return self.bridge.notify_cancel()
