from typing import Any


class CheckoutError(Exception):
    pass


class SDKTimeoutError(CheckoutError):
    """The payment SDK never became ready; the page has to be reloaded."""


class CartValidationError(CheckoutError):
    """The cart snapshot cannot be checked out (no request was sent)."""


class RemoteError(CheckoutError):
    """The Order API call failed, returned garbage or reported a failure."""

    def __init__(self, message: str, url: str | None = None, body: Any = None):
        super().__init__(message)
        self.url = url
        self.body = body
