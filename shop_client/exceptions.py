# shop_client/exceptions.py
from typing import Any


class CartError(Exception):
    """A cart action that would break a cart line invariant."""


class CheckoutError(Exception):
    """Base class for checkout failures surfaced to the user."""


class VoucherError(CheckoutError):
    pass


class ApiError(CheckoutError):
    """A downstream call failed; ``payload`` is the server's error body, untouched."""

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"{status_code}: {payload}")
