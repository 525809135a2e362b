# shop_client
from .cart import (
    AddCart,
    CartLine,
    CartSession,
    ClearCart,
    DeleteCart,
    Operator,
    UpdateCart,
    cart_reducer,
)
from .checkout import CheckoutFlow, CheckoutResult, City, Courier, create_http_client
from .exceptions import ApiError, CartError, CheckoutError, VoucherError

__all__ = [
    "AddCart",
    "ApiError",
    "CartError",
    "CartLine",
    "CartSession",
    "CheckoutError",
    "CheckoutFlow",
    "CheckoutResult",
    "City",
    "ClearCart",
    "Courier",
    "DeleteCart",
    "Operator",
    "UpdateCart",
    "VoucherError",
    "cart_reducer",
    "create_http_client",
]
