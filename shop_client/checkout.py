# shop_client/checkout.py
"""
Checkout flow.

Drives one checkout against the shop API: destination lookup, voucher,
courier selection, price recomputation and finally order + payment
creation. Every step is a blocking call gated by the user; nothing is
retried and a failed payment does not undo the order that preceded it.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from .cart import CartSession, Operator
from .exceptions import ApiError, CheckoutError, VoucherError

logger = logging.getLogger(__name__)

DEFAULT_ITEM_WEIGHT = 1000  # grams per unit


class City(BaseModel):
    value: str
    label: str


class Courier(BaseModel):
    name: str
    cost: float
    etd: Optional[str] = None


class CheckoutResult(BaseModel):
    order_id: str
    orders: List[dict]
    payment: dict


def create_http_client(base_url: str, token: Optional[str] = None, **kwargs) -> httpx.Client:
    """httpx client for the shop API, authenticated with a bearer token when given"""
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.Client(base_url=base_url.rstrip("/"), headers=headers, **kwargs)


class CheckoutFlow:
    """
    Checkout state for a single cart.

    Args:
        http: client pointed at the shop API (see ``create_http_client``)
        cart: the session's cart
        item_weight: grams per unit, used to weigh the parcel for courier quotes
    """

    def __init__(self, http: httpx.Client, cart: CartSession, item_weight: int = DEFAULT_ITEM_WEIGHT):
        self.http = http
        self.cart = cart
        self.item_weight = item_weight

        self.cities: List[City] = []
        self.city: Optional[City] = None
        self.address: str = ""
        self.discount: int = 0
        self.courier: Optional[Courier] = None
        self.error: Any = None

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        try:
            response = self.http.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            self.error = str(e)
            raise CheckoutError(str(e)) from e

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            logger.error("%s %s -> %s %s", method, path, response.status_code, payload)
            self.error = payload
            raise ApiError(response.status_code, payload)

        return response.json()

    # ==================== Destination ====================

    def load_cities(self) -> List[City]:
        self.cities = [City(**city) for city in self._request("GET", "/api/v1/raja-ongkir/cities")]
        return self.cities

    def select_destination(self, city: City, address: str) -> None:
        if self.city is not None and self.city.value != city.value:
            self.courier = None
        self.city = city
        self.address = address

    def parcel_weight(self) -> int:
        return self.cart.total_quantity() * self.item_weight

    def fetch_couriers(self) -> List[Courier]:
        if not self.city or not self.address:
            raise CheckoutError("Choose a city and an address first")
        options = self._request(
            "POST",
            "/api/v1/raja-ongkir/cost",
            json={"destination": self.city.value, "weight": self.parcel_weight()},
        )
        return [Courier(**option) for option in options]

    def choose_courier(self, courier: Courier) -> None:
        self.courier = courier

    # ==================== Voucher ====================

    def apply_voucher(self, code: str) -> int:
        if not code or not code.strip():
            self.error = "Voucher code must not be empty!"
            raise VoucherError(self.error)

        result = self._request("GET", f"/api/v1/vouchers/{quote(code.strip(), safe='')}")
        self.error = None
        self.discount = result["discount"]
        return self.discount

    # ==================== Cart & price ====================

    def update_cart(self, item_id: int, operator: Operator) -> None:
        line = self.cart.find(item_id)
        if operator == Operator.SUBTRACT and line is not None and line.quantity <= 1:
            return
        self.cart.update(item_id, operator)

    @property
    def discount_price(self) -> float:
        return self.cart.total_price() * (self.discount / 100)

    @property
    def final_price(self) -> float:
        result = self.cart.total_price() - self.discount_price
        if not self.courier:
            return result
        return result + self.courier.cost

    # ==================== Finish ====================

    def finish_order(self) -> CheckoutResult:
        if not len(self.cart):
            raise CheckoutError("Cart is empty")
        if not (self.city and self.address and self.courier):
            raise CheckoutError("Choose a city, an address and a courier first")

        items = [{"id": line.item_id, "quantity": line.quantity} for line in self.cart.lines]
        orders = self._request("POST", "/api/v1/orders", json={"items": items})
        order_id = orders[0]["orderId"]

        payment = self._request(
            "POST",
            f"/api/v1/payments/{order_id}",
            json={
                "discount": self.discount,
                "deliveryCost": self.courier.cost,
                "deliveryAddress": self.address,
                "courier": self.courier.name,
                "finalPrice": self.final_price,
            },
        )

        logger.info("Checkout finished: order %s, %s", order_id, self.final_price)
        self.cart.clear()
        self.error = None
        return CheckoutResult(order_id=order_id, orders=orders, payment=payment)

    def order_history(self) -> List[dict]:
        return self._request("GET", "/api/v1/orders")
