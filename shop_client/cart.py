# shop_client/cart.py
"""
Cart state for one shopping session.

State changes go through ``cart_reducer`` which dispatches on the action
type and returns a new list of lines; ``CartSession`` owns the current
list and is the object handed to the checkout flow.
"""

import logging
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from .exceptions import CartError

logger = logging.getLogger(__name__)


class CartLine(BaseModel):
    """One item in the cart"""
    item_id: int
    name: str
    unit_price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)

    @property
    def total_price(self) -> float:
        return self.unit_price * self.quantity


class Operator(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"


class AddCart(BaseModel):
    line: CartLine


class UpdateCart(BaseModel):
    item_id: int
    operator: Operator


class DeleteCart(BaseModel):
    item_id: int


class ClearCart(BaseModel):
    pass


CartAction = Union[AddCart, UpdateCart, DeleteCart, ClearCart]


def _index_of(lines: List[CartLine], item_id: int) -> int:
    for index, line in enumerate(lines):
        if line.item_id == item_id:
            return index
    raise CartError(f"Item {item_id} is not in the cart")


def cart_reducer(lines: List[CartLine], action: CartAction) -> List[CartLine]:
    if isinstance(action, AddCart):
        try:
            index = _index_of(lines, action.line.item_id)
        except CartError:
            return [*lines, action.line.model_copy()]
        merged = lines[index].model_copy(
            update={"quantity": lines[index].quantity + action.line.quantity}
        )
        return [*lines[:index], merged, *lines[index + 1:]]

    if isinstance(action, UpdateCart):
        index = _index_of(lines, action.item_id)
        line = lines[index]
        if action.operator == Operator.ADD:
            quantity = line.quantity + 1
        else:
            if line.quantity <= 1:
                raise CartError("Quantity cannot go below 1, delete the item instead")
            quantity = line.quantity - 1
        return [*lines[:index], line.model_copy(update={"quantity": quantity}), *lines[index + 1:]]

    if isinstance(action, DeleteCart):
        _index_of(lines, action.item_id)
        return [line for line in lines if line.item_id != action.item_id]

    if isinstance(action, ClearCart):
        return []

    raise TypeError(f"Unknown cart action: {action!r}")


class CartSession:
    """Cart state scoped to a single session"""

    def __init__(self, lines: Optional[List[CartLine]] = None):
        self._lines: List[CartLine] = list(lines or [])

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def dispatch(self, action: CartAction) -> List[CartLine]:
        self._lines = cart_reducer(self._lines, action)
        logger.debug("cart %s -> %d line(s)", type(action).__name__, len(self._lines))
        return self.lines

    def add(self, line: CartLine) -> List[CartLine]:
        return self.dispatch(AddCart(line=line))

    def update(self, item_id: int, operator: Operator) -> List[CartLine]:
        return self.dispatch(UpdateCart(item_id=item_id, operator=operator))

    def remove(self, item_id: int) -> List[CartLine]:
        return self.dispatch(DeleteCart(item_id=item_id))

    def clear(self) -> List[CartLine]:
        return self.dispatch(ClearCart())

    def find(self, item_id: int) -> Optional[CartLine]:
        return next((line for line in self._lines if line.item_id == item_id), None)

    def total_price(self) -> float:
        return sum(line.total_price for line in self._lines)

    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines)
