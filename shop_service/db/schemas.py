# shop_service/db/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire. Both spellings are accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Catalog
class CategoryCreate(CamelModel):
    name: str = Field(min_length=1)


class Category(CamelModel):
    id: int
    name: str


class ItemBase(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    weight: int = Field(default=1000, gt=0)
    image_url: Optional[str] = None
    category_id: int


class ItemCreate(ItemBase):
    pass


class Item(ItemBase):
    id: int
    active: bool = True


# Vouchers
class VoucherCreate(CamelModel):
    code: str = Field(min_length=1)
    discount: int = Field(ge=1, le=100)


class Voucher(CamelModel):
    code: str
    discount: int


# Orders
class OrderLine(CamelModel):
    id: int
    quantity: int = Field(ge=1)


class OrderCreate(CamelModel):
    items: List[OrderLine] = Field(min_length=1)


class Order(CamelModel):
    id: int
    order_id: str
    user_id: int
    item_id: int
    quantity: int
    created_at: Optional[datetime] = None


# Payments
class PaymentCreate(CamelModel):
    discount: int = Field(default=0, ge=0, le=100)
    delivery_cost: float = Field(ge=0)
    delivery_address: str = Field(min_length=1)
    courier: str = Field(min_length=1)
    final_price: float = Field(ge=0)


class Payment(CamelModel):
    id: int
    order_id: str
    user_id: int
    discount: int
    delivery_cost: float
    delivery_address: str
    courier: str
    final_price: float
    status_payment: bool
    expired_time: Optional[datetime] = None
    active: bool
    created_at: Optional[datetime] = None


# Shipping
class City(CamelModel):
    value: str
    label: str


class CostRequest(CamelModel):
    destination: str = Field(min_length=1)
    weight: int = Field(gt=0)  # grams
    courier: Optional[str] = None


class CourierOption(CamelModel):
    name: str
    cost: float
    etd: Optional[str] = None
