# shop_service/db/functions.py
import logging
import uuid
from datetime import timedelta
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.config import PAYMENT_EXPIRE_HOURS
from shop_service.db.models import Category, Item, Order, Payment, RoleEnum, User, Voucher, utcnow
from shop_service.db.schemas import ItemCreate, OrderLine, PaymentCreate

logger = logging.getLogger(__name__)


# Users
async def get_user_by_id(db: AsyncSession, user_id: int):
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, email: str, name: Optional[str] = None, role: RoleEnum = RoleEnum.user):
    if await get_user_by_email(db, email):
        raise HTTPException(status_code=409, detail=f"User {email} already exists")
    user = User(email=email, name=name, role=role, is_active=True)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


# Categories
async def get_all_categories(db: AsyncSession):
    result = await db.execute(select(Category).order_by(Category.name))
    return result.scalars().all()


async def get_category_by_id(db: AsyncSession, category_id: int):
    result = await db.execute(select(Category).filter(Category.id == category_id))
    return result.scalar_one_or_none()


async def create_category(db: AsyncSession, name: str):
    existing = await db.execute(select(Category).filter(Category.name == name))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Category {name} already exists")
    category = Category(name=name)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


# Items
async def get_all_items(db: AsyncSession, category: Optional[int] = None, search: str = '', skip: int = 0, limit: int = 100):
    query = select(Item).filter(Item.active.is_(True))
    if category:
        query = query.filter(Item.category_id == category)
    if search:
        query = query.filter(Item.name.ilike(f"%{search}%"))
    result = await db.execute(query.order_by(Item.name).offset(skip).limit(limit))
    return result.scalars().all()


async def get_item_by_id(db: AsyncSession, item_id: int):
    result = await db.execute(select(Item).filter(Item.id == item_id))
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


async def create_item(db: AsyncSession, data: ItemCreate):
    if not await get_category_by_id(db, data.category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    item = Item(**data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


# Vouchers
async def get_voucher_by_code(db: AsyncSession, code: str):
    result = await db.execute(
        select(Voucher).filter(Voucher.code == code, Voucher.active.is_(True))
    )
    voucher = result.scalar_one_or_none()
    if not voucher:
        raise HTTPException(status_code=404, detail="Voucher code is invalid")
    return voucher


async def create_voucher(db: AsyncSession, code: str, discount: int):
    voucher = Voucher(code=code, discount=discount, active=True)
    db.add(voucher)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail=f"Voucher {code} already exists")
    await db.refresh(voucher)
    return voucher


# Orders
async def get_user_orders(db: AsyncSession, user_id: int):
    result = await db.execute(
        select(Order).filter(Order.user_id == user_id).order_by(Order.created_at, Order.id)
    )
    return result.scalars().all()


async def get_order_rows(db: AsyncSession, order_id: str, user_id: int):
    """Rows of one order. An order that does not belong to the caller does not exist for them."""
    result = await db.execute(
        select(Order).filter(Order.order_id == order_id, Order.user_id == user_id).order_by(Order.id)
    )
    rows = result.scalars().all()
    if not rows:
        raise HTTPException(status_code=404, detail="Order not found")
    return rows


async def create_order(db: AsyncSession, user_id: int, lines: List[OrderLine]):
    item_ids = {line.id for line in lines}
    result = await db.execute(select(Item.id).filter(Item.id.in_(item_ids)))
    missing = item_ids - set(result.scalars().all())
    if missing:
        raise HTTPException(status_code=404, detail=f"Item {min(missing)} not found")

    order_id = str(uuid.uuid4())
    rows = [
        Order(order_id=order_id, user_id=user_id, item_id=line.id, quantity=line.quantity)
        for line in lines
    ]
    db.add_all(rows)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to create order for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to create order")

    for row in rows:
        await db.refresh(row)
    logger.info("Order %s created for user %s with %d line(s)", order_id, user_id, len(rows))
    return rows


# Payments
async def get_user_payments(db: AsyncSession, user_id: int):
    result = await db.execute(
        select(Payment).filter(Payment.user_id == user_id).order_by(Payment.created_at, Payment.id)
    )
    return result.scalars().all()


async def get_payment_by_order_id(db: AsyncSession, order_id: str, user_id: int):
    result = await db.execute(
        select(Payment).filter(Payment.order_id == order_id, Payment.user_id == user_id)
    )
    payment = result.scalar_one_or_none()
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


async def create_payment(db: AsyncSession, user_id: int, order_id: str, data: PaymentCreate):
    await get_order_rows(db, order_id, user_id)

    existing = await db.execute(select(Payment.id).filter(Payment.order_id == order_id))
    if existing.first():
        raise HTTPException(status_code=409, detail="Payment for this order already exists")

    now = utcnow()
    payment = Payment(
        order_id=order_id,
        user_id=user_id,
        discount=data.discount,
        delivery_cost=data.delivery_cost,
        delivery_address=data.delivery_address,
        courier=data.courier,
        final_price=data.final_price,
        status_payment=False,
        expired_time=now + timedelta(hours=PAYMENT_EXPIRE_HOURS),
        active=True,
        created_at=now,
    )
    db.add(payment)
    try:
        await db.commit()
    except IntegrityError:
        # a concurrent request paid the same order between the check and the insert
        await db.rollback()
        raise HTTPException(status_code=409, detail="Payment for this order already exists")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to create payment for order %s", order_id)
        raise HTTPException(status_code=500, detail="Failed to create payment")

    await db.refresh(payment)
    logger.info("Payment %s created for order %s", payment.id, order_id)
    return payment
