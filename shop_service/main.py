# shop_service/main.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.auth_utils import get_current_user, require_admin
from shop_service.config import CORS_ORIGINS, LOG_LEVEL
from shop_service.db.database import get_db
from shop_service.db.functions import (
    create_category,
    create_item,
    create_order,
    create_payment,
    create_voucher,
    get_all_categories,
    get_all_items,
    get_item_by_id,
    get_order_rows,
    get_payment_by_order_id,
    get_user_orders,
    get_user_payments,
    get_voucher_by_code,
)
from shop_service.db.init_db import init_db
from shop_service.db.models import User
from shop_service.db.schemas import (
    Category,
    CategoryCreate,
    City,
    CostRequest,
    CourierOption,
    Item,
    ItemCreate,
    Order,
    OrderCreate,
    Payment,
    PaymentCreate,
    Voucher,
    VoucherCreate,
)
from shop_service.shipping import RajaOngkirClient, ShippingError, get_shipping_client

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    logger.info("shop_service starting up...")
    await init_db()
    yield
    logger.info("shop_service shutting down...")


app = FastAPI(title="Shop Service", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Catalog
@app.get("/api/v1/categories", response_model=List[Category])
async def read_categories(db: AsyncSession = Depends(get_db)):
    return await get_all_categories(db)


@app.post("/api/v1/categories", response_model=Category, status_code=201)
async def create_new_category(
    category: CategoryCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await create_category(db, category.name)


@app.get("/api/v1/items", response_model=List[Item])
async def read_items(
    searchquery: str = Query(default='', alias="search"),
    category: int = None,
    db: AsyncSession = Depends(get_db),
):
    return await get_all_items(db, category, searchquery)


@app.get("/api/v1/items/{item_id}", response_model=Item)
async def read_item(item_id: int, db: AsyncSession = Depends(get_db)):
    return await get_item_by_id(db, item_id)


@app.post("/api/v1/items", response_model=Item, status_code=201)
async def create_new_item(
    item: ItemCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await create_item(db, item)


# Vouchers
@app.get("/api/v1/vouchers/{code}", response_model=Voucher)
async def read_voucher(code: str, db: AsyncSession = Depends(get_db)):
    return await get_voucher_by_code(db, code)


@app.post("/api/v1/vouchers", response_model=Voucher, status_code=201)
async def create_new_voucher(
    voucher: VoucherCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await create_voucher(db, voucher.code, voucher.discount)


# Shipping
@app.get("/api/v1/raja-ongkir/cities", response_model=List[City])
async def read_cities(shipping: RajaOngkirClient = Depends(get_shipping_client)):
    try:
        return await shipping.get_cities()
    except ShippingError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.post("/api/v1/raja-ongkir/cost", response_model=List[CourierOption])
async def read_costs(
    request: CostRequest,
    shipping: RajaOngkirClient = Depends(get_shipping_client),
):
    try:
        return await shipping.get_costs(request.destination, request.weight, request.courier)
    except ShippingError as e:
        raise HTTPException(status_code=502, detail=str(e))


# Orders
@app.get("/api/v1/orders", response_model=List[Order])
async def read_orders(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await get_user_orders(db, user.id)


@app.get("/api/v1/orders/{order_id}", response_model=List[Order])
async def read_order(order_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await get_order_rows(db, order_id, user.id)


@app.post("/api/v1/orders", response_model=List[Order], status_code=201)
async def create_user_order(
    order: OrderCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await create_order(db, user.id, order.items)


# Payments
@app.get("/api/v1/payments", response_model=List[Payment])
async def read_payments(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await get_user_payments(db, user.id)


@app.get("/api/v1/payments/{order_id}", response_model=Payment)
async def read_payment(order_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await get_payment_by_order_id(db, order_id, user.id)


@app.post("/api/v1/payments/{order_id}", response_model=Payment, status_code=201)
async def create_order_payment(
    order_id: str,
    payment: PaymentCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await create_payment(db, user.id, order_id, payment)


@app.get("/")
async def health_check():
    """Health check endpoint."""
    return {"status": "shop_service running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("shop_service.main:app", host="0.0.0.0", port=8000, reload=True)
