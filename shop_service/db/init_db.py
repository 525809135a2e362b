# shop_service/db/init_db.py
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from shop_service.db.database import engine as default_engine, Base
from shop_service.db import models  # noqa: F401  registers the tables on Base.metadata

logger = logging.getLogger(__name__)


async def init_db(engine: AsyncEngine = default_engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")
