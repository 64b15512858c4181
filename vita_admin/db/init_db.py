import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from vita_admin.db.base import Base
# Imported for their side effect of registering tables on Base.metadata
from vita_admin.models import admin, banner, user  # noqa: F401

logger = logging.getLogger(__name__)

async def init_db(engine: AsyncEngine) -> None:
    """Create every table that does not exist yet"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")
