import uuid
from typing import Optional, Type, TypeVar

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vita_admin.core.exceptions import NotFound
from vita_admin.models.banner import Banner

ModelType = TypeVar("ModelType")

def parse_id(raw_id) -> Optional[uuid.UUID]:
    """Return the id as a UUID, or None when it is absent or not a valid reference"""
    if raw_id is None or isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, uuid.UUID):
        return raw_id
    try:
        return uuid.UUID(str(raw_id))
    except ValueError:
        return None

async def resolve_or_not_found(
    db: AsyncSession,
    model: Type[ModelType],
    raw_id,
    not_found: Type[NotFound] = NotFound,
) -> ModelType:
    """
    Look up a subject by an externally supplied id.

    An invalid or missing id is treated the same as an id with no matching
    row: ``not_found`` is raised and the raw value never reaches the query.
    """
    subject_id = parse_id(raw_id)
    if subject_id is None:
        raise not_found()
    subject = await db.get(model, subject_id)
    if subject is None:
        raise not_found()
    return subject

async def save(db: AsyncSession) -> None:
    """Commit pending changes, rolling back if the commit fails"""
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

async def delete_by_id(session_factory: async_sessionmaker, model, subject_id: Optional[uuid.UUID]) -> int:
    """Delete one row in its own session and transaction, returning the row count"""
    if subject_id is None:
        return 0
    async with session_factory() as db:
        async with db.begin():
            result = await db.execute(delete(model).where(model.id == subject_id))
        return result.rowcount

async def replace_banner(db: AsyncSession, banner_data: dict) -> Banner:
    """Delete every banner and insert the new one in a single transaction"""
    banner = Banner(**banner_data)
    try:
        await db.execute(delete(Banner))
        db.add(banner)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(banner)
    return banner
