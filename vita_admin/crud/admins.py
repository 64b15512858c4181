import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vita_admin.models.admin import Admin

async def get_admin(db: AsyncSession, admin_id: uuid.UUID) -> Optional[Admin]:
    return await db.get(Admin, admin_id)

async def get_admin_by_email(db: AsyncSession, email: str) -> Optional[Admin]:
    result = await db.execute(select(Admin).filter(Admin.email == email.lower()))
    return result.scalar_one_or_none()

async def count_admins(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Admin))
    return result.scalar_one()

async def create_admin(db: AsyncSession, name: str, email: str, hashed_password: str) -> Admin:
    admin = Admin(name=name, email=email.lower(), hashed_password=hashed_password)
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin
