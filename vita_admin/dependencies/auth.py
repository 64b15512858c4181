import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vita_admin.core.config.settings import get_settings
from vita_admin.core.exceptions import NotAuthorized
from vita_admin.crud.admins import get_admin
from vita_admin.crud.subjects import parse_id
from vita_admin.db.session import get_db
from vita_admin.models.admin import Admin
from vita_admin.services.session import decode_token

logger = logging.getLogger(__name__)


async def get_current_admin_optional(request: Request, db: AsyncSession = Depends(get_db)) -> Optional[Admin]:
    """
    Resolve the admin behind the session cookie, if any.

    Never raises: a missing, invalid or expired token, or an admin that no
    longer exists, all resolve to None.
    """
    token = request.cookies.get(get_settings().ADMIN_COOKIE_NAME)
    admin_id = parse_id(decode_token(token))
    if admin_id is None:
        return None

    try:
        return await get_admin(db, admin_id)
    except SQLAlchemyError as e:
        logger.error("Could not load admin for session: %s", e)
        return None


async def require_admin(admin: Optional[Admin] = Depends(get_current_admin_optional)) -> Admin:
    if admin is None:
        raise NotAuthorized()
    return admin
