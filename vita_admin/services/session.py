import logging
from datetime import datetime, timedelta
from typing import Optional

import jwt
from fastapi import Response

from vita_admin.core.config.settings import get_settings
from vita_admin.models.admin import Admin
from vita_admin.utils import helpers

logger = logging.getLogger(__name__)

def generate_token(data: dict, expires_delta: timedelta, now: Optional[datetime] = None) -> str:
    settings = get_settings()
    now = now or helpers.get_utc_now()
    to_encode = data.copy()
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def issue_token(admin: Admin, now: Optional[datetime] = None) -> str:
    """Mint a signed session token for a fully authenticated admin"""
    settings = get_settings()
    return generate_token(
        {"sub": str(admin.id), "email": admin.email},
        timedelta(hours=settings.SESSION_TTL_HOURS),
        now=now,
    )

def decode_token(token: Optional[str]) -> Optional[str]:
    """
    Resolve a session token to the admin id it was issued for.

    Returns None for a missing, malformed, tampered or expired token.
    """
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired admin session token")
        return None
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid admin session token")
        return None
    return payload.get("sub")

def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=settings.session_ttl_seconds,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )

def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )
