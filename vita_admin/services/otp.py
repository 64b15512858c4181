"""
One-time passcodes for the second login step.

A passcode lives in the OTP columns of its admin row, stored only as an HMAC
digest bound to the admin id. Issuing a new passcode overwrites the slot, so
at most one passcode per admin is ever live.
"""

import hmac
import logging
import secrets
import string
from datetime import datetime, timedelta
from hashlib import sha256
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from vita_admin.core.config.settings import get_settings
from vita_admin.models.admin import Admin
from vita_admin.utils import helpers

logger = logging.getLogger(__name__)

# Compared against when nothing is pending so both paths do the same work
_DUMMY_DIGEST = "0" * 64


def generate_secure_otp(length: int = 6) -> str:
    """Generate a cryptographically secure random numeric OTP"""
    return "".join(secrets.choice(string.digits) for _ in range(length))


def hash_otp(admin_id, otp: str) -> str:
    """Keyed digest of an OTP, bound to its owner"""
    normalized = f"{admin_id}:{otp.strip()}".encode("utf-8")
    return hmac.new(get_settings().SECRET_KEY.encode("utf-8"), normalized, sha256).hexdigest()


async def issue_otp(db: AsyncSession, admin: Admin, now: Optional[datetime] = None) -> str:
    """
    Generate a new OTP for ``admin`` and persist its digest.

    Any OTP issued earlier stops being valid because its digest is replaced.

    Returns:
        The plain passcode, to be delivered out of band
    """
    settings = get_settings()
    now = now or helpers.get_utc_now()
    plain_otp = generate_secure_otp(settings.OTP_LENGTH)

    admin.otp_hash = hash_otp(admin.id, plain_otp)
    admin.otp_expires_at = helpers.format_datetime(now + timedelta(minutes=settings.OTP_EXPIRE_MINUTES))
    admin.otp_consumed = False
    admin.otp_failed_attempts = 0
    await db.commit()

    logger.info("Issued OTP for admin %s", admin.id)
    return plain_otp


async def _record_failed_attempt(db: AsyncSession, admin: Admin) -> bool:
    await db.execute(
        update(Admin)
        .where(Admin.id == admin.id)
        .values(otp_failed_attempts=Admin.otp_failed_attempts + 1)
    )
    await db.commit()
    await db.refresh(admin)
    return False


async def verify_otp(db: AsyncSession, admin: Admin, candidate: str, now: Optional[datetime] = None) -> bool:
    """
    Check ``candidate`` against the pending OTP of ``admin``.

    Fails closed: returns False when nothing is pending, when the OTP expired,
    was already used, was locked after too many wrong guesses, or does not
    match. Every failure goes through the same attempt-counter update, so a
    rejected check costs the same whether or not an OTP was pending. On
    success the OTP is marked consumed and can never be used again.
    """
    settings = get_settings()
    now = now or helpers.get_utc_now()

    stored_digest = admin.otp_hash
    candidate_digest = hash_otp(admin.id, candidate or "")
    matches = hmac.compare_digest(candidate_digest, stored_digest or _DUMMY_DIGEST)

    if stored_digest is None or admin.otp_consumed:
        return await _record_failed_attempt(db, admin)
    if admin.otp_failed_attempts >= settings.OTP_MAX_ATTEMPTS:
        logger.warning("OTP for admin %s is locked after too many attempts", admin.id)
        return await _record_failed_attempt(db, admin)
    expires_at = helpers.parse_datetime(admin.otp_expires_at)
    if expires_at is None or now > expires_at or not matches:
        return await _record_failed_attempt(db, admin)

    # Conditional update so two concurrent checks of the same code cannot both win
    result = await db.execute(
        update(Admin)
        .where(
            Admin.id == admin.id,
            Admin.otp_hash == stored_digest,
            Admin.otp_consumed.is_(False),
        )
        .values(otp_consumed=True)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    if result.rowcount != 1:
        return False

    await db.refresh(admin)
    logger.info("OTP verified for admin %s", admin.id)
    return True
