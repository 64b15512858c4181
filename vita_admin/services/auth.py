"""
Admin login state machine: Anonymous -> OtpPending -> Authenticated.

The password step issues an OTP and emails it; the OTP step mints the
session token. Logout and whoAmI live in the router since they only touch
the cookie and the already resolved principal.
"""

import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from vita_admin.core.config.settings import get_settings
from vita_admin.core.exceptions import AdminAlreadyExists, InvalidCredentials, InvalidOtp, NotAuthorized
from vita_admin.crud import admins as admin_crud
from vita_admin.models.admin import Admin
from vita_admin.services import otp as otp_engine
from vita_admin.services.email import EmailNotifier
from vita_admin.services.session import issue_token

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().BCRYPT_ROUNDS,
)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

async def login(db: AsyncSession, notifier: EmailNotifier, email: str, password: str) -> str:
    """
    Check the password and email a fresh OTP.

    Unknown email and wrong password raise the same InvalidCredentials, and
    the unknown email path still spends a hash verification.

    Returns:
        The Message-ID of the OTP email
    """
    admin = await admin_crud.get_admin_by_email(db, email)
    if admin is None:
        await run_in_threadpool(pwd_context.dummy_verify)
        logger.info("Admin login rejected")
        raise InvalidCredentials()

    if not await run_in_threadpool(verify_password, password, admin.hashed_password):
        logger.info("Admin login rejected")
        raise InvalidCredentials()

    otp = await otp_engine.issue_otp(db, admin)
    return await notifier.send(
        admin.email,
        "Vita Admin Login",
        "admin_otp.html",
        otp=otp,
        expiry_minutes=get_settings().OTP_EXPIRE_MINUTES,
    )

async def verify_login_otp(db: AsyncSession, email: str, otp: str) -> tuple[Admin, str]:
    """Consume the pending OTP and return the admin with a new session token"""
    admin = await admin_crud.get_admin_by_email(db, email)
    if admin is None:
        raise InvalidCredentials()

    if not await otp_engine.verify_otp(db, admin, otp):
        logger.info("OTP rejected for admin %s", admin.id)
        raise InvalidOtp()

    logger.info("Admin %s authenticated", admin.id)
    return admin, issue_token(admin)

async def create_admin(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    principal: Optional[Admin],
) -> Admin:
    """
    Provision a new admin account.

    Anyone may create the very first admin; after that only a signed in
    admin can add more.
    """
    if principal is None and await admin_crud.count_admins(db) > 0:
        raise NotAuthorized()

    if await admin_crud.get_admin_by_email(db, email) is not None:
        raise AdminAlreadyExists()

    hashed_password = await run_in_threadpool(get_password_hash, password)
    try:
        admin = await admin_crud.create_admin(db, name, email, hashed_password)
    except IntegrityError:
        await db.rollback()
        raise AdminAlreadyExists()

    logger.info("Admin %s created", admin.id)
    return admin

def who_am_i(principal: Optional[Admin]) -> dict:
    if principal is None:
        return {
            "isLoggedIn": False,
            "message": "User is not logged in.",
            "user": {
                "name": "",
                "image_link": "",
            },
        }

    return {
        "isLoggedIn": True,
        "message": "User is logged in",
        "user": principal.to_profile(),
    }
