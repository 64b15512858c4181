from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from vita_admin.db.session import get_db
from vita_admin.dependencies.auth import get_current_admin_optional
from vita_admin.models.admin import Admin
from vita_admin.schemas.admin import CreateAdminRequest, LoginRequest, VerifyOTPRequest
from vita_admin.services import auth as auth_service
from vita_admin.services.email import EmailNotifier, get_notifier
from vita_admin.services.session import clear_session_cookie, set_session_cookie

router = APIRouter(tags=["admin authentication"])

@router.get("/auth")
async def admin_auth(admin: Optional[Admin] = Depends(get_current_admin_optional)):
    return auth_service.who_am_i(admin)

@router.post("/login")
async def admin_login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
):
    email_id = await auth_service.login(db, notifier, request.email, request.password)
    return {
        "message": "Email sent",
        "emailId": email_id,
    }

@router.post("/verify-otp")
async def admin_verify_otp(
    request: VerifyOTPRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    admin, token = await auth_service.verify_login_otp(db, request.email, request.otp)
    set_session_cookie(response, token)
    return {
        "message": "OTP verified",
        "user": admin.to_profile(),
    }

@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_admin(
    request: CreateAdminRequest,
    db: AsyncSession = Depends(get_db),
    principal: Optional[Admin] = Depends(get_current_admin_optional),
):
    await auth_service.create_admin(db, request.name, request.email, request.password, principal)
    return {"message": "Admin Created Successfully"}

@router.post("/logout")
async def admin_logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}
