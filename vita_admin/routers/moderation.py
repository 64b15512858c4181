from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vita_admin.db.session import get_db, get_session_factory
from vita_admin.dependencies.auth import require_admin
from vita_admin.schemas.moderation import BannerRequest, SubjectIdRequest
from vita_admin.services import moderation
from vita_admin.services.email import EmailNotifier, get_notifier

router = APIRouter(tags=["moderation"], dependencies=[Depends(require_admin)])

def workflow_response(result: moderation.WorkflowResult):
    if result.notified:
        return {"success": True, "message": result.message}
    # The change is committed; only the email failed
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": result.notification_error,
            "message": result.message,
        },
    )

@router.post("/mentor/approve")
async def approve_mentor(
    request: Optional[SubjectIdRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
):
    result = await moderation.approve_mentor(db, notifier, request.id if request else None)
    return workflow_response(result)

@router.api_route("/mentor/reject", methods=["GET", "DELETE"])
async def reject_mentor(
    id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
    notifier: EmailNotifier = Depends(get_notifier),
):
    result = await moderation.reject_mentor(db, session_factory, notifier, id)
    return workflow_response(result)

@router.delete("/user/{id}")
async def delete_user(
    id: str,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
    notifier: EmailNotifier = Depends(get_notifier),
):
    result = await moderation.delete_user(db, session_factory, notifier, id)
    return workflow_response(result)

@router.post("/mentor/top")
async def change_top_mentor_status(
    request: Optional[SubjectIdRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
):
    result = await moderation.change_top_mentor_status(db, notifier, request.id if request else None)
    return workflow_response(result)

@router.put("/banner")
async def modify_banner(request: BannerRequest, db: AsyncSession = Depends(get_db)):
    banner = await moderation.modify_banner(db, request.model_dump())
    return {"success": True, "banner": banner}
