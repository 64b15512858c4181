"""
Moderation workflows.

Every workflow has two phases. The domain mutation is committed first; a
failure there is fatal and nothing is sent. The email notification runs
afterwards and its failure is reported next to the mutation's result
without undoing it.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vita_admin.core.exceptions import MentorNotFound, NotificationFailure, PersistenceFailure, UserNotFound
from vita_admin.crud import subjects
from vita_admin.models.user import Mentor, User
from vita_admin.services.email import EmailNotifier

logger = logging.getLogger(__name__)


@dataclass
class WorkflowResult:
    message: str
    notified: bool
    notification_error: Optional[str] = None


async def run_workflow(
    mutation: Callable[[], Awaitable[str]],
    notification: Callable[[], Awaitable[Any]],
) -> WorkflowResult:
    """
    Run ``mutation`` and then ``notification``, composing their outcomes.

    ``mutation`` returns the message reported to the caller. Store errors
    raised by it become PersistenceFailure and stop the workflow.
    """
    try:
        message = await mutation()
    except SQLAlchemyError as e:
        logger.error("Moderation mutation failed: %s", e)
        raise PersistenceFailure() from e

    try:
        await notification()
    except Exception:
        logger.exception("'%s' was applied but the notification failed", message)
        return WorkflowResult(
            message=message,
            notified=False,
            notification_error=NotificationFailure.message,
        )

    return WorkflowResult(message=message, notified=True)


async def approve_mentor(db: AsyncSession, notifier: EmailNotifier, raw_id) -> WorkflowResult:
    mentor = await subjects.resolve_or_not_found(db, Mentor, raw_id, MentorNotFound)

    async def mutation():
        mentor.approved = True
        await subjects.save(db)
        logger.info("Mentor %s approved", mentor.id)
        return "Mentor approved!"

    async def notification():
        await notifier.send(
            mentor.email,
            "Vita Application Approved!",
            "accept_mentor.html",
            name=mentor.name,
        )

    return await run_workflow(mutation, notification)


async def change_top_mentor_status(db: AsyncSession, notifier: EmailNotifier, raw_id) -> WorkflowResult:
    mentor = await subjects.resolve_or_not_found(db, Mentor, raw_id, MentorNotFound)

    async def mutation():
        mentor.top_mentor = not mentor.top_mentor
        await subjects.save(db)
        logger.info("Mentor %s top mentor status set to %s", mentor.id, mentor.top_mentor)
        return "Top mentor status updated!"

    async def notification():
        await notifier.send(
            mentor.email,
            "Vita top mentor",
            "top_mentor.html",
            name=mentor.name,
            top_mentor=mentor.top_mentor,
        )

    return await run_workflow(mutation, notification)


async def _remove_user(
    db: AsyncSession,
    session_factory: async_sessionmaker,
    notifier: EmailNotifier,
    raw_id,
    message: str,
    subject: str,
    template_name: str,
) -> WorkflowResult:
    """Delete a user and its linked mentor profile, then email the user"""
    user = await subjects.resolve_or_not_found(db, User, raw_id, UserNotFound)
    user_id, mentor_id = user.id, user.mentor_information
    email, name = user.email, user.name
    # The deletes run in their own sessions; release the read transaction first
    await db.rollback()

    async def mutation():
        # Both deletes run to completion before any failure is raised
        results = await asyncio.gather(
            subjects.delete_by_id(session_factory, User, user_id),
            subjects.delete_by_id(session_factory, Mentor, mentor_id),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        logger.info("User %s and mentor profile %s removed", user_id, mentor_id)
        return message

    async def notification():
        await notifier.send(email, subject, template_name, name=name, email=email)

    return await run_workflow(mutation, notification)


async def reject_mentor(
    db: AsyncSession,
    session_factory: async_sessionmaker,
    notifier: EmailNotifier,
    raw_id,
) -> WorkflowResult:
    return await _remove_user(
        db,
        session_factory,
        notifier,
        raw_id,
        message="Mentor rejected successfully!",
        subject="Vita Application rejected",
        template_name="reject_mentor.html",
    )


async def delete_user(
    db: AsyncSession,
    session_factory: async_sessionmaker,
    notifier: EmailNotifier,
    raw_id,
) -> WorkflowResult:
    return await _remove_user(
        db,
        session_factory,
        notifier,
        raw_id,
        message="User deleted successfully!",
        subject="User account deleted",
        template_name="account_deleted.html",
    )


async def modify_banner(db: AsyncSession, banner_data: dict) -> dict:
    """Replace whatever banner exists with a new one; the latest banner wins"""
    try:
        banner = await subjects.replace_banner(db, banner_data)
    except SQLAlchemyError as e:
        logger.error("Banner update failed: %s", e)
        raise PersistenceFailure("Could not update banner") from e

    logger.info("Banner replaced with %s", banner.id)
    return banner.to_dict()
