from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from benefits_portal.core.exceptions import NotFoundError, ValidationError
from benefits_portal.models.notification_model import Notification
from benefits_portal.models.user_model import Users
from benefits_portal.repository.notification_repository import notification_repository
from benefits_portal.repository.user_repository import user_repository
from benefits_portal.schemas import notification_schema

logger = logging.getLogger(__name__)


async def get_user_notifications_service(db: AsyncSession, company_id: int, current_user: Users) -> List[Notification]:
    """Notifications addressed to the caller plus the company-wide ones, newest first."""
    return await notification_repository.get_user_notifications(db, company_id, current_user.id)


async def get_company_notifications_service(db: AsyncSession, company_id: int) -> List[Notification]:
    return await notification_repository.get_company_notifications(db, company_id)


async def count_unread_service(db: AsyncSession, company_id: int, current_user: Users) -> notification_schema.UnreadCount:
    count = await notification_repository.count_unread(db, company_id, current_user.id)
    return notification_schema.UnreadCount(count=count)


async def mark_as_read_service(db: AsyncSession, notification_id: int, company_id: int, current_user: Users) -> Notification:
    notification = await notification_repository.get_visible_notification(db, notification_id, company_id, current_user.id)
    if notification is None:
        raise NotFoundError("Notification")
    return await notification_repository.mark_as_read(db, notification)


async def mark_all_as_read_service(db: AsyncSession, company_id: int, current_user: Users) -> int:
    updated = await notification_repository.mark_all_as_read(db, company_id, current_user.id)
    logger.info(f"Marked {updated} notifications as read for user {current_user.id}")
    return updated


async def create_notification_service(db: AsyncSession, company_id: int, notification_in: notification_schema.NotificationCreate) -> Notification:
    if notification_in.user_id is not None:
        recipient = await user_repository.get_user_for_company(db, notification_in.user_id, company_id)
        if recipient is None:
            raise ValidationError("Recipient does not belong to this company")

    data = notification_in.model_dump()
    data.update(company_id=company_id, is_global=notification_in.user_id is None, is_read=False)
    return await notification_repository.create_notification(db, data)


async def delete_notification_service(db: AsyncSession, notification_id: int, company_id: int) -> None:
    notification = await notification_repository.delete_notification(db, notification_id, company_id)
    if notification is None:
        raise NotFoundError("Notification")
