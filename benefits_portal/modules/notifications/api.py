from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from benefits_portal.core.dependencies import get_db, get_current_user, get_current_admin, resolve_company_scope
from benefits_portal.models.user_model import Users
from benefits_portal.modules.notifications import service as notification_service
from benefits_portal.schemas import notification_schema
from benefits_portal.schemas.base_schema import MessageResponse

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)

company_router = APIRouter(
    prefix="/company-notifications",
    tags=["Notifications"],
)


@router.get("", response_model=List[notification_schema.Notification])
async def read_notifications(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.get_user_notifications_service(db, company_id, current_user)


@router.get("/unread-count", response_model=notification_schema.UnreadCount)
async def read_unread_count(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.count_unread_service(db, company_id, current_user)


@router.patch("/read-all", response_model=MessageResponse)
async def mark_all_notifications_read(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await notification_service.mark_all_as_read_service(db, company_id, current_user)
    return {"message": "All notifications marked as read"}


@router.patch("/{notification_id}/read", response_model=notification_schema.Notification)
async def mark_notification_read(
    notification_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.mark_as_read_service(db, notification_id, company_id, current_user)


@router.post("", response_model=notification_schema.Notification, status_code=status.HTTP_201_CREATED)
async def create_notification(
    notification_in: notification_schema.NotificationCreate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.create_notification_service(db, company_id, notification_in)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await notification_service.delete_notification_service(db, notification_id, company_id)
    return {"message": "Notification deleted successfully"}


@company_router.get("", response_model=List[notification_schema.Notification])
async def read_company_notifications(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.get_company_notifications_service(db, company_id)
