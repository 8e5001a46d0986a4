from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from benefits_portal.core.dependencies import get_db, get_current_user, resolve_company_scope
from benefits_portal.models.user_model import Users
from benefits_portal.modules.chat import service as chat_service
from benefits_portal.schemas import chat_schema

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
)


@router.get("", response_model=List[chat_schema.ChatMessage])
async def read_chat_messages(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await chat_service.get_chat_messages_service(db, company_id, current_user)


@router.post("", response_model=List[chat_schema.ChatMessage])
async def send_chat_message(
    message_in: chat_schema.ChatMessageCreate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await chat_service.send_chat_message_service(db, company_id, current_user, message_in)
