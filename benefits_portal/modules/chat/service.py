from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from benefits_portal.models.chat_message_model import ChatMessage
from benefits_portal.models.user_model import Users
from benefits_portal.modules.ai.ai_text_service import ai_text_service
from benefits_portal.repository.chat_message_repository import chat_message_repository
from benefits_portal.repository.company_repository import company_repository, company_settings_repository
from benefits_portal.repository.document_repository import document_repository
from benefits_portal.schemas import chat_schema

logger = logging.getLogger(__name__)


async def get_chat_messages_service(db: AsyncSession, company_id: int, current_user: Users) -> List[ChatMessage]:
    return await chat_message_repository.get_messages(db, company_id, current_user.id)


async def send_chat_message_service(db: AsyncSession, company_id: int, current_user: Users, message_in: chat_schema.ChatMessageCreate) -> List[ChatMessage]:
    """
    Stores the user's message, answers it from the company's documents and
    returns the caller's full chat log.
    """
    user_id = current_user.id
    await chat_message_repository.create_message(db, company_id, user_id, "user", message_in.content)

    documents = await document_repository.get_documents_by_company(db, company_id, include_private=current_user.is_admin)
    company = await company_repository.get_company(db, company_id)
    company_settings = await company_settings_repository.get_settings(db, company_id)

    company_name = (company_settings.name if company_settings else None) or (company.name if company else None)
    assistant_name = company_settings.ai_assistant_name if company_settings else None

    answer = await ai_text_service.chat_answer(
        [document.content for document in documents],
        message_in.content,
        company_id=company_id,
        user_id=user_id,
        company_name=company_name,
        assistant_name=assistant_name,
    )
    await chat_message_repository.create_message(db, company_id, user_id, answer["role"], answer["content"])
    logger.info(f"Answered chat message for company {company_id} user {user_id}")

    return await chat_message_repository.get_messages(db, company_id, user_id)
