from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List

from benefits_portal.models.chat_message_model import ChatMessage
from benefits_portal.repository.base_repository import BaseRepository


class ChatMessageRepository(BaseRepository[ChatMessage]):
    def __init__(self):
        super().__init__(ChatMessage)

    async def create_message(self, db: AsyncSession, company_id: int, user_id: int, role: str, content: str) -> ChatMessage:
        return await self.create(db, {
            "company_id": company_id,
            "user_id": user_id,
            "role": role,
            "content": content,
        })

    async def get_messages(self, db: AsyncSession, company_id: int, user_id: int) -> List[ChatMessage]:
        """The persisted chat log of one user, in insertion order."""
        result = await db.execute(
            select(self.model)
            .filter(self.model.company_id == company_id)
            .filter(self.model.user_id == user_id)
            .order_by(self.model.id.asc())
        )
        return result.scalars().all()


chat_message_repository = ChatMessageRepository()
