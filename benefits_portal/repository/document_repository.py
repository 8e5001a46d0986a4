from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List, Optional

from benefits_portal.models.document_model import Documents
from benefits_portal.schemas import document_schema
from benefits_portal.repository.base_repository import BaseRepository


class DocumentRepository(BaseRepository[Documents]):
    def __init__(self):
        super().__init__(Documents)

    async def create_document(self, db: AsyncSession, document: document_schema.DocumentCreate) -> Documents:
        return await self.create(db, document)

    async def get_document(self, db: AsyncSession, document_id: int) -> Optional[Documents]:
        return await self.get(db, document_id)

    async def get_document_for_company(self, db: AsyncSession, document_id: int, company_id: int, include_private: bool = True) -> Optional[Documents]:
        query = (
            select(self.model)
            .filter(self.model.id == document_id)
            .filter(self.model.company_id == company_id)
        )
        if not include_private:
            query = query.filter(self.model.is_public.is_(True))
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_documents_by_company(self, db: AsyncSession, company_id: int, include_private: bool = True) -> List[Documents]:
        """Gets the company's documents, newest first. Private ones only when asked for."""
        query = select(self.model).filter(self.model.company_id == company_id)
        if not include_private:
            query = query.filter(self.model.is_public.is_(True))
        result = await db.execute(query.order_by(self.model.uploaded_at.desc(), self.model.id.desc()))
        return result.scalars().all()

    async def update_document(self, db: AsyncSession, db_document: Documents, document_in: document_schema.DocumentUpdate) -> Documents:
        return await self.update(db, db_document, document_in)

    async def update_document_content(self, db: AsyncSession, db_document: Documents, content: str) -> Documents:
        return await self.update(db, db_document, {"content": content})

    async def delete_document(self, db: AsyncSession, document_id: int, company_id: int) -> Optional[Documents]:
        return await self.delete_for_company(db, document_id, company_id)


document_repository = DocumentRepository()
