from typing import TypeVar, Type, List, Optional, Generic, Union, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from pydantic import BaseModel
from benefits_portal.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def _persist(self, db: AsyncSession, db_obj: ModelType, commit: bool) -> ModelType:
        """Commits and refreshes, or only flushes when running inside a wider transaction."""
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def create(self, db: AsyncSession, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**data)
        db.add(db_obj)
        return await self._persist(db, db_obj, commit)

    async def get(self, db: AsyncSession, id: int) -> Optional[ModelType]:
        result = await db.execute(select(self.model).filter(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_for_company(self, db: AsyncSession, id: int, company_id: int) -> Optional[ModelType]:
        """Fetches a tenant row only when it belongs to the given company."""
        result = await db.execute(
            select(self.model)
            .filter(self.model.id == id)
            .filter(self.model.company_id == company_id)
        )
        return result.scalar_one_or_none()

    async def get_multi(self, db: AsyncSession, skip: int = 0, limit: int = 100) -> List[ModelType]:
        result = await db.execute(select(self.model).offset(skip).limit(limit))
        return result.scalars().all()

    async def update(self, db: AsyncSession, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        return await self._persist(db, db_obj, commit)

    async def delete(self, db: AsyncSession, id: int) -> Optional[ModelType]:
        db_obj = await self.get(db, id)
        if db_obj:
            await db.delete(db_obj)
            await db.commit()
        return db_obj

    async def delete_for_company(self, db: AsyncSession, id: int, company_id: int) -> Optional[ModelType]:
        db_obj = await self.get_for_company(db, id, company_id)
        if db_obj:
            await db.delete(db_obj)
            await db.commit()
        return db_obj
