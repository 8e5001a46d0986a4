from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, func
from typing import List, Optional, Tuple
from datetime import datetime

from benefits_portal.models.survey_model import (
    SurveyTemplate,
    SurveyQuestion,
    TemplateQuestion,
    SurveyResponse,
    TemplateStatus,
)
from benefits_portal.schemas import survey_schema
from benefits_portal.repository.base_repository import BaseRepository


class SurveyTemplateRepository(BaseRepository[SurveyTemplate]):
    def __init__(self):
        super().__init__(SurveyTemplate)

    async def create_template(self, db: AsyncSession, company_id: int, template_in: survey_schema.SurveyTemplateCreate, commit: bool = True) -> SurveyTemplate:
        data = template_in.model_dump()
        data.update(company_id=company_id, status=TemplateStatus.DRAFT.value)
        return await self.create(db, data, commit=commit)

    async def get_templates(self, db: AsyncSession, company_id: int, published_only: bool = False) -> List[SurveyTemplate]:
        query = select(self.model).filter(self.model.company_id == company_id)
        if published_only:
            query = (
                query.filter(self.model.published_at.is_not(None))
                .filter(self.model.status == TemplateStatus.ACTIVE.value)
            )
        result = await db.execute(query.order_by(self.model.created_at.desc(), self.model.id.desc()))
        return result.scalars().all()

    async def get_template(self, db: AsyncSession, template_id: int, company_id: int) -> Optional[SurveyTemplate]:
        return await self.get_for_company(db, template_id, company_id)

    async def update_template(self, db: AsyncSession, db_template: SurveyTemplate, template_in: survey_schema.SurveyTemplateUpdate) -> SurveyTemplate:
        update_data = template_in.model_dump(exclude_unset=True)
        update_data["updated_at"] = datetime.utcnow()
        return await self.update(db, db_template, update_data)

    async def publish_template(self, db: AsyncSession, db_template: SurveyTemplate) -> SurveyTemplate:
        """Marks a template active and stamps published_at once. Re-publishing changes nothing."""
        if db_template.published_at is not None:
            return db_template
        now = datetime.utcnow()
        return await self.update(db, db_template, {
            "status": TemplateStatus.ACTIVE.value,
            "published_at": now,
            "updated_at": now,
        })

    async def delete_template(self, db: AsyncSession, db_template: SurveyTemplate) -> None:
        await db.execute(delete(TemplateQuestion).where(TemplateQuestion.template_id == db_template.id))
        await db.delete(db_template)
        await db.commit()


class SurveyQuestionRepository(BaseRepository[SurveyQuestion]):
    def __init__(self):
        super().__init__(SurveyQuestion)

    async def create_question(self, db: AsyncSession, company_id: int, question_in: survey_schema.SurveyQuestionCreate, commit: bool = True) -> SurveyQuestion:
        data = question_in.model_dump()
        data["company_id"] = company_id
        return await self.create(db, data, commit=commit)

    async def get_questions(self, db: AsyncSession, company_id: int) -> List[SurveyQuestion]:
        result = await db.execute(
            select(self.model)
            .filter(self.model.company_id == company_id)
            .order_by(self.model.order.asc(), self.model.id.asc())
        )
        return result.scalars().all()

    async def get_question(self, db: AsyncSession, question_id: int, company_id: int) -> Optional[SurveyQuestion]:
        return await self.get_for_company(db, question_id, company_id)

    async def update_question(self, db: AsyncSession, db_question: SurveyQuestion, question_in: survey_schema.SurveyQuestionUpdate) -> SurveyQuestion:
        update_data = question_in.model_dump(exclude_unset=True)
        update_data["updated_at"] = datetime.utcnow()
        return await self.update(db, db_question, update_data)

    async def delete_question(self, db: AsyncSession, db_question: SurveyQuestion) -> None:
        await db.execute(delete(TemplateQuestion).where(TemplateQuestion.question_id == db_question.id))
        await db.delete(db_question)
        await db.commit()


class TemplateQuestionRepository(BaseRepository[TemplateQuestion]):
    def __init__(self):
        super().__init__(TemplateQuestion)

    async def get_link(self, db: AsyncSession, template_id: int, question_id: int) -> Optional[TemplateQuestion]:
        result = await db.execute(
            select(self.model)
            .filter(self.model.template_id == template_id)
            .filter(self.model.question_id == question_id)
        )
        return result.scalar_one_or_none()

    async def next_order(self, db: AsyncSession, template_id: int) -> int:
        result = await db.execute(
            select(func.max(self.model.order)).filter(self.model.template_id == template_id)
        )
        current = result.scalar_one_or_none()
        return (current or 0) + 1

    async def add_question(self, db: AsyncSession, template_id: int, question_id: int, order: Optional[int] = None, commit: bool = True) -> TemplateQuestion:
        """Links a question to a template. An existing link only has its order updated."""
        if order is None:
            order = await self.next_order(db, template_id)
        link = await self.get_link(db, template_id, question_id)
        if link is not None:
            return await self.update(db, link, {"order": order}, commit=commit)
        return await self.create(db, {"template_id": template_id, "question_id": question_id, "order": order}, commit=commit)

    async def remove_question(self, db: AsyncSession, template_id: int, question_id: int) -> bool:
        result = await db.execute(
            delete(self.model)
            .where(self.model.template_id == template_id)
            .where(self.model.question_id == question_id)
        )
        await db.commit()
        return result.rowcount > 0

    async def get_questions_for_template(self, db: AsyncSession, template_id: int, company_id: int, active_only: bool = False) -> List[Tuple[SurveyQuestion, int]]:
        """Single joined query: the template's questions in join order, then question id."""
        query = (
            select(SurveyQuestion, self.model.order)
            .join(self.model, self.model.question_id == SurveyQuestion.id)
            .filter(self.model.template_id == template_id)
            .filter(SurveyQuestion.company_id == company_id)
        )
        if active_only:
            query = query.filter(SurveyQuestion.active.is_(True))
        result = await db.execute(query.order_by(self.model.order.asc(), SurveyQuestion.id.asc()))
        return [(row[0], row[1]) for row in result.all()]


class SurveyResponseRepository(BaseRepository[SurveyResponse]):
    def __init__(self):
        super().__init__(SurveyResponse)

    async def create_response(self, db: AsyncSession, company_id: int, user_id: int, template_id: int, answers: List[dict]) -> SurveyResponse:
        return await self.create(db, {
            "company_id": company_id,
            "user_id": user_id,
            "template_id": template_id,
            "responses": answers,
        })

    async def get_responses(self, db: AsyncSession, company_id: int, template_id: Optional[int] = None, user_id: Optional[int] = None) -> List[SurveyResponse]:
        query = select(self.model).filter(self.model.company_id == company_id)
        if template_id is not None:
            query = query.filter(self.model.template_id == template_id)
        if user_id is not None:
            query = query.filter(self.model.user_id == user_id)
        result = await db.execute(query.order_by(self.model.submitted_at.asc(), self.model.id.asc()))
        return result.scalars().all()

    async def has_responded(self, db: AsyncSession, company_id: int, user_id: int, template_id: int) -> bool:
        result = await db.execute(
            select(func.count(self.model.id))
            .filter(self.model.company_id == company_id)
            .filter(self.model.user_id == user_id)
            .filter(self.model.template_id == template_id)
        )
        return result.scalar_one() > 0


survey_template_repository = SurveyTemplateRepository()
survey_question_repository = SurveyQuestionRepository()
template_question_repository = TemplateQuestionRepository()
survey_response_repository = SurveyResponseRepository()
