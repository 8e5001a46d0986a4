from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from benefits_portal.core.dependencies import get_db, get_current_user, get_current_admin, resolve_company_scope
from benefits_portal.models.user_model import Users
from benefits_portal.modules.survey import service as survey_service
from benefits_portal.modules.survey import generation as survey_generation
from benefits_portal.schemas import survey_schema

responses_router = APIRouter(
    prefix="/survey",
    tags=["Survey Responses"],
)

templates_router = APIRouter(
    prefix="/survey-templates",
    tags=["Survey Templates"],
)

questions_router = APIRouter(
    prefix="/survey-questions",
    tags=["Survey Questions"],
)


# --- Responses ---

@responses_router.post("", response_model=survey_schema.SurveyResponse, status_code=status.HTTP_201_CREATED)
async def submit_survey_response(
    response_in: survey_schema.SurveyResponseCreate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.submit_response_service(db, company_id, current_user, response_in)


@responses_router.get("", response_model=List[survey_schema.SurveyResponse])
async def read_survey_responses(
    template_id: Optional[int] = Query(default=None, alias="templateId"),
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.list_responses_service(db, company_id, current_user, template_id)


# --- Templates ---

@templates_router.get("", response_model=List[survey_schema.SurveyTemplate])
async def read_templates(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.list_templates_service(db, company_id, current_user)


@templates_router.post("", response_model=survey_schema.SurveyTemplate, status_code=status.HTTP_201_CREATED)
async def create_template(
    template_in: survey_schema.SurveyTemplateCreate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.create_template_service(db, company_id, template_in)


@templates_router.post("/generate", response_model=survey_schema.GenerateSurveyResult, status_code=status.HTTP_201_CREATED)
async def generate_templates(
    request: survey_schema.GenerateSurveyRequest,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """Quick setup: builds survey questions and templates from an uploaded document."""
    return await survey_generation.generate_survey_templates_service(db, company_id, request)


@templates_router.get("/{template_id}", response_model=survey_schema.SurveyTemplate)
async def read_template(
    template_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.get_template_service(db, template_id, company_id, current_user)


@templates_router.patch("/{template_id}", response_model=survey_schema.SurveyTemplate)
async def update_template(
    template_id: int,
    template_in: survey_schema.SurveyTemplateUpdate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.update_template_service(db, template_id, company_id, template_in)


@templates_router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await survey_service.delete_template_service(db, template_id, company_id)


@templates_router.post("/{template_id}/publish", response_model=survey_schema.SurveyTemplate)
async def publish_template(
    template_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.publish_template_service(db, template_id, company_id)


@templates_router.get("/{template_id}/questions", response_model=List[survey_schema.TemplateQuestion])
async def read_template_questions(
    template_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.get_template_questions_service(db, template_id, company_id, current_user)


@templates_router.post("/{template_id}/questions", response_model=survey_schema.TemplateQuestionLink, status_code=status.HTTP_201_CREATED)
async def add_template_question(
    template_id: int,
    link_in: survey_schema.TemplateQuestionLinkCreate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.add_question_to_template_service(db, template_id, company_id, link_in)


@templates_router.delete("/{template_id}/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_template_question(
    template_id: int,
    question_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await survey_service.remove_question_from_template_service(db, template_id, question_id, company_id)


@templates_router.get("/{template_id}/results", response_model=survey_schema.TemplateResults)
async def read_template_results(
    template_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.get_template_results_service(db, template_id, company_id)


# --- Questions ---

@questions_router.get("", response_model=List[survey_schema.SurveyQuestion])
async def read_questions(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.list_questions_service(db, company_id)


@questions_router.post("", response_model=survey_schema.SurveyQuestion, status_code=status.HTTP_201_CREATED)
async def create_question(
    question_in: survey_schema.SurveyQuestionCreate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.create_question_service(db, company_id, question_in)


@questions_router.get("/{question_id}", response_model=survey_schema.SurveyQuestion)
async def read_question(
    question_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.get_question_service(db, question_id, company_id)


@questions_router.patch("/{question_id}", response_model=survey_schema.SurveyQuestion)
async def update_question(
    question_id: int,
    question_in: survey_schema.SurveyQuestionUpdate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await survey_service.update_question_service(db, question_id, company_id, question_in)


@questions_router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await survey_service.delete_question_service(db, question_id, company_id)
