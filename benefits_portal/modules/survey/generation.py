from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from benefits_portal.core.exceptions import GenerationError, NotFoundError, PortalError
from benefits_portal.core.uow import atomic
from benefits_portal.models.survey_model import QuestionType
from benefits_portal.modules.ai.ai_text_service import ai_text_service
from benefits_portal.modules.ai.structured_output import question_text_of
from benefits_portal.modules.documents.extraction import extract_document_content
from benefits_portal.repository.company_repository import company_settings_repository
from benefits_portal.repository.document_repository import document_repository
from benefits_portal.repository.survey_repository import (
    survey_question_repository,
    survey_template_repository,
    template_question_repository,
)
from benefits_portal.schemas import survey_schema

logger = logging.getLogger(__name__)

DEFAULT_GENERATION_PROMPT = (
    "As a benefits administrator I would like to create quarterly and annual benefits surveys. "
    "Create the questions based on your knowledge as well as the contents of the document uploaded "
    "to the assistant. Focus on employee satisfaction, understanding of benefits, and areas for improvement."
)

QUARTERLY_TEMPLATE = survey_schema.SurveyTemplateCreate(
    title="Quarterly Benefits Survey",
    description="A short quarterly check-in on employee satisfaction with their benefits.",
    created_by_ai=True,
)
ANNUAL_TEMPLATE = survey_schema.SurveyTemplateCreate(
    title="Annual Benefits Survey",
    description="A comprehensive annual review of the benefits program.",
    created_by_ai=True,
)

# Names models commonly use for the supported question types.
QUESTION_TYPE_ALIASES = {
    "multiple_choice": QuestionType.RADIO.value,
    "multiple-choice": QuestionType.RADIO.value,
    "multiplechoice": QuestionType.RADIO.value,
    "single_choice": QuestionType.RADIO.value,
    "yes_no": QuestionType.RADIO.value,
    "yes/no": QuestionType.RADIO.value,
    "boolean": QuestionType.RADIO.value,
    "checkboxes": QuestionType.CHECKBOX.value,
    "multi_select": QuestionType.MULTICHOICE.value,
    "dropdown": QuestionType.SELECT.value,
    "rating": QuestionType.SCALE.value,
    "likert": QuestionType.SCALE.value,
    "open": QuestionType.TEXTAREA.value,
    "open_ended": QuestionType.TEXTAREA.value,
    "long_text": QuestionType.TEXTAREA.value,
    "short_text": QuestionType.TEXT.value,
}
DEFAULT_SCALE_OPTIONS = ["1", "2", "3", "4", "5"]


def normalize_question_type(raw_type: Optional[str]) -> str:
    value = (raw_type or "").strip().lower().replace(" ", "_")
    if value in {t.value for t in QuestionType}:
        return value
    return QUESTION_TYPE_ALIASES.get(value, QuestionType.TEXT.value)


def descriptor_to_question(descriptor: dict, order: int) -> survey_schema.SurveyQuestionCreate:
    """Turns one generated question descriptor into a question ready to store."""
    raw_type = descriptor.get("questionType") or descriptor.get("question_type") or descriptor.get("type")
    question_type = normalize_question_type(raw_type)
    options = survey_schema.normalize_options(descriptor.get("options"))
    if not options and (raw_type or "").strip().lower() in ("yes_no", "yes/no", "boolean"):
        options = ["Yes", "No"]
    if not options and question_type == QuestionType.SCALE.value:
        options = list(DEFAULT_SCALE_OPTIONS)
    return survey_schema.SurveyQuestionCreate(
        question_text=question_text_of(descriptor),
        question_type=question_type,
        options=options,
        required=bool(descriptor.get("required", False)),
        order=order,
        created_by_ai=True,
    )


async def _ensure_document_content(db: AsyncSession, document) -> None:
    if document.has_usable_content:
        return
    try:
        await extract_document_content(db, document)
    except PortalError as e:
        logger.warning(f"Could not extract document {document.id} before generation: {e.detail}")
    except (RuntimeError, OSError) as e:
        logger.warning(f"Could not read document {document.id} before generation: {e}")


async def generate_survey_templates_service(
    db: AsyncSession,
    company_id: int,
    request: survey_schema.GenerateSurveyRequest,
) -> survey_schema.GenerateSurveyResult:
    """
    Quick setup: generates questions from a document and creates the requested
    templates. All rows are written in a single transaction.
    """
    document = await document_repository.get_document_for_company(db, request.document_id, company_id)
    if document is None:
        raise NotFoundError("Document")

    await _ensure_document_content(db, document)

    prompt = request.prompt
    if not prompt:
        company_settings = await company_settings_repository.get_settings(db, company_id)
        prompt = (company_settings.survey_generation_prompt if company_settings else None) or DEFAULT_GENERATION_PROMPT

    descriptors = await ai_text_service.generate_structured(prompt, document.content)
    questions_in: List[survey_schema.SurveyQuestionCreate] = [
        descriptor_to_question(descriptor, order)
        for order, descriptor in enumerate(descriptors, start=1)
        if question_text_of(descriptor)
    ]
    if not questions_in:
        raise GenerationError("No usable survey questions were generated")

    templates_in = []
    if request.create_quarterly:
        templates_in.append(QUARTERLY_TEMPLATE)
    if request.create_annual:
        templates_in.append(ANNUAL_TEMPLATE)

    async with atomic(db):
        questions = [
            await survey_question_repository.create_question(db, company_id, question_in, commit=False)
            for question_in in questions_in
        ]
        templates = [
            await survey_template_repository.create_template(db, company_id, template_in, commit=False)
            for template_in in templates_in
        ]
        for template in templates:
            for order, question in enumerate(questions, start=1):
                await template_question_repository.add_question(db, template.id, question.id, order, commit=False)
        template_ids = [template.id for template in templates]
        question_ids = [question.id for question in questions]

    logger.info(
        f"Generated {len(question_ids)} questions and {len(template_ids)} templates "
        f"from document {document.id} for company {company_id}"
    )
    return survey_schema.GenerateSurveyResult(
        templates_created=len(template_ids),
        questions_created=len(question_ids),
        template_ids=template_ids,
        question_ids=question_ids,
    )
