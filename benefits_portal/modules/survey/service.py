from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Iterable, List, Optional
import logging

from benefits_portal.core.config import settings
from benefits_portal.core.exceptions import ConflictError, NotFoundError, ValidationError
from benefits_portal.models.survey_model import (
    CHOICE_QUESTION_TYPES,
    NUMERIC_QUESTION_TYPES,
    SurveyQuestion,
    SurveyResponse,
    SurveyTemplate,
)
from benefits_portal.models.user_model import Users
from benefits_portal.repository.survey_repository import (
    survey_question_repository,
    survey_response_repository,
    survey_template_repository,
    template_question_repository,
)
from benefits_portal.schemas import survey_schema

logger = logging.getLogger(__name__)


def is_answered(value: Any) -> bool:
    """None, blank strings and empty lists count as unanswered."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return any(item is not None and str(item).strip() for item in value)
    return True


def find_missing_required(questions: Iterable[SurveyQuestion], answers: Iterable[survey_schema.SurveyAnswer]) -> List[SurveyQuestion]:
    answered_ids = {answer.question_id for answer in answers if is_answered(answer.response)}
    return [q for q in questions if q.required and q.active and q.id not in answered_ids]


# --- Templates ---

async def list_templates_service(db: AsyncSession, company_id: int, current_user: Users) -> List[SurveyTemplate]:
    """Admins see every template; employees only the published ones."""
    return await survey_template_repository.get_templates(db, company_id, published_only=not current_user.is_admin)


async def get_template_service(db: AsyncSession, template_id: int, company_id: int, current_user: Optional[Users] = None) -> SurveyTemplate:
    template = await survey_template_repository.get_template(db, template_id, company_id)
    if template is None:
        raise NotFoundError("Survey template")
    if current_user is not None and not current_user.is_admin and not template.is_published:
        raise NotFoundError("Survey template")
    return template


async def create_template_service(db: AsyncSession, company_id: int, template_in: survey_schema.SurveyTemplateCreate) -> SurveyTemplate:
    return await survey_template_repository.create_template(db, company_id, template_in)


async def update_template_service(db: AsyncSession, template_id: int, company_id: int, template_in: survey_schema.SurveyTemplateUpdate) -> SurveyTemplate:
    template = await get_template_service(db, template_id, company_id)
    return await survey_template_repository.update_template(db, template, template_in)


async def publish_template_service(db: AsyncSession, template_id: int, company_id: int) -> SurveyTemplate:
    template = await get_template_service(db, template_id, company_id)
    if template.published_at is not None:
        logger.info(f"Survey template {template_id} is already published")
    return await survey_template_repository.publish_template(db, template)


async def delete_template_service(db: AsyncSession, template_id: int, company_id: int) -> None:
    template = await get_template_service(db, template_id, company_id)
    await survey_template_repository.delete_template(db, template)


# --- Questions ---

async def list_questions_service(db: AsyncSession, company_id: int) -> List[SurveyQuestion]:
    return await survey_question_repository.get_questions(db, company_id)


async def get_question_service(db: AsyncSession, question_id: int, company_id: int) -> SurveyQuestion:
    question = await survey_question_repository.get_question(db, question_id, company_id)
    if question is None:
        raise NotFoundError("Survey question")
    return question


async def create_question_service(db: AsyncSession, company_id: int, question_in: survey_schema.SurveyQuestionCreate) -> SurveyQuestion:
    return await survey_question_repository.create_question(db, company_id, question_in)


async def update_question_service(db: AsyncSession, question_id: int, company_id: int, question_in: survey_schema.SurveyQuestionUpdate) -> SurveyQuestion:
    question = await get_question_service(db, question_id, company_id)
    return await survey_question_repository.update_question(db, question, question_in)


async def delete_question_service(db: AsyncSession, question_id: int, company_id: int) -> None:
    question = await get_question_service(db, question_id, company_id)
    await survey_question_repository.delete_question(db, question)


# --- Template membership ---

async def get_template_questions_service(db: AsyncSession, template_id: int, company_id: int, current_user: Users) -> List[survey_schema.TemplateQuestion]:
    await get_template_service(db, template_id, company_id, current_user)
    rows = await template_question_repository.get_questions_for_template(
        db, template_id, company_id, active_only=not current_user.is_admin
    )
    return [
        survey_schema.TemplateQuestion.model_validate(
            {**survey_schema.SurveyQuestion.model_validate(question).model_dump(), "template_order": order}
        )
        for question, order in rows
    ]


async def add_question_to_template_service(db: AsyncSession, template_id: int, company_id: int, link_in: survey_schema.TemplateQuestionLinkCreate):
    await get_template_service(db, template_id, company_id)
    await get_question_service(db, link_in.question_id, company_id)
    return await template_question_repository.add_question(db, template_id, link_in.question_id, link_in.order)


async def remove_question_from_template_service(db: AsyncSession, template_id: int, question_id: int, company_id: int) -> None:
    await get_template_service(db, template_id, company_id)
    removed = await template_question_repository.remove_question(db, template_id, question_id)
    if not removed:
        raise NotFoundError("Template question")


# --- Responses ---

async def submit_response_service(db: AsyncSession, company_id: int, current_user: Users, response_in: survey_schema.SurveyResponseCreate) -> SurveyResponse:
    """
    Validates required answers against the template's current questions, then stores
    the response. Nothing is written when validation fails.
    """
    template = await survey_template_repository.get_template(db, response_in.template_id, company_id)
    if template is None:
        raise NotFoundError("Survey template")
    if not template.is_published:
        raise ValidationError("This survey is not open for responses")

    if not settings.ALLOW_MULTIPLE_SURVEY_RESPONSES and await survey_response_repository.has_responded(
        db, company_id, current_user.id, template.id
    ):
        raise ConflictError("You have already responded to this survey")

    rows = await template_question_repository.get_questions_for_template(db, template.id, company_id, active_only=True)
    questions = {question.id: question for question, _ in rows}

    missing = find_missing_required(questions.values(), response_in.responses)
    if missing:
        raise ValidationError(
            "Missing required fields",
            details={"missingQuestions": [q.question_text for q in missing]},
        )

    answers = []
    for answer in response_in.responses:
        question = questions.get(answer.question_id)
        if question is not None:
            answer = answer.model_copy(update={
                "question_text": answer.question_text or question.question_text,
                "question_type": answer.question_type or question.question_type,
            })
        answers.append(answer.model_dump(by_alias=True))

    response = await survey_response_repository.create_response(db, company_id, current_user.id, template.id, answers)
    logger.info(f"User {current_user.id} submitted survey response {response.id} for template {template.id}")
    return response


async def list_responses_service(db: AsyncSession, company_id: int, current_user: Users, template_id: Optional[int] = None) -> List[SurveyResponse]:
    """Admins get every response in the company; employees only their own."""
    user_filter = None if current_user.is_admin else current_user.id
    return await survey_response_repository.get_responses(db, company_id, template_id=template_id, user_id=user_filter)


def tally_question(question: SurveyQuestion, responses: Iterable[SurveyResponse]) -> survey_schema.QuestionTally:
    answered = 0
    option_counts: Dict[str, int] = {}
    if question.question_type in CHOICE_QUESTION_TYPES:
        option_counts = {option: 0 for option in question.options or []}
    numbers: List[float] = []

    for response in responses:
        for answer in response.responses or []:
            if answer.get("questionId") != question.id or not is_answered(answer.get("response")):
                continue
            answered += 1
            value = answer["response"]
            values = value if isinstance(value, list) else [value]
            if question.question_type in CHOICE_QUESTION_TYPES:
                for item in values:
                    option_counts[str(item)] = option_counts.get(str(item), 0) + 1
            elif question.question_type in NUMERIC_QUESTION_TYPES:
                for item in values:
                    try:
                        numbers.append(float(item))
                    except (TypeError, ValueError):
                        continue

    return survey_schema.QuestionTally(
        question_id=question.id,
        question_text=question.question_text,
        question_type=question.question_type,
        answered=answered,
        option_counts=option_counts,
        average=round(sum(numbers) / len(numbers), 2) if numbers else None,
    )


async def get_template_results_service(db: AsyncSession, template_id: int, company_id: int) -> survey_schema.TemplateResults:
    template = await get_template_service(db, template_id, company_id)
    rows = await template_question_repository.get_questions_for_template(db, template.id, company_id)
    responses = await survey_response_repository.get_responses(db, company_id, template_id=template.id)
    return survey_schema.TemplateResults(
        template_id=template.id,
        total_responses=len(responses),
        questions=[tally_question(question, responses) for question, _ in rows],
    )
