from pydantic import Field, field_validator
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

from benefits_portal.schemas.base_schema import CamelModel, reject_null
from benefits_portal.models.survey_model import QuestionType, TemplateStatus


def normalize_options(value: Any) -> List[str]:
    """
    Options are always stored as an ordered list of strings.
    Accepts a list, a newline-delimited string or None.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.splitlines()
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ValueError("options must be a list of strings or newline-delimited text")
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def _check_question_type(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in {t.value for t in QuestionType}:
        raise ValueError(f"questionType must be one of {', '.join(t.value for t in QuestionType)}")
    return value


# --- Templates ---

class SurveyTemplateCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    created_by_ai: bool = False


class SurveyTemplateUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[str] = None

    @field_validator("title", "status")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return reject_null(value)

    @field_validator("status")
    @classmethod
    def only_archive(cls, value: Optional[str]) -> Optional[str]:
        # Publishing has its own endpoint and there is no way back to draft.
        if value is not None and value != TemplateStatus.ARCHIVED.value:
            raise ValueError("status can only be changed to 'archived'; use the publish endpoint to publish")
        return value


class SurveyTemplate(CamelModel):
    id: int
    company_id: int
    title: str
    description: Optional[str] = None
    status: str
    created_by_ai: bool = False
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Questions ---

class SurveyQuestionCreate(CamelModel):
    question_text: str = Field(min_length=1)
    question_type: str = QuestionType.TEXT.value
    options: List[str] = []
    required: bool = False
    order: int = 0
    active: bool = True
    created_by_ai: bool = False

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, value: Any) -> List[str]:
        return normalize_options(value)

    @field_validator("question_type")
    @classmethod
    def check_type(cls, value: str) -> str:
        return _check_question_type(value)


class SurveyQuestionUpdate(CamelModel):
    question_text: Optional[str] = Field(default=None, min_length=1)
    question_type: Optional[str] = None
    options: Optional[List[str]] = None
    required: Optional[bool] = None
    order: Optional[int] = None
    active: Optional[bool] = None

    @field_validator("question_text", "question_type", "required", "order", "active")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return reject_null(value)

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, value: Any) -> List[str]:
        # An explicit null clears the list.
        return normalize_options(value)

    @field_validator("question_type")
    @classmethod
    def check_type(cls, value: Optional[str]) -> Optional[str]:
        return _check_question_type(value)


class SurveyQuestion(CamelModel):
    id: int
    company_id: int
    question_text: str
    question_type: str
    options: List[str] = []
    required: bool = False
    order: int = 0
    active: bool = True
    created_by_ai: bool = False

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, value: Any) -> List[str]:
        return normalize_options(value)


class TemplateQuestionLinkCreate(CamelModel):
    question_id: int
    order: Optional[int] = None


class TemplateQuestionLink(CamelModel):
    template_id: int
    question_id: int
    order: int


class TemplateQuestion(SurveyQuestion):
    """A question as it appears inside a template, with the template's own ordering."""
    template_order: int


# --- Responses ---

AnswerValue = Union[str, List[str], None]


class SurveyAnswer(CamelModel):
    question_id: int
    question_text: Optional[str] = None
    question_type: Optional[str] = None
    response: AnswerValue = None

    @field_validator("response", mode="before")
    @classmethod
    def coerce_scalar(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class SurveyResponseCreate(CamelModel):
    template_id: int
    responses: List[SurveyAnswer]


class SurveyResponse(CamelModel):
    id: int
    company_id: int
    user_id: int
    template_id: int
    responses: List[SurveyAnswer]
    submitted_at: datetime


class QuestionTally(CamelModel):
    question_id: int
    question_text: str
    question_type: str
    answered: int
    option_counts: Dict[str, int] = {}
    average: Optional[float] = None


class TemplateResults(CamelModel):
    template_id: int
    total_responses: int
    questions: List[QuestionTally]


# --- Quick setup generation ---

class GenerateSurveyRequest(CamelModel):
    document_id: int
    prompt: Optional[str] = None
    create_quarterly: bool = True
    create_annual: bool = True


class GenerateSurveyResult(CamelModel):
    success: bool = True
    templates_created: int
    questions_created: int
    template_ids: List[int] = []
    question_ids: List[int] = []
