import enum
from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    Index,
    UniqueConstraint,
)
from benefits_portal.models.base import Base


class TemplateStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class QuestionType(str, enum.Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    DATE = "date"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SELECT = "select"
    MULTICHOICE = "multichoice"
    SCALE = "scale"


CHOICE_QUESTION_TYPES = {
    QuestionType.RADIO.value,
    QuestionType.CHECKBOX.value,
    QuestionType.SELECT.value,
    QuestionType.MULTICHOICE.value,
}
NUMERIC_QUESTION_TYPES = {QuestionType.NUMBER.value, QuestionType.SCALE.value}


class SurveyTemplate(Base):
    __tablename__ = "Survey_templates"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("Company.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=TemplateStatus.DRAFT.value)
    created_by_ai = Column(Boolean, default=False)
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    @property
    def is_published(self) -> bool:
        return self.published_at is not None and self.status == TemplateStatus.ACTIVE.value


class SurveyQuestion(Base):
    __tablename__ = "Survey_questions"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("Company.id"), nullable=False, index=True)
    question_text = Column(Text, nullable=False)
    question_type = Column(String(20), nullable=False, default=QuestionType.TEXT.value)
    options = Column(JSON, nullable=False, default=list)
    required = Column(Boolean, default=False)
    order = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, default=True)
    created_by_ai = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)


class TemplateQuestion(Base):
    __tablename__ = "Template_questions"
    __table_args__ = (
        UniqueConstraint("template_id", "question_id", name="uq_template_question"),
        Index("ix_template_questions_template_order", "template_id", "order"),
    )

    id = Column(Integer, primary_key=True)
    template_id = Column(Integer, ForeignKey("Survey_templates.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(Integer, ForeignKey("Survey_questions.id", ondelete="CASCADE"), nullable=False)
    order = Column(Integer, nullable=False, default=0)


class SurveyResponse(Base):
    __tablename__ = "Survey_responses"
    __table_args__ = (
        Index("ix_survey_responses_company_template", "company_id", "template_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("Company.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("Users.id"), nullable=False)
    # Plain column: responses outlive the template they answered.
    template_id = Column(Integer, nullable=False)
    responses = Column(JSON, nullable=False, default=list)
    submitted_at = Column(DateTime, nullable=False, default=datetime.utcnow)
