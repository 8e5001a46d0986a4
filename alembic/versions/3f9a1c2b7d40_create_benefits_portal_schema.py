"""create benefits portal schema

Revision ID: 3f9a1c2b7d40
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7d40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "Company",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("domain", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_Company_slug"), "Company", ["slug"], unique=True)

    op.create_table(
        "Company_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("logo", sa.Text(), nullable=True),
        sa.Column("primary_color", sa.String(length=20), nullable=True),
        sa.Column("secondary_color", sa.String(length=20), nullable=True),
        sa.Column("accent_color", sa.String(length=20), nullable=True),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("ai_assistant_name", sa.String(length=100), nullable=True),
        sa.Column("survey_generation_prompt", sa.Text(), nullable=True),
        sa.Column("website_prompt", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id"),
    )

    op.create_table(
        "Users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("phone_number", sa.String(length=50), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("company_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_Users_username"), "Users", ["username"], unique=True)
    op.create_index(op.f("ix_Users_company_id"), "Users", ["company_id"], unique=False)

    op.create_table(
        "Documents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("original_name", sa.String(length=255), nullable=False),
        sa.Column("mime_type", sa.String(length=100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=True),
        sa.Column("uploaded_by", sa.Integer(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.ForeignKeyConstraint(["uploaded_by"], ["Users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("file_name"),
    )
    op.create_index(op.f("ix_Documents_id"), "Documents", ["id"], unique=False)
    op.create_index("ix_documents_company_public", "Documents", ["company_id", "is_public"], unique=False)

    op.create_table(
        "Survey_templates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("created_by_ai", sa.Boolean(), nullable=True),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_Survey_templates_id"), "Survey_templates", ["id"], unique=False)
    op.create_index(op.f("ix_Survey_templates_company_id"), "Survey_templates", ["company_id"], unique=False)

    op.create_table(
        "Survey_questions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_type", sa.String(length=20), nullable=False, server_default="text"),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("required", sa.Boolean(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=True),
        sa.Column("created_by_ai", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_Survey_questions_id"), "Survey_questions", ["id"], unique=False)
    op.create_index(op.f("ix_Survey_questions_company_id"), "Survey_questions", ["company_id"], unique=False)

    op.create_table(
        "Template_questions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["template_id"], ["Survey_templates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["question_id"], ["Survey_questions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("template_id", "question_id", name="uq_template_question"),
    )
    op.create_index("ix_template_questions_template_order", "Template_questions", ["template_id", "order"], unique=False)

    op.create_table(
        "Survey_responses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=False),
        sa.Column("responses", sa.JSON(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["Users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_Survey_responses_id"), "Survey_responses", ["id"], unique=False)
    op.create_index("ix_survey_responses_company_template", "Survey_responses", ["company_id", "template_id"], unique=False)

    op.create_table(
        "Calendar_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.DateTime(), nullable=False),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("color", sa.String(length=50), nullable=False, server_default="slate"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_Calendar_events_id"), "Calendar_events", ["id"], unique=False)
    op.create_index("ix_calendar_events_company_date", "Calendar_events", ["company_id", "event_date"], unique=False)

    op.create_table(
        "Chat_messages",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["Users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_chat_messages_company_user", "Chat_messages", ["company_id", "user_id"], unique=False)

    op.create_table(
        "Notifications",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("is_global", sa.Boolean(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="info"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["Company.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["Users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_Notifications_id"), "Notifications", ["id"], unique=False)
    op.create_index("ix_notifications_company_user", "Notifications", ["company_id", "user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_notifications_company_user", table_name="Notifications")
    op.drop_index(op.f("ix_Notifications_id"), table_name="Notifications")
    op.drop_table("Notifications")
    op.drop_index("ix_chat_messages_company_user", table_name="Chat_messages")
    op.drop_table("Chat_messages")
    op.drop_index("ix_calendar_events_company_date", table_name="Calendar_events")
    op.drop_index(op.f("ix_Calendar_events_id"), table_name="Calendar_events")
    op.drop_table("Calendar_events")
    op.drop_index("ix_survey_responses_company_template", table_name="Survey_responses")
    op.drop_index(op.f("ix_Survey_responses_id"), table_name="Survey_responses")
    op.drop_table("Survey_responses")
    op.drop_index("ix_template_questions_template_order", table_name="Template_questions")
    op.drop_table("Template_questions")
    op.drop_index(op.f("ix_Survey_questions_company_id"), table_name="Survey_questions")
    op.drop_index(op.f("ix_Survey_questions_id"), table_name="Survey_questions")
    op.drop_table("Survey_questions")
    op.drop_index(op.f("ix_Survey_templates_company_id"), table_name="Survey_templates")
    op.drop_index(op.f("ix_Survey_templates_id"), table_name="Survey_templates")
    op.drop_table("Survey_templates")
    op.drop_index("ix_documents_company_public", table_name="Documents")
    op.drop_index(op.f("ix_Documents_id"), table_name="Documents")
    op.drop_table("Documents")
    op.drop_index(op.f("ix_Users_company_id"), table_name="Users")
    op.drop_index(op.f("ix_Users_username"), table_name="Users")
    op.drop_table("Users")
    op.drop_table("Company_settings")
    op.drop_index(op.f("ix_Company_slug"), table_name="Company")
    op.drop_table("Company")
