import pytest
from sqlalchemy import func, select

from benefits_portal.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from benefits_portal.models.calendar_model import CalendarEvent
from benefits_portal.models.company_model import Company
from benefits_portal.models.document_model import Documents
from benefits_portal.models.notification_model import Notification
from benefits_portal.models.survey_model import SurveyQuestion, SurveyTemplate, TemplateQuestion
from benefits_portal.models.user_model import Users
from benefits_portal.modules.company import service as company_service
from benefits_portal.modules.users import service as users_service
from benefits_portal.schemas import company_schema, user_schema
from benefits_portal.utils.security import verify_password


async def _count(db, model, **filters):
    query = select(func.count()).select_from(model)
    for field, value in filters.items():
        query = query.filter(getattr(model, field) == value)
    result = await db.execute(query)
    return result.scalar_one()


# --- Companies ---

@pytest.mark.asyncio
async def test_create_company_rejects_duplicate_slug(db_session, two_companies):
    with pytest.raises(ConflictError):
        await company_service.create_company_service(db_session, company_schema.CompanyCreate(name="Acme 2", slug="acme"))


@pytest.mark.asyncio
async def test_settings_default_to_company_fields(db_session, two_companies):
    acme = two_companies["acme"]
    defaults = await company_service.get_company_settings_service(db_session, acme.id)
    assert defaults.id is None
    assert defaults.name == "Acme"

    saved = await company_service.update_company_settings_service(
        db_session, acme.id, company_schema.CompanySettingsUpdate(ai_assistant_name="Benny"),
    )
    assert saved.id is not None
    assert saved.name == "Acme"
    assert saved.ai_assistant_name == "Benny"

    updated = await company_service.update_company_settings_service(
        db_session, acme.id, company_schema.CompanySettingsUpdate(primary_color="#000000"),
    )
    assert updated.id == saved.id
    assert updated.ai_assistant_name == "Benny"
    assert updated.primary_color == "#000000"


@pytest.mark.asyncio
async def test_delete_company_removes_only_its_data(db_session, two_companies):
    acme, globex = two_companies["acme"], two_companies["globex"]
    for company in (acme, globex):
        question = SurveyQuestion(company_id=company.id, question_text="How satisfied are you?", question_type="text")
        template = SurveyTemplate(company_id=company.id, title="Quarterly", status="draft")
        db_session.add_all([question, template])
        await db_session.flush()
        db_session.add_all([
            TemplateQuestion(template_id=template.id, question_id=question.id, order=1),
            Documents(company_id=company.id, file_name=f"{company.slug}.txt", original_name="plan.txt",
                      mime_type="text/plain", size=4, content="plan"),
            Notification(company_id=company.id, title="Hi", message="Hello", type="info", is_global=True, is_read=False),
        ])
    await db_session.commit()

    await company_service.delete_company_service(db_session, acme.id)

    assert await _count(db_session, Company, id=acme.id) == 0
    for model in (Users, SurveyQuestion, SurveyTemplate, Documents, Notification):
        assert await _count(db_session, model, company_id=acme.id) == 0
        assert await _count(db_session, model, company_id=globex.id) > 0
    assert await _count(db_session, TemplateQuestion) == 1
    assert await _count(db_session, CalendarEvent) == 0

    with pytest.raises(NotFoundError):
        await company_service.delete_company_service(db_session, acme.id)


# --- Users ---

@pytest.mark.asyncio
async def test_admin_creates_user_in_own_company(db_session, two_companies):
    acme_admin = two_companies["acme_admin"]
    user = await users_service.create_user_service(
        db_session, acme_admin, acme_admin.company_id,
        user_schema.UserCreate(username="new_hire", password="welcome1", role="user"),
    )
    assert user.company_id == acme_admin.company_id
    assert user.password != "welcome1"
    assert verify_password("welcome1", user.password)


@pytest.mark.asyncio
async def test_only_super_admin_grants_superadmin(db_session, two_companies):
    acme_admin = two_companies["acme_admin"]
    with pytest.raises(AuthorizationError):
        await users_service.create_user_service(
            db_session, acme_admin, acme_admin.company_id,
            user_schema.UserCreate(username="sneaky", password="welcome1", role="superadmin"),
        )
    with pytest.raises(AuthorizationError):
        await users_service.update_user_service(
            db_session, acme_admin, two_companies["acme_employee"].id, acme_admin.company_id,
            user_schema.UserUpdate(role="superadmin"),
        )


@pytest.mark.asyncio
async def test_duplicate_username_is_rejected(db_session, two_companies):
    acme_admin = two_companies["acme_admin"]
    with pytest.raises(ConflictError):
        await users_service.create_user_service(
            db_session, acme_admin, acme_admin.company_id,
            user_schema.UserCreate(username="globex_employee", password="welcome1"),
        )


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_or_delete_self(db_session, two_companies):
    acme_admin = two_companies["acme_admin"]
    with pytest.raises(ValidationError):
        await users_service.update_user_service(
            db_session, acme_admin, acme_admin.id, acme_admin.company_id, user_schema.UserUpdate(is_active=False),
        )
    with pytest.raises(ValidationError):
        await users_service.delete_user_service(db_session, acme_admin, acme_admin.id, acme_admin.company_id)


@pytest.mark.asyncio
async def test_users_of_other_companies_are_not_found(db_session, two_companies):
    acme_admin = two_companies["acme_admin"]
    with pytest.raises(NotFoundError):
        await users_service.get_user_service(db_session, two_companies["globex_employee"].id, acme_admin.company_id)
    with pytest.raises(NotFoundError):
        await users_service.delete_user_service(
            db_session, acme_admin, two_companies["globex_employee"].id, acme_admin.company_id,
        )


@pytest.mark.asyncio
async def test_update_user_hashes_new_password(db_session, two_companies):
    acme_admin, employee = two_companies["acme_admin"], two_companies["acme_employee"]
    user = await users_service.update_user_service(
        db_session, acme_admin, employee.id, acme_admin.company_id,
        user_schema.UserUpdate(password="changed1", first_name="Erin"),
    )
    assert user.first_name == "Erin"
    assert verify_password("changed1", user.password)
