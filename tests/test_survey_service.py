import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from unittest.mock import patch

from benefits_portal.core.config import settings
from benefits_portal.core.exceptions import ConflictError, NotFoundError, ValidationError
from benefits_portal.models.survey_model import SurveyResponse, TemplateQuestion
from benefits_portal.modules.survey import service as survey_service
from benefits_portal.schemas import calendar_schema, company_schema, survey_schema


async def _question(db, company_id, text, question_type="text", required=False, options=None, active=True):
    return await survey_service.create_question_service(db, company_id, survey_schema.SurveyQuestionCreate(
        question_text=text, question_type=question_type, required=required, options=options or [], active=active,
    ))


async def _template(db, company_id, title="Quarterly Check-in"):
    return await survey_service.create_template_service(db, company_id, survey_schema.SurveyTemplateCreate(title=title))


async def _link(db, template, question, order):
    return await survey_service.add_question_to_template_service(
        db, template.id, template.company_id, survey_schema.TemplateQuestionLinkCreate(question_id=question.id, order=order),
    )


async def _response_count(db) -> int:
    result = await db.execute(select(func.count(SurveyResponse.id)))
    return result.scalar_one()


@pytest.fixture
def acme(two_companies):
    return two_companies["acme"]


def test_is_answered():
    assert not survey_service.is_answered(None)
    assert not survey_service.is_answered("  ")
    assert not survey_service.is_answered([])
    assert not survey_service.is_answered(["", None])
    assert survey_service.is_answered("4")
    assert survey_service.is_answered(["Dental"])


def test_options_are_normalized_from_text():
    question = survey_schema.SurveyQuestionCreate(
        question_text="Which plans?", question_type="checkbox", options="Medical\n\n Dental \nVision",
    )
    assert question.options == ["Medical", "Dental", "Vision"]


def test_template_update_only_archives():
    assert survey_schema.SurveyTemplateUpdate(status="archived").status == "archived"
    with pytest.raises(ValueError):
        survey_schema.SurveyTemplateUpdate(status="active")


def test_partial_updates_reject_null_for_required_fields():
    assert survey_schema.SurveyQuestionUpdate(required=True).model_dump(exclude_unset=True) == {"required": True}
    assert survey_schema.SurveyQuestionUpdate(options=None).options == []
    for field in ("question_text", "question_type", "required", "order", "active"):
        with pytest.raises(PydanticValidationError):
            survey_schema.SurveyQuestionUpdate(**{field: None})
    with pytest.raises(PydanticValidationError):
        survey_schema.SurveyTemplateUpdate(title=None)
    with pytest.raises(PydanticValidationError):
        calendar_schema.CalendarEventUpdate(event_type=None)
    with pytest.raises(PydanticValidationError):
        company_schema.CompanyUpdate(slug=None)
    assert calendar_schema.CalendarEventUpdate(color=None).color is None


@pytest.mark.asyncio
async def test_template_questions_follow_template_order(db_session, acme, two_companies):
    first = await _question(db_session, acme.id, "First created")
    second = await _question(db_session, acme.id, "Second created")
    third = await _question(db_session, acme.id, "Third created")
    template = await _template(db_session, acme.id)
    await _link(db_session, template, first, 3)
    await _link(db_session, template, second, 1)
    await _link(db_session, template, third, 2)

    rows = await survey_service.get_template_questions_service(db_session, template.id, acme.id, two_companies["acme_admin"])

    assert [q.question_text for q in rows] == ["Second created", "Third created", "First created"]
    assert [q.template_order for q in rows] == [1, 2, 3]


@pytest.mark.asyncio
async def test_relinking_updates_order_instead_of_duplicating(db_session, acme):
    question = await _question(db_session, acme.id, "How satisfied are you?")
    template = await _template(db_session, acme.id)
    await _link(db_session, template, question, 1)
    link = await _link(db_session, template, question, 5)

    assert link.order == 5
    result = await db_session.execute(select(func.count(TemplateQuestion.id)))
    assert result.scalar_one() == 1


@pytest.mark.asyncio
async def test_link_without_order_goes_last(db_session, acme):
    first = await _question(db_session, acme.id, "A")
    second = await _question(db_session, acme.id, "B")
    template = await _template(db_session, acme.id)
    await _link(db_session, template, first, 4)
    link = await _link(db_session, template, second, None)
    assert link.order == 5


@pytest.mark.asyncio
async def test_publish_is_idempotent(db_session, acme):
    template = await _template(db_session, acme.id)
    assert template.status == "draft"

    published = await survey_service.publish_template_service(db_session, template.id, acme.id)
    first_published_at = published.published_at
    assert published.status == "active"
    assert first_published_at is not None

    again = await survey_service.publish_template_service(db_session, template.id, acme.id)
    assert again.published_at == first_published_at
    assert again.status == "active"


@pytest.mark.asyncio
async def test_employees_only_see_published_templates(db_session, acme, two_companies):
    employee = two_companies["acme_employee"]
    draft = await _template(db_session, acme.id, "Draft")
    live = await _template(db_session, acme.id, "Live")
    await survey_service.publish_template_service(db_session, live.id, acme.id)

    visible = await survey_service.list_templates_service(db_session, acme.id, employee)
    assert [t.title for t in visible] == ["Live"]
    with pytest.raises(NotFoundError):
        await survey_service.get_template_service(db_session, draft.id, acme.id, employee)

    everything = await survey_service.list_templates_service(db_session, acme.id, two_companies["acme_admin"])
    assert {t.title for t in everything} == {"Draft", "Live"}


@pytest.mark.asyncio
async def test_templates_are_isolated_per_company(db_session, acme, two_companies):
    template = await _template(db_session, acme.id)
    globex = two_companies["globex"]

    assert await survey_service.list_templates_service(db_session, globex.id, two_companies["globex_admin"]) == []
    with pytest.raises(NotFoundError):
        await survey_service.get_template_service(db_session, template.id, globex.id)


@pytest.mark.asyncio
async def test_submit_rejects_missing_required_answers_without_writing(db_session, acme, two_companies):
    employee = two_companies["acme_employee"]
    required = await _question(db_session, acme.id, "How satisfied are you with your medical plan?", required=True)
    optional = await _question(db_session, acme.id, "Anything else?")
    template = await _template(db_session, acme.id)
    await _link(db_session, template, required, 1)
    await _link(db_session, template, optional, 2)
    await survey_service.publish_template_service(db_session, template.id, acme.id)

    submission = survey_schema.SurveyResponseCreate(
        template_id=template.id,
        responses=[
            survey_schema.SurveyAnswer(question_id=required.id, response="   "),
            survey_schema.SurveyAnswer(question_id=optional.id, response="All good"),
        ],
    )
    with pytest.raises(ValidationError) as exc_info:
        await survey_service.submit_response_service(db_session, acme.id, employee, submission)

    assert exc_info.value.detail == "Missing required fields"
    assert exc_info.value.details == {"missingQuestions": ["How satisfied are you with your medical plan?"]}
    assert await _response_count(db_session) == 0


@pytest.mark.asyncio
async def test_inactive_required_question_is_not_enforced(db_session, acme, two_companies):
    retired = await _question(db_session, acme.id, "Retired question", required=True, active=False)
    template = await _template(db_session, acme.id)
    await _link(db_session, template, retired, 1)
    await survey_service.publish_template_service(db_session, template.id, acme.id)

    response = await survey_service.submit_response_service(
        db_session, acme.id, two_companies["acme_employee"],
        survey_schema.SurveyResponseCreate(template_id=template.id, responses=[]),
    )
    assert response.id is not None


@pytest.mark.asyncio
async def test_submit_stores_answers_with_question_details(db_session, acme, two_companies):
    employee = two_companies["acme_employee"]
    rating = await _question(db_session, acme.id, "Rate your benefits", question_type="scale",
                             required=True, options=["1", "2", "3", "4", "5"])
    template = await _template(db_session, acme.id)
    await _link(db_session, template, rating, 1)
    await survey_service.publish_template_service(db_session, template.id, acme.id)

    response = await survey_service.submit_response_service(
        db_session, acme.id, employee,
        survey_schema.SurveyResponseCreate.model_validate({
            "templateId": template.id,
            "responses": [{"questionId": rating.id, "response": 4}],
        }),
    )

    assert response.user_id == employee.id
    assert response.responses == [{
        "questionId": rating.id,
        "questionText": "Rate your benefits",
        "questionType": "scale",
        "response": "4",
    }]


@pytest.mark.asyncio
async def test_submit_to_unpublished_template(db_session, acme, two_companies):
    template = await _template(db_session, acme.id)
    with pytest.raises(ValidationError):
        await survey_service.submit_response_service(
            db_session, acme.id, two_companies["acme_employee"],
            survey_schema.SurveyResponseCreate(template_id=template.id, responses=[]),
        )
    assert await _response_count(db_session) == 0


@pytest.mark.asyncio
async def test_duplicate_responses_follow_configuration(db_session, acme, two_companies):
    employee = two_companies["acme_employee"]
    template = await _template(db_session, acme.id)
    await survey_service.publish_template_service(db_session, template.id, acme.id)
    submission = survey_schema.SurveyResponseCreate(template_id=template.id, responses=[])

    await survey_service.submit_response_service(db_session, acme.id, employee, submission)
    await survey_service.submit_response_service(db_session, acme.id, employee, submission)
    assert await _response_count(db_session) == 2

    with patch.object(settings, "ALLOW_MULTIPLE_SURVEY_RESPONSES", False):
        with pytest.raises(ConflictError):
            await survey_service.submit_response_service(db_session, acme.id, employee, submission)
    assert await _response_count(db_session) == 2


@pytest.mark.asyncio
async def test_employees_only_list_their_own_responses(db_session, acme, two_companies):
    template = await _template(db_session, acme.id)
    await survey_service.publish_template_service(db_session, template.id, acme.id)
    submission = survey_schema.SurveyResponseCreate(template_id=template.id, responses=[])
    await survey_service.submit_response_service(db_session, acme.id, two_companies["acme_employee"], submission)
    await survey_service.submit_response_service(db_session, acme.id, two_companies["acme_admin"], submission)

    own = await survey_service.list_responses_service(db_session, acme.id, two_companies["acme_employee"])
    everything = await survey_service.list_responses_service(db_session, acme.id, two_companies["acme_admin"], template.id)
    assert [r.user_id for r in own] == [two_companies["acme_employee"].id]
    assert len(everything) == 2


@pytest.mark.asyncio
async def test_template_results_tally(db_session, acme, two_companies):
    plans = await _question(db_session, acme.id, "Which plans do you use?", question_type="checkbox",
                            options=["Medical", "Dental", "Vision"])
    rating = await _question(db_session, acme.id, "Rate your benefits", question_type="scale",
                             options=["1", "2", "3", "4", "5"])
    template = await _template(db_session, acme.id)
    await _link(db_session, template, plans, 1)
    await _link(db_session, template, rating, 2)
    await survey_service.publish_template_service(db_session, template.id, acme.id)

    for user_key, chosen, score in (("acme_employee", ["Medical", "Dental"], "4"), ("acme_admin", ["Medical"], "2")):
        await survey_service.submit_response_service(
            db_session, acme.id, two_companies[user_key],
            survey_schema.SurveyResponseCreate(template_id=template.id, responses=[
                survey_schema.SurveyAnswer(question_id=plans.id, response=chosen),
                survey_schema.SurveyAnswer(question_id=rating.id, response=score),
            ]),
        )

    results = await survey_service.get_template_results_service(db_session, template.id, acme.id)

    assert results.total_responses == 2
    plan_tally, rating_tally = results.questions
    assert plan_tally.answered == 2
    assert plan_tally.option_counts == {"Medical": 2, "Dental": 1, "Vision": 0}
    assert rating_tally.average == 3.0


@pytest.mark.asyncio
async def test_deleting_question_removes_it_from_templates(db_session, acme, two_companies):
    question = await _question(db_session, acme.id, "Soon gone")
    template = await _template(db_session, acme.id)
    await _link(db_session, template, question, 1)

    await survey_service.delete_question_service(db_session, question.id, acme.id)

    rows = await survey_service.get_template_questions_service(db_session, template.id, acme.id, two_companies["acme_admin"])
    assert rows == []
    result = await db_session.execute(select(func.count(TemplateQuestion.id)))
    assert result.scalar_one() == 0


@pytest.mark.asyncio
async def test_remove_unlinked_question(db_session, acme):
    question = await _question(db_session, acme.id, "Never linked")
    template = await _template(db_session, acme.id)
    with pytest.raises(NotFoundError):
        await survey_service.remove_question_from_template_service(db_session, template.id, question.id, acme.id)
