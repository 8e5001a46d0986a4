import asyncio
import pytest
import pytest_asyncio
from datetime import datetime
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from unittest.mock import AsyncMock, patch

from benefits_portal.core.exceptions import NotFoundError, ValidationError
from benefits_portal.models.base import Base
from benefits_portal.models.calendar_model import color_for_event_type
from benefits_portal.models.chat_message_model import ChatMessage
from benefits_portal.models.company_model import Company, CompanySettings
from benefits_portal.models.document_model import Documents
from benefits_portal.models.notification_model import Notification
from benefits_portal.models.user_model import Users
from benefits_portal.modules.ai.ai_text_service import AITextService
from benefits_portal.modules.ai.conversation_cache import InMemoryConversationCache
from benefits_portal.modules.calendar import service as calendar_service
from benefits_portal.modules.chat import service as chat_service
from benefits_portal.modules.notifications import service as notification_service
from benefits_portal.modules.website import service as website_service
from benefits_portal.schemas import calendar_schema, chat_schema, notification_schema


# --- Calendar ---

def test_event_type_colors():
    assert color_for_event_type("survey") == "green"
    assert color_for_event_type("Deadline") == "amber"
    assert color_for_event_type("holiday") == "slate"
    assert color_for_event_type(None) == "slate"


@pytest.mark.asyncio
async def test_event_color_follows_type(db_session, two_companies):
    acme = two_companies["acme"]
    event = await calendar_service.create_event_service(db_session, acme.id, calendar_schema.CalendarEventCreate(
        title="Benefits survey closes", event_date=datetime(2026, 12, 1), event_type="survey",
    ))
    assert event.color == "green"

    event = await calendar_service.update_event_service(db_session, event.id, acme.id,
                                                        calendar_schema.CalendarEventUpdate(event_type="meeting"))
    assert event.color == "purple"

    event = await calendar_service.update_event_service(db_session, event.id, acme.id,
                                                        calendar_schema.CalendarEventUpdate(color="red"))
    assert event.color == "red"
    assert event.event_type == "meeting"


@pytest.mark.asyncio
async def test_events_are_filtered_by_range_and_company(db_session, two_companies):
    acme, globex = two_companies["acme"], two_companies["globex"]
    for day in (1, 15, 28):
        await calendar_service.create_event_service(db_session, acme.id, calendar_schema.CalendarEventCreate(
            title=f"Event {day}", event_date=datetime(2026, 11, day), event_type="email",
        ))
    await calendar_service.create_event_service(db_session, globex.id, calendar_schema.CalendarEventCreate(
        title="Globex event", event_date=datetime(2026, 11, 15), event_type="email",
    ))

    events = await calendar_service.get_events_service(db_session, acme.id, start=datetime(2026, 11, 10), end=datetime(2026, 11, 30))
    assert [e.title for e in events] == ["Event 15", "Event 28"]

    with pytest.raises(ValidationError):
        await calendar_service.get_events_service(db_session, acme.id, start=datetime(2026, 12, 1), end=datetime(2026, 11, 1))

    globex_event = (await calendar_service.get_events_service(db_session, globex.id))[0]
    with pytest.raises(NotFoundError):
        await calendar_service.delete_event_service(db_session, globex_event.id, acme.id)


# --- Notifications ---

@pytest.mark.asyncio
async def test_notification_visibility(db_session, two_companies):
    acme = two_companies["acme"]
    employee, admin = two_companies["acme_employee"], two_companies["acme_admin"]

    await notification_service.create_notification_service(db_session, acme.id, notification_schema.NotificationCreate(
        title="Open enrollment", message="Starts Monday",
    ))
    await notification_service.create_notification_service(db_session, acme.id, notification_schema.NotificationCreate(
        title="Reminder", message="Finish your survey", user_id=employee.id,
    ))
    await notification_service.create_notification_service(db_session, acme.id, notification_schema.NotificationCreate(
        title="Admin only", message="Review results", user_id=admin.id,
    ))
    await notification_service.create_notification_service(db_session, two_companies["globex"].id, notification_schema.NotificationCreate(
        title="Globex news", message="Not for Acme",
    ))

    visible = await notification_service.get_user_notifications_service(db_session, acme.id, employee)
    assert {n.title for n in visible} == {"Open enrollment", "Reminder"}
    assert (await notification_service.count_unread_service(db_session, acme.id, employee)).count == 2

    company_wide = await notification_service.get_company_notifications_service(db_session, acme.id)
    assert len(company_wide) == 3


@pytest.mark.asyncio
async def test_global_flag_follows_recipient(db_session, two_companies):
    acme = two_companies["acme"]
    broadcast = await notification_service.create_notification_service(db_session, acme.id, notification_schema.NotificationCreate(
        title="All hands", message="Friday",
    ))
    direct = await notification_service.create_notification_service(db_session, acme.id, notification_schema.NotificationCreate(
        title="Direct", message="Hi", user_id=two_companies["acme_employee"].id,
    ))
    assert broadcast.is_global is True
    assert direct.is_global is False


@pytest.mark.asyncio
async def test_notification_recipient_must_belong_to_company(db_session, two_companies):
    with pytest.raises(ValidationError):
        await notification_service.create_notification_service(db_session, two_companies["acme"].id, notification_schema.NotificationCreate(
            title="Wrong tenant", message="Hi", user_id=two_companies["globex_employee"].id,
        ))


@pytest.mark.asyncio
async def test_mark_notifications_read(db_session, two_companies):
    acme = two_companies["acme"]
    employee, admin = two_companies["acme_employee"], two_companies["acme_admin"]
    mine = await notification_service.create_notification_service(db_session, acme.id, notification_schema.NotificationCreate(
        title="Mine", message="Hi", user_id=employee.id,
    ))
    others = await notification_service.create_notification_service(db_session, acme.id, notification_schema.NotificationCreate(
        title="Not mine", message="Hi", user_id=admin.id,
    ))
    await notification_service.create_notification_service(db_session, acme.id, notification_schema.NotificationCreate(
        title="Everyone", message="Hi",
    ))

    marked = await notification_service.mark_as_read_service(db_session, mine.id, acme.id, employee)
    assert marked.is_read is True
    with pytest.raises(NotFoundError):
        await notification_service.mark_as_read_service(db_session, others.id, acme.id, employee)

    updated = await notification_service.mark_all_as_read_service(db_session, acme.id, employee)
    assert updated == 1
    assert (await notification_service.count_unread_service(db_session, acme.id, employee)).count == 0
    assert (await notification_service.count_unread_service(db_session, acme.id, admin)).count == 1


# --- Chat ---

@pytest.mark.asyncio
async def test_chat_stores_both_messages_and_returns_log(db_session, two_companies):
    acme, employee = two_companies["acme"], two_companies["acme_employee"]
    db_session.add_all([
        CompanySettings(company_id=acme.id, name="Acme Corp", ai_assistant_name="Benny"),
        Documents(company_id=acme.id, file_name="a.txt", original_name="a.txt", mime_type="text/plain",
                  size=1, content="Dental covers two cleanings.", is_public=True),
        Documents(company_id=acme.id, file_name="b.txt", original_name="b.txt", mime_type="text/plain",
                  size=1, content="Executive bonus plan.", is_public=False),
    ])
    await db_session.commit()

    answer = {"role": "assistant", "content": "Two cleanings a year."}
    with patch('benefits_portal.modules.chat.service.ai_text_service.chat_answer', return_value=answer) as mock_answer:
        messages = await chat_service.send_chat_message_service(
            db_session, acme.id, employee, chat_schema.ChatMessageCreate(content="Is dental covered?"),
        )

    assert [(m.role, m.content) for m in messages] == [
        ("user", "Is dental covered?"),
        ("assistant", "Two cleanings a year."),
    ]
    documents, question = mock_answer.await_args.args
    assert documents == ["Dental covers two cleanings."]
    assert question == "Is dental covered?"
    assert mock_answer.await_args.kwargs["company_name"] == "Acme Corp"
    assert mock_answer.await_args.kwargs["assistant_name"] == "Benny"


@pytest.mark.asyncio
async def test_chat_logs_are_per_user(db_session, two_companies):
    acme = two_companies["acme"]
    answer = {"role": "assistant", "content": "Sure."}
    with patch('benefits_portal.modules.chat.service.ai_text_service.chat_answer', return_value=answer):
        await chat_service.send_chat_message_service(db_session, acme.id, two_companies["acme_employee"],
                                                     chat_schema.ChatMessageCreate(content="Hello"))
        await chat_service.send_chat_message_service(db_session, acme.id, two_companies["acme_admin"],
                                                     chat_schema.ChatMessageCreate(content="Hi there"))

    employee_log = await chat_service.get_chat_messages_service(db_session, acme.id, two_companies["acme_employee"])
    assert [m.content for m in employee_log] == ["Hello", "Sure."]
    result = await db_session.execute(select(func.count(ChatMessage.id)))
    assert result.scalar_one() == 4


@pytest_asyncio.fixture
async def file_session_maker(tmp_path):
    """A file-backed database, so concurrent requests can each hold their own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest.mark.asyncio
async def test_concurrent_chat_messages_from_one_user(file_session_maker):
    async with file_session_maker() as db:
        acme = Company(name="Acme", slug="acme")
        db.add(acme)
        await db.flush()
        employee = Users(username="acme_employee", password="x", role="user", company_id=acme.id, is_active=True)
        db.add(employee)
        await db.commit()

    cache = InMemoryConversationCache(max_messages=10)
    for turn in range(4):
        await cache.append(acme.id, employee.id,
                           {"role": "user", "content": f"Earlier question {turn}"},
                           {"role": "assistant", "content": f"Earlier answer {turn}"})
    assistant = AITextService(conversation_cache=cache)

    async def reply(messages, **kwargs):
        await asyncio.sleep(0)
        return f"Answer to: {messages[-1]['content']}"

    async def ask(question):
        async with file_session_maker() as db:
            return await chat_service.send_chat_message_service(
                db, acme.id, employee, chat_schema.ChatMessageCreate(content=question),
            )

    with patch.object(assistant, "_complete", AsyncMock(side_effect=reply)), \
         patch('benefits_portal.modules.chat.service.ai_text_service', assistant):
        await asyncio.gather(ask("Is dental covered?"), ask("When is open enrollment?"))

    async with file_session_maker() as db:
        rows = (await db.execute(select(ChatMessage).order_by(ChatMessage.id))).scalars().all()
    assert len(rows) == 4
    assert sorted(m.role for m in rows) == ["assistant", "assistant", "user", "user"]
    assert {m.content for m in rows if m.role == "assistant"} == {
        "Answer to: Is dental covered?",
        "Answer to: When is open enrollment?",
    }

    window = await cache.get_window(acme.id, employee.id)
    assert len(window) == 10
    assert window[-1]["role"] == "assistant"
    assert {m["content"] for m in window[-4:]} == {
        "Is dental covered?", "Answer to: Is dental covered?",
        "When is open enrollment?", "Answer to: When is open enrollment?",
    }


# --- Website content ---

@pytest.mark.asyncio
async def test_website_content_uses_company_settings(db_session, two_companies):
    acme = two_companies["acme"]
    db_session.add(CompanySettings(company_id=acme.id, name="Acme Corp", website_prompt="We are a 200 person company."))
    await db_session.commit()

    with patch('benefits_portal.modules.website.service.ai_text_service.generate_website_content',
               return_value={"sections": []}) as mock_generate:
        await website_service.get_website_content_service(db_session, acme.id)
    mock_generate.assert_awaited_once_with("We are a 200 person company.", "Acme Corp")

    with patch('benefits_portal.modules.website.service.ai_text_service.generate_benefit_detail',
               return_value={"id": "dental"}) as mock_detail:
        await website_service.get_benefit_detail_service(db_session, acme.id, "Dental")
    mock_detail.assert_awaited_once_with("dental", "Acme Corp", "We are a 200 person company.")


@pytest.mark.asyncio
async def test_website_content_without_settings_uses_company_name(db_session, two_companies):
    with patch('benefits_portal.modules.website.service.ai_text_service.generate_website_content',
               return_value={"sections": []}) as mock_generate:
        await website_service.get_website_content_service(db_session, two_companies["globex"].id)
    mock_generate.assert_awaited_once_with(None, "Globex")
