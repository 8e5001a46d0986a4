from .company_model import Company, CompanySettings
from .user_model import Users
from .document_model import Documents
from .survey_model import SurveyTemplate, SurveyQuestion, TemplateQuestion, SurveyResponse
from .calendar_model import CalendarEvent
from .chat_message_model import ChatMessage
from .notification_model import Notification

__all__ = [
    "Company",
    "CompanySettings",
    "Users",
    "Documents",
    "SurveyTemplate",
    "SurveyQuestion",
    "TemplateQuestion",
    "SurveyResponse",
    "CalendarEvent",
    "ChatMessage",
    "Notification",
]
