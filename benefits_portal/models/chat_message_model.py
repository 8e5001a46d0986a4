from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    Text,
    DateTime,
    Index,
)
from datetime import datetime
from benefits_portal.models.base import Base


class ChatMessage(Base):
    __tablename__ = "Chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_company_user", "company_id", "user_id"),
    )
    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("Company.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("Users.id"), nullable=False)
    role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)
