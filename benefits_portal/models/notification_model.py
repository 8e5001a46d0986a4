from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index
from benefits_portal.models.base import Base


class Notification(Base):
    __tablename__ = "Notifications"
    __table_args__ = (
        Index("ix_notifications_company_user", "company_id", "user_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("Company.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("Users.id"), nullable=True)
    is_global = Column(Boolean, default=False)
    is_read = Column(Boolean, default=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, default="info")
    created_at = Column(DateTime, default=datetime.utcnow)
