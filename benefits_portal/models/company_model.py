from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import relationship
from benefits_portal.models.base import Base

DEFAULT_PRIMARY_COLOR = "#0f766e"
DEFAULT_SECONDARY_COLOR = "#0369a1"
DEFAULT_ACCENT_COLOR = "#7c3aed"


class Company(Base):
    __tablename__ = "Company"
    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    domain = Column(String(255), nullable=True)
    address = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    users = relationship("Users", back_populates="company")
    settings = relationship("CompanySettings", back_populates="company", uselist=False)


class CompanySettings(Base):
    __tablename__ = "Company_settings"
    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("Company.id"), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    logo = Column(Text, nullable=True)
    primary_color = Column(String(20), default=DEFAULT_PRIMARY_COLOR)
    secondary_color = Column(String(20), default=DEFAULT_SECONDARY_COLOR)
    accent_color = Column(String(20), default=DEFAULT_ACCENT_COLOR)
    website = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    address = Column(String(255), nullable=True)
    ai_assistant_name = Column(String(100), nullable=True)
    survey_generation_prompt = Column(Text, nullable=True)
    website_prompt = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = relationship("Company", back_populates="settings")
