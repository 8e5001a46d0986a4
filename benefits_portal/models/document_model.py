from sqlalchemy import Column, Integer, String, ForeignKey, Text, Boolean, DateTime, Index
from datetime import datetime
from benefits_portal.models.base import Base

# Content of a document whose text has not been extracted yet starts with this.
PENDING_CONTENT_PREFIX = "[Document pending extraction:"


def pending_content_for(original_name: str) -> str:
    return f"{PENDING_CONTENT_PREFIX} {original_name}]"


def has_usable_content(content) -> bool:
    return bool(content and content.strip()) and not content.startswith(PENDING_CONTENT_PREFIX)


class Documents(Base):
    __tablename__ = "Documents"
    __table_args__ = (
        Index("ix_documents_company_public", "company_id", "is_public"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("Company.id"), nullable=False)
    file_name = Column(String(255), nullable=False, unique=True)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)
    content = Column(Text, nullable=True)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    is_public = Column(Boolean, default=True)
    uploaded_by = Column(Integer, ForeignKey("Users.id"), nullable=True)
    uploaded_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    @property
    def has_usable_content(self) -> bool:
        return has_usable_content(self.content)
