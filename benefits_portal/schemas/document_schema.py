from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from benefits_portal.schemas.base_schema import CamelModel


class DocumentCreate(BaseModel):
    """Schema used for creating a new document record in the database."""
    company_id: int
    file_name: str
    original_name: str
    mime_type: str
    size: int
    content: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_public: bool = True
    uploaded_by: Optional[int] = None


class DocumentUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_public: Optional[bool] = None


class Document(CamelModel):
    """Main schema for a document, used for API responses."""
    id: int
    company_id: int
    file_name: str
    original_name: str
    mime_type: str
    size: int
    content: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_public: bool = True
    uploaded_by: Optional[int] = None
    uploaded_at: Optional[datetime] = None


class DocumentUploadError(CamelModel):
    """A file from a multi-file upload that was not stored."""
    original_name: str
    error: str
