from fastapi import APIRouter, UploadFile, File, Depends, status, Form
from typing import List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession

from benefits_portal.core.dependencies import get_db, get_current_user, get_current_admin, resolve_company_scope
from benefits_portal.models.user_model import Users
from benefits_portal.schemas import document_schema
from benefits_portal.schemas.base_schema import MessageResponse
from benefits_portal.modules.documents import service as document_service

router = APIRouter(
    prefix="/documents",
    tags=["Documents"],
)


@router.post(
    "",
    response_model=List[Union[document_schema.Document, document_schema.DocumentUploadError]],
    status_code=status.HTTP_201_CREATED,
)
async def upload_documents(
    documents: List[UploadFile] = File(...),
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    is_public: bool = Form(default=True, alias="isPublic"),
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Accepts one or more files under the 'documents' field. Text files are summarized
    right away; PDFs get a pending placeholder and are extracted in the background.
    """
    return await document_service.ingest_documents_service(
        db=db,
        company_id=company_id,
        current_user=current_user,
        files=documents,
        title=title,
        description=description,
        category=category,
        is_public=is_public,
    )


@router.get("", response_model=List[document_schema.Document])
async def read_documents(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Employees only see public documents; admins see everything in the company."""
    return await document_service.list_documents_service(db, company_id, current_user)


@router.get("/{document_id}", response_model=document_schema.Document)
async def read_document(
    document_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await document_service.get_document_service(db, document_id, company_id, current_user)


@router.patch("/{document_id}", response_model=document_schema.Document)
async def update_document(
    document_id: int,
    document_in: document_schema.DocumentUpdate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await document_service.update_document_service(db, document_id, company_id, document_in)


@router.post("/{document_id}/extract", response_model=document_schema.Document)
async def extract_document(
    document_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """Runs text extraction and summarization now instead of waiting for the worker."""
    return await document_service.extract_document_service(db, document_id, company_id)


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await document_service.delete_document_service(db, document_id, company_id)
    return {"message": "Document deleted successfully"}
