from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from typing import List, Optional, Union
import logging

from benefits_portal.core.config import settings
from benefits_portal.core.exceptions import NotFoundError, ValidationError
from benefits_portal.models.document_model import Documents, pending_content_for
from benefits_portal.models.user_model import Users
from benefits_portal.modules.ai.ai_text_service import ai_text_service
from benefits_portal.modules.documents.extraction import (
    PDF_MIME_TYPE,
    TEXT_MIME_TYPE,
    decode_text,
    extract_document_content,
)
from benefits_portal.repository.document_repository import document_repository
from benefits_portal.schemas import document_schema
from benefits_portal.tasks.document_tasks import extract_document_content_task
from benefits_portal.utils.file_manager import delete_stored_file, save_file_bytes

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    PDF_MIME_TYPE,
    TEXT_MIME_TYPE,
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def resolve_title(title: Optional[str], original_name: str, index: int, total: int) -> str:
    """Shared titles get a ' (n)' suffix when several files are uploaded together."""
    if not title or not title.strip():
        return original_name
    if total > 1:
        return f"{title.strip()} ({index + 1})"
    return title.strip()


def _validate_upload(original_name: str, mime_type: str, size: int) -> None:
    if not original_name:
        raise ValidationError("No file name provided.")
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(f"Unsupported file type: {mime_type}")
    if size > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise ValidationError(f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB}MB limit")


def _queue_extraction(document_id: int) -> None:
    try:
        extract_document_content_task.delay(document_id)
    except Exception as e:
        # Upload still succeeds; extraction also runs on demand and during survey generation.
        logger.error(f"Could not queue extraction for document {document_id}: {e}")


async def ingest_documents_service(
    db: AsyncSession,
    company_id: int,
    current_user: Users,
    files: List[UploadFile],
    title: Optional[str] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
    is_public: bool = True,
) -> List[Union[Documents, document_schema.DocumentUploadError]]:
    """
    Stores each file, fills in its content (summary or pending placeholder) and records it.
    Every file succeeds or fails on its own; failures are returned alongside the documents.
    """
    results: List[Union[Documents, document_schema.DocumentUploadError]] = []
    rolled_back = False
    uploader_id = current_user.id
    for index, upload in enumerate(files):
        original_name = upload.filename or ""
        mime_type = upload.content_type or "application/octet-stream"
        stored_name = None
        try:
            file_bytes = await upload.read()
            _validate_upload(original_name, mime_type, len(file_bytes))
            stored_name = save_file_bytes(file_bytes, original_name, settings.UPLOAD_DIR)

            if mime_type == TEXT_MIME_TYPE:
                content = await ai_text_service.summarize(decode_text(file_bytes))
            else:
                content = pending_content_for(original_name)

            document = await document_repository.create_document(db, document_schema.DocumentCreate(
                company_id=company_id,
                file_name=stored_name,
                original_name=original_name,
                mime_type=mime_type,
                size=len(file_bytes),
                content=content,
                title=resolve_title(title, original_name, index, len(files)),
                description=description,
                category=category,
                is_public=is_public,
                uploaded_by=uploader_id,
            ))
        except ValidationError as e:
            logger.warning(f"Rejected upload '{original_name}': {e.detail}")
            results.append(document_schema.DocumentUploadError(original_name=original_name, error=e.detail))
            continue
        except Exception as e:
            logger.exception(f"Failed to ingest '{original_name}' for company {company_id}")
            await db.rollback()
            rolled_back = True
            if stored_name:
                delete_stored_file(stored_name, settings.UPLOAD_DIR)
            results.append(document_schema.DocumentUploadError(original_name=original_name, error=str(e)))
            continue

        logger.info(f"Document {document.id} '{document.title}' stored for company {company_id}")
        if mime_type == PDF_MIME_TYPE:
            _queue_extraction(document.id)
        results.append(document)

    if rolled_back:
        # A rollback expires everything loaded in the session, including earlier successes.
        for item in results:
            if isinstance(item, Documents):
                await db.refresh(item)
    return results


async def list_documents_service(db: AsyncSession, company_id: int, current_user: Users) -> List[Documents]:
    return await document_repository.get_documents_by_company(db, company_id, include_private=current_user.is_admin)


async def get_document_service(db: AsyncSession, document_id: int, company_id: int, current_user: Users) -> Documents:
    document = await document_repository.get_document_for_company(
        db, document_id, company_id, include_private=current_user.is_admin
    )
    if document is None:
        raise NotFoundError("Document")
    return document


async def update_document_service(db: AsyncSession, document_id: int, company_id: int, document_in: document_schema.DocumentUpdate) -> Documents:
    document = await document_repository.get_document_for_company(db, document_id, company_id)
    if document is None:
        raise NotFoundError("Document")
    return await document_repository.update_document(db, document, document_in)


async def extract_document_service(db: AsyncSession, document_id: int, company_id: int) -> Documents:
    document = await document_repository.get_document_for_company(db, document_id, company_id)
    if document is None:
        raise NotFoundError("Document")
    return await extract_document_content(db, document)


async def delete_document_service(db: AsyncSession, document_id: int, company_id: int) -> None:
    """Deletes the record first; a stored file that cannot be removed is only logged."""
    document = await document_repository.delete_document(db, document_id, company_id)
    if document is None:
        raise NotFoundError("Document")
    delete_stored_file(document.file_name, settings.UPLOAD_DIR)
