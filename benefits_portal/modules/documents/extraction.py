import asyncio
import logging
import os

import fitz  # PyMuPDF
from sqlalchemy.ext.asyncio import AsyncSession

from benefits_portal.core.config import settings
from benefits_portal.core.exceptions import NotFoundError
from benefits_portal.models.document_model import Documents
from benefits_portal.modules.ai.ai_text_service import ai_text_service
from benefits_portal.repository.document_repository import document_repository
from benefits_portal.utils.file_manager import stored_file_path

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPE = "text/plain"


def extract_text_from_pdf(file_bytes: bytes) -> str:
    with fitz.open(stream=file_bytes, filetype="pdf") as pdf:
        pages = [page.get_text().strip() for page in pdf]
    return "\n\n".join(page for page in pages if page)


def decode_text(file_bytes: bytes) -> str:
    return file_bytes.decode("utf-8", errors="replace")


async def extract_document_content(db: AsyncSession, document: Documents) -> Documents:
    """
    Reads the stored file, summarizes its text and replaces the document content.
    PDFs and plain text are supported; other types keep their placeholder.
    """
    if document.mime_type not in (PDF_MIME_TYPE, TEXT_MIME_TYPE):
        logger.info(f"[Extraction] No extractor for {document.mime_type} (document {document.id})")
        return document

    path = stored_file_path(document.file_name, settings.UPLOAD_DIR)
    if not os.path.exists(path):
        raise NotFoundError("Stored file")

    with open(path, "rb") as f:
        file_bytes = f.read()

    if document.mime_type == PDF_MIME_TYPE:
        text = await asyncio.to_thread(extract_text_from_pdf, file_bytes)
    else:
        text = decode_text(file_bytes)

    if not text.strip():
        logger.warning(f"[Extraction] No text found in document {document.id} ({document.original_name})")
        return document

    logger.info(f"[Extraction] Extracted {len(text)} characters from document {document.id}")
    # A ProviderError leaves the placeholder in place for the next attempt.
    summary = await ai_text_service.summarize(text, raise_errors=True)
    return await document_repository.update_document_content(db, document, summary)
