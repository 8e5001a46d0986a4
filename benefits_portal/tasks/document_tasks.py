import asyncio
import logging

from benefits_portal.core.celery_app import celery_app
from benefits_portal.core.database import DatabaseManager
from benefits_portal.core.exceptions import NotFoundError
from benefits_portal.core.uow import UnitOfWork
from benefits_portal.modules.documents.extraction import extract_document_content
from benefits_portal.repository.document_repository import document_repository

logger = logging.getLogger(__name__)


async def _run_extraction(document_id: int) -> None:
    # Each task runs in a fresh event loop, so it gets its own engine.
    local_db_manager = DatabaseManager()
    uow = UnitOfWork(local_db_manager.async_session_maker)
    try:
        async with uow() as db:
            doc = await document_repository.get_document(db, document_id)
            if doc is None:
                logger.warning(f"[Extraction Task] Document {document_id} not found.")
                return
            if doc.has_usable_content:
                logger.info(f"[Extraction Task] Document {document_id} already has content, skipping.")
                return

            logger.info(f"[Extraction Task] Starting extraction for '{doc.original_name}' (ID: {document_id})")
            await extract_document_content(db, doc)
    finally:
        await local_db_manager.close()


@celery_app.task(
    name="tasks.extract_document_content",
    acks_late=True,
    bind=True,
    autoretry_for=(Exception,),
    dont_autoretry_for=(NotFoundError,),
    retry_backoff=True,
    max_retries=3,
    retry_jitter=True
)
def extract_document_content_task(self, document_id: int):
    """Celery task that replaces a document's pending placeholder with a summary of its text."""
    asyncio.run(_run_extraction(document_id))
    logger.info(f"[Celery Task] Extraction task completed for document ID: {document_id}")
