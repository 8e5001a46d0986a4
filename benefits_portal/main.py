from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from benefits_portal.modules.auth.api import router as auth_router
from benefits_portal.modules.company.api import router as company_router, settings_router as company_settings_router
from benefits_portal.modules.users.api import router as users_router
from benefits_portal.modules.documents.api import router as documents_router
from benefits_portal.modules.survey.api import responses_router, templates_router, questions_router
from benefits_portal.modules.calendar.api import router as calendar_router
from benefits_portal.modules.notifications.api import router as notifications_router, company_router as company_notifications_router
from benefits_portal.modules.chat.api import router as chat_router
from benefits_portal.modules.website.api import router as website_router
from benefits_portal.modules.media.api import router as media_router
from benefits_portal.core.database import db_manager
from benefits_portal.core.global_error_handler import register_global_exception_handlers
from benefits_portal.core.config import settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-tenant employee benefits portal: documents, surveys, calendar, notifications and an AI assistant.",
    version="1.0.0"
)

# Register global exception handlers
register_global_exception_handlers(app)


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on shutdown."""
    await db_manager.close()
    logger.info("Database engine closed.")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(company_router, prefix="/api")
app.include_router(company_settings_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(responses_router, prefix="/api")
app.include_router(templates_router, prefix="/api")
app.include_router(questions_router, prefix="/api")
app.include_router(calendar_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")
app.include_router(company_notifications_router, prefix="/api")
app.include_router(chat_router, prefix="/api")
app.include_router(website_router, prefix="/api")
app.include_router(media_router, prefix="/api")

@app.get("/api/")
async def root():
    return {"message": f"{settings.APP_NAME} API is running"}

@app.get("/api/health")
async def health_check():
    return {"status": "healthy"}
