from celery import Celery
from benefits_portal.core.config import settings

# Initialize Celery
celery_app = Celery(
    "tasks",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "benefits_portal.tasks.document_tasks",
    ]
)

celery_app.conf.update(
    task_track_started=True,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
)
