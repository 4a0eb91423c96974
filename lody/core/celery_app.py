from celery import Celery
from lody.core.config import settings

# Create Celery app
celery_app = Celery(
    "lody",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["lody.tasks.notification_tasks"]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    broker_connection_retry_on_startup=True,
    task_routes={
        "lody.tasks.notification_tasks.*": {"queue": "priority"},
    },
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)

if __name__ == "__main__":
    celery_app.start()
