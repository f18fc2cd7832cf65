"""Celery application configuration."""
from datetime import timedelta

from celery import Celery
from celery.schedules import crontab

from config import get_settings

settings = get_settings()

celery_app = Celery(
    "demurrage_billing",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["tasks.celery_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.business_timezone,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=10 * 60,  # 10 minutes
    worker_prefetch_multiplier=4,
    worker_max_tasks_per_child=1000,
)

# Periodic tasks schedule
celery_app.conf.beat_schedule = {
    # Recompute every billing item
    "evaluate-demurrage": {
        "task": "tasks.celery_tasks.evaluate_demurrage",
        "schedule": timedelta(minutes=settings.evaluation_interval_minutes),
    },

    # Morning digest of overdue and at-risk containers
    "daily-demurrage-report": {
        "task": "tasks.celery_tasks.report_demurrage_exposure",
        "schedule": crontab(hour="8", minute="0"),
    },
}


if __name__ == "__main__":
    celery_app.start()
