from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from heatservice.config import settings
from heatservice.core.logging import setup_logging

celery_app = Celery(
    "heatadvisor",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    task_track_started=True,
    result_expires=86400,
    include=["heatservice.worker.tasks"],
)


@celery_setup_logging.connect
def _configure_logging(**kwargs) -> None:
    setup_logging(json_format=settings.log_json, level=settings.log_level.upper())
