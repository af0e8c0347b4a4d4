from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from hostellite.core.config import settings
from hostellite.core.log import setup_logging


celery = Celery(
    "hostellite",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["hostellite.tasks.jobs"],
)


@celery_setup_logging.connect
def on_setup_logging(**kwargs):
    setup_logging()


celery.conf.beat_schedule = {
    "reconcile-confirmations": {
        "task": "hostellite.tasks.jobs.reconcile_confirmations",
        "schedule": settings.RECONCILE_INTERVAL_SECONDS,
        "kwargs": {"limit": 50},
    },
}
