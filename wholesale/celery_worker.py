# wholesale/celery_worker.py
from celery import Celery

from wholesale.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "wholesale",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAZNE: explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "wholesale.services.notification_service",
)

celery_app.conf.timezone = "UTC"