# order_engine/celery_worker.py
from celery import Celery

from order_engine.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "orders",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "order_engine.services.notification_service",
)

celery_app.conf.timezone = "UTC"
