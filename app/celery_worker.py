# app/celery_worker.py
from celery import Celery

from app.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "app.services.notification_service",
)

celery_app.conf.timezone = "UTC"
# eager: task wykonuje sie od razu w procesie wywolujacym (testy, dev bez brokera)
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
celery_app.conf.task_ignore_result = True
