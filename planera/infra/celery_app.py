"""
Planera Backend - Celery Application Configuration
Redis broker with a dedicated queue for trip generation
"""

from celery import Celery
from celery.signals import worker_process_init
from kombu import Exchange, Queue

from planera.core.config import settings
from planera.core.logging import configure_logging


def create_celery_app() -> Celery:
    """Create and configure Celery application."""

    celery = Celery(
        "planera",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=[
            "planera.domains.trip.tasks",
        ],
    )

    # Task serialization
    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
    )

    # Task execution settings
    celery.conf.update(
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        task_time_limit=900,  # 15 minutes hard limit
        task_soft_time_limit=840,
        task_track_started=True,
    )

    # Worker settings
    celery.conf.update(
        worker_prefetch_multiplier=1,
        worker_max_tasks_per_child=500,
        worker_hijack_root_logger=False,
    )

    celery.conf.update(result_expires=86400)  # 24 hours

    # Define task queues
    celery.conf.task_queues = (
        Queue("default", Exchange("default"), routing_key="default"),
        Queue("trips", Exchange("trips"), routing_key="trips.#"),
    )

    celery.conf.task_default_queue = "default"
    celery.conf.task_default_exchange = "default"
    celery.conf.task_default_routing_key = "default"

    # Task routing
    celery.conf.task_routes = {
        "planera.domains.trip.tasks.*": {"queue": "trips"},
    }

    # Generation writes a terminal state itself, so a failed run is never retried
    celery.conf.task_annotations = {
        "planera.domains.trip.tasks.generate_trip_task": {
            "rate_limit": "30/m",
            "max_retries": 0,
        },
    }

    return celery


@worker_process_init.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging()


# Create the Celery application instance
celery_app = create_celery_app()
