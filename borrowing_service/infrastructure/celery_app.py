"""Celery application factory following Factory Pattern."""
from celery import Celery
from borrowing_service.config.settings import Config


def create_celery_app(app=None) -> Celery:
    """
    Create and configure Celery application.

    Args:
        app: Optional Flask app instance

    Returns:
        Configured Celery instance
    """
    celery = Celery(
        "borrowing_service",
        broker=Config.CELERY_BROKER_URL,
        backend=Config.CELERY_RESULT_BACKEND,
        include=["borrowing_service.tasks.notification_tasks"]
    )

    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_time_limit=60,
        task_soft_time_limit=45,
        worker_prefetch_multiplier=1,
        worker_max_tasks_per_child=1000,
        task_acks_late=True,
        task_reject_on_worker_lost=True,

        # Notifications are fire-and-forget; nothing reads the results
        task_ignore_result=True,

        worker_log_format='[%(asctime)s: %(levelname)s/%(processName)s] %(message)s',
        worker_task_log_format='[%(asctime)s: %(levelname)s/%(processName)s][%(task_name)s(%(task_id)s)] %(message)s',
        worker_hijack_root_logger=False,
    )

    if app:
        celery.conf.update(app.config)

    return celery


# Create default Celery instance
celery_app = create_celery_app()
