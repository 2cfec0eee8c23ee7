# Standard library imports
from datetime import timedelta
from typing import Any

# Third-party imports
from celery import Celery
from celery.signals import task_failure, task_prerun, task_retry, task_success

# Local application imports
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.settings import settings

celery_app = Celery(
    "samadhan",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["samadhan.tasks.analytics_tasks"],
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.CELERY_WORKER_CONCURRENCY,
    task_acks_late=True,  # Acknowledge tasks only after completion
    task_reject_on_worker_lost=True,
    task_track_started=True,
    worker_max_tasks_per_child=1000,
    task_default_retry_delay=60,
    task_max_retries=3,
    worker_log_format="[%(asctime)s: %(levelname)s/%(processName)s] [%(task_name)s(%(task_id)s)] %(message)s",
    worker_task_log_format="[%(asctime)s: %(levelname)s/%(processName)s] [%(task_name)s(%(task_id)s)] %(message)s",
    # RedBeat keeps the beat schedule in Redis
    beat_scheduler="redbeat.RedBeatScheduler",
    redbeat_redis_url=settings.CELERY_BROKER_URL,
    redbeat_key_prefix="redbeat",
    redbeat_lock_timeout=300,
)

celery_app.conf.beat_schedule = {
    "refresh-user-counters": {
        "task": "samadhan.tasks.analytics_tasks.refresh_user_counters_task",
        "schedule": timedelta(minutes=settings.USER_COUNTERS_REFRESH_MINUTES),
    },
}


@task_prerun.connect  # type: ignore[misc]
def setup_task_logger(task_id: str, task: Any, *args: Any, **kwargs: Any) -> None:  # noqa: ARG001
    task.request.logger = get_contextual_logger(task.name, task_id=task_id)


@task_retry.connect  # type: ignore[misc]
def task_retry_handler(
    sender: Any = None,
    request: Any = None,
    reason: str | None = None,
    **kwargs: Any,  # noqa: ARG001
) -> None:
    task_id = getattr(request, "id", None)
    logger = get_contextual_logger("celery.task.retry", task_id=task_id)
    logger.warning(f"Task {getattr(sender, 'name', sender)} is being retried. Reason: {reason}")


@task_failure.connect  # type: ignore[misc]
def task_failure_handler(
    sender: Any = None,
    task_id: str | None = None,
    exception: Exception | None = None,
    **kwargs: Any,  # noqa: ARG001
) -> None:
    logger = get_contextual_logger("celery.task.failure", task_id=task_id)
    logger.error(f"Task {getattr(sender, 'name', sender)} failed: {exception}")


@task_success.connect  # type: ignore[misc]
def task_success_handler(
    sender: Any | None = None,
    result: Any = None,  # noqa: ARG001
    **kwargs: Any,  # noqa: ARG001
) -> None:
    logger = get_contextual_logger("celery.task.success")
    logger.info(f"Task {getattr(sender, 'name', sender)} completed successfully")
