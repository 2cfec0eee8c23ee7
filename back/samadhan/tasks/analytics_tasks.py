# Standard library imports
from typing import Any

# Local application imports
from samadhan.core.celery.celery import celery_app
from samadhan.core.db import async_engine, run_with_new_session
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.services.analytics.report_services import refresh_user_counters
from samadhan.utils.celery_utils import run_async_in_celery, with_retry_on_failure

logger = get_contextual_logger(__name__)


async def _refresh_user_counters() -> int:
    try:
        return await run_with_new_session(refresh_user_counters)
    finally:
        # Pooled connections belong to this task's event loop
        await async_engine.dispose()


@celery_app.task(bind=True, name="samadhan.tasks.analytics_tasks.refresh_user_counters_task")
@with_retry_on_failure(max_retries=3, countdown=60)
def refresh_user_counters_task(self: Any) -> dict[str, int]:
    """Recompute complaints_count / resolved_count for every user."""
    updated = run_async_in_celery(_refresh_user_counters())
    logger.bind(task_id=self.request.id).info(f"User counters refreshed, {updated} users changed")
    return {"users_updated": updated}
