# Standard library imports
import asyncio
from collections.abc import Callable, Coroutine
import functools
from typing import Any, TypeVar

# Local application imports
from samadhan.core.monitoring.logging import get_contextual_logger

logger = get_contextual_logger(__name__)

T = TypeVar("T")


def run_async_in_celery(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async code from a (synchronous) Celery task.

    Each call gets a fresh event loop that is closed afterwards, so no loop
    state leaks between tasks running in the same worker process.

    Raises:
        Any exception raised by the coroutine
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
        asyncio.set_event_loop(None)


def with_retry_on_failure(
    max_retries: int = 3,
    countdown: int = 60,
    exponential_backoff: bool = True,
) -> Callable[..., Callable[..., Any]]:
    """
    Decorator to add retry logic to bound Celery tasks.

    Usage:
        @celery_app.task(bind=True)
        @with_retry_on_failure(max_retries=3, countdown=30)
        def my_task(self, param1):
            ...
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            try:
                return func(self, *args, **kwargs)
            except Exception as exc:
                retry_countdown = countdown
                if exponential_backoff:
                    retry_count = getattr(self.request, "retries", 0)
                    retry_countdown = countdown * (2**retry_count)

                logger.exception(f"Task {func.__name__} failed, retrying in {retry_countdown}s")
                raise self.retry(exc=exc, countdown=retry_countdown, max_retries=max_retries)

        return wrapper

    return decorator
