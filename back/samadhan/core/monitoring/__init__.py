# Local application imports
from samadhan.core.monitoring.logging import get_contextual_logger, get_logger
from samadhan.core.monitoring.sentry import setup_sentry

__all__ = ["get_contextual_logger", "get_logger", "setup_sentry"]
