# Standard library imports
import logging

# Third-party imports
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

# Local application imports
from samadhan.settings import settings


def setup_sentry() -> bool:
    """
    Initialise Sentry in production when a DSN is configured.

    Warnings are kept as breadcrumbs and errors are sent as events, so every
    ``logger.error`` / ``logger.exception`` in the services is reported.
    Returns True when Sentry is active.
    """
    if settings.ENVIRONMENT != "production" or not settings.SENTRY_DSN:
        return False

    if sentry_sdk.get_client().is_active():
        return True

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[
            LoggingIntegration(level=logging.WARNING, event_level=logging.ERROR),
            FastApiIntegration(),
        ],
        environment=settings.ENVIRONMENT,
        traces_sample_rate=1.0,  # tweak for performance
    )
    return True
