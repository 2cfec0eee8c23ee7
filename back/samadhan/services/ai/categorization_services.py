# Standard library imports
from typing import Any

# Third-party imports
import httpx

# Local application imports
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.complaints.enums import ComplaintCategory
from samadhan.services.complaints.scoring_services import CategorySuggestion
from samadhan.settings import settings

logger = get_contextual_logger(__name__)


class CategorizationServiceError(Exception):
    """The categorization service could not be reached or answered nonsense."""


def is_configured() -> bool:
    return bool(settings.AI_CATEGORIZATION_URL)


def parse_suggestion(payload: Any) -> CategorySuggestion:
    """
    Read ``{"category": "...", "confidence": 0.0-1.0}`` from the service response.
    """
    if not isinstance(payload, dict):
        raise CategorizationServiceError(f"Unexpected response body: {payload!r}")
    try:
        category = ComplaintCategory(payload["category"])
        confidence = float(payload["confidence"])
    except (KeyError, TypeError, ValueError) as e:
        raise CategorizationServiceError(f"Malformed categorization response: {e}") from e
    if not 0.0 <= confidence <= 1.0:
        raise CategorizationServiceError(f"Confidence out of range: {confidence}")
    return CategorySuggestion(category=category, confidence=confidence)


async def suggest_category(title: str, description: str) -> CategorySuggestion:
    """
    Ask the AI service which category the complaint text belongs to.

    One attempt only; retries are the service's own business.

    Raises:
        CategorizationServiceError: not configured, unreachable, or bad response.
    """
    if not is_configured():
        raise CategorizationServiceError("AI categorization is not configured")

    headers = {}
    if settings.AI_CATEGORIZATION_API_KEY:
        headers["Authorization"] = f"Bearer {settings.AI_CATEGORIZATION_API_KEY}"

    try:
        async with httpx.AsyncClient(timeout=settings.AI_CATEGORIZATION_TIMEOUT) as client:
            response = await client.post(
                settings.AI_CATEGORIZATION_URL,
                json={"title": title, "description": description},
                headers=headers,
            )
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPStatusError as exc:
        logger.error(f"Categorization service returned {exc.response.status_code}: {exc.response.text[:200]}")
        raise CategorizationServiceError(f"Categorization service returned {exc.response.status_code}") from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.error(f"Categorization service call failed: {exc}")
        raise CategorizationServiceError(str(exc)) from exc

    return parse_suggestion(payload)
