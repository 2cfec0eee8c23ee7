# Local application imports
from samadhan.services.ai.categorization_services import (
    CategorizationServiceError,
    is_configured,
    parse_suggestion,
    suggest_category,
)

__all__ = ["CategorizationServiceError", "is_configured", "parse_suggestion", "suggest_category"]
