from .comment_schemas import CommentCreate, CommentResponse, CommentUpdate
from .complaint_schemas import (
    AICategorizeRequest,
    AssignRequest,
    CategorySuggestionResponse,
    ComplaintCreate,
    ComplaintResponse,
    ComplaintUpdate,
    FlagRequest,
    LocationSchema,
    StatusUpdate,
)
from .filter_schemas import ComplaintFilters, DateRange, GeoFilter, SortField, SortOptions, SortOrder

__all__ = [
    "AICategorizeRequest",
    "AssignRequest",
    "CategorySuggestionResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentUpdate",
    "ComplaintCreate",
    "ComplaintFilters",
    "ComplaintResponse",
    "ComplaintUpdate",
    "DateRange",
    "FlagRequest",
    "GeoFilter",
    "LocationSchema",
    "SortField",
    "SortOptions",
    "SortOrder",
    "StatusUpdate",
]
