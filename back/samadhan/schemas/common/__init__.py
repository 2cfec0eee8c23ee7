from .pagination_schemas import PaginatedResponse, Pagination
from .response_schemas import BaseResponse, ErrorDetails

__all__ = ["BaseResponse", "ErrorDetails", "PaginatedResponse", "Pagination"]
