# Standard library imports
from typing import Generic, TypeVar

# Third-party imports
from pydantic import BaseModel

ItemT = TypeVar("ItemT")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel, Generic[ItemT]):
    items: list[ItemT]
    pagination: Pagination
