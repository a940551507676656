"""Response envelope schemas shared by every endpoint."""

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

ItemT = TypeVar("ItemT")


class FieldIssue(BaseModel):
    field: str
    message: str


class ErrorEnvelope(BaseModel):
    success: Literal[False] = False
    error: str
    message: str | None = None
    details: Any = None
    stack: str | None = None
    timestamp: datetime | None = None


class PaginatedEnvelope(BaseModel, Generic[ItemT]):
    """Paginated list wrapper; serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    success: Literal[True] = True
    message: str | None = None
    data: list[ItemT]
    total_count: int = Field(alias="totalCount")
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    has_next_page: bool = Field(alias="hasNextPage")
    has_prev_page: bool = Field(alias="hasPrevPage")


class PaginationParams(BaseModel):
    skip: int = Field(ge=0)
    take: int = Field(ge=1, le=100)
    page: int = Field(ge=1)
