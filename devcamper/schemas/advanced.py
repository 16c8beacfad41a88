from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, List, Literal, Optional, Tuple

Dir = Literal["asc", "desc"]

# Bracket suffixes translated into comparisons: field[gt]=5
COMPARISON_OPERATORS = ("gt", "gte", "lt", "lte", "in")
RESERVED_PARAMS = ("select", "sort", "page", "limit")

class SortClause(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    dir: Dir

class Projection(BaseModel):
    model_config = ConfigDict(frozen=True)

    fields: Tuple[str, ...]
    exclude: bool = False

class Populate(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    select: Optional[Tuple[str, ...]] = None

class AdvancedQuery(BaseModel):
    """Parsed query string: filter predicate plus select/sort/page/limit."""

    model_config = ConfigDict(frozen=True)

    filters: Dict[str, Any] = {}
    select: Optional[Projection] = None
    sort: Tuple[SortClause, ...] = ()
    page: int = 1
    limit: int = 100

    @property
    def start_index(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def end_index(self) -> int:
        return self.page * self.limit

class PageRef(BaseModel):
    page: int
    limit: int

class Pagination(BaseModel):
    next: Optional[PageRef] = None
    prev: Optional[PageRef] = None

class ResultPage(BaseModel):
    count: int
    total: int
    pagination: Pagination = Pagination()
    data: List[Dict[str, Any]] = []

    def to_response(self) -> dict:
        return {
            "success": True,
            "count": self.count,
            "pagination": self.pagination.model_dump(exclude_none=True),
            "data": self.data,
        }
