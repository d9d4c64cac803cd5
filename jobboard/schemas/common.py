"""
Shared response pieces.
"""
import math

from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """Pagination envelope returned by every list endpoint."""
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total number of items")
    pages: int = Field(..., description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human-readable result")
