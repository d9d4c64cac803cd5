"""
Pydantic schemas for bookmark endpoints.
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from jobboard.schemas.common import Pagination
from jobboard.schemas.job import JobResponse


class BookmarkCreate(BaseModel):
    job_id: int = Field(..., gt=0, description="Job to bookmark")


class BookmarkResponse(BaseModel):
    id: int
    job_id: int
    created_at: datetime
    job: JobResponse

    class Config:
        from_attributes = True


class BookmarkListResponse(BaseModel):
    bookmarks: List[BookmarkResponse]
    pagination: Pagination


class BookmarkCheckResponse(BaseModel):
    bookmarked: bool
