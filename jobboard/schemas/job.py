"""
Pydantic schemas for job posting endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from jobboard.db.models import JobType
from jobboard.schemas.common import Pagination


class JobCreate(BaseModel):
    """Schema for posting a new job."""
    title: str = Field(..., min_length=1, max_length=255, description="Job title")
    description: str = Field(..., min_length=1, description="Job description")
    location: str = Field(..., min_length=1, max_length=255, description="Job location")
    salary: Optional[str] = Field(None, max_length=100, description="Salary range")
    type: JobType = Field(..., description="FULL_TIME, PART_TIME, CONTRACT or INTERNSHIP")

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Backend Engineer",
                "description": "Build APIs with FastAPI and PostgreSQL.",
                "location": "Remote",
                "salary": "12-18 LPA",
                "type": "FULL_TIME",
            }
        }


class JobUpdate(BaseModel):
    """Schema for updating a job. The job type cannot change after posting."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    salary: Optional[str] = Field(None, max_length=100)


class CompanySummary(BaseModel):
    id: int
    name: str
    logo: Optional[str] = None

    class Config:
        from_attributes = True


class JobResponse(BaseModel):
    """Schema for job response."""
    id: int = Field(..., description="Job ID")
    company_id: int = Field(..., description="Posting company ID")
    title: str
    description: str
    location: str
    salary: Optional[str] = None
    type: JobType
    company: Optional[CompanySummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobListResponse(BaseModel):
    jobs: List[JobResponse] = Field(..., description="List of jobs")
    pagination: Pagination


class QuotaUsage(BaseModel):
    """Counter state after a billable create."""
    resource: str
    used: int
    limit: int
    remaining: Optional[int] = Field(None, description="None for unlimited")
    unlimited: bool

    @classmethod
    def from_grant(cls, grant) -> "QuotaUsage":
        return cls(
            resource=grant.resource.value,
            used=grant.used,
            limit=grant.limit,
            remaining=grant.remaining,
            unlimited=grant.unlimited,
        )


class JobCreateResponse(BaseModel):
    job: JobResponse
    usage: QuotaUsage
