"""
Pydantic schemas for job application endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from jobboard.db.models import ApplicationStatus, JobType
from jobboard.schemas.common import Pagination
from jobboard.schemas.job import QuotaUsage


class ApplicationCreate(BaseModel):
    """Schema for applying to a job."""
    job_id: int = Field(..., gt=0, description="Job to apply to")
    resume: Optional[str] = Field(None, description="Resume text or URL")
    cover_letter: Optional[str] = Field(None, description="Cover letter")


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus = Field(..., description="New application status")


class ApplicationJobSummary(BaseModel):
    id: int
    title: str
    location: str
    type: JobType
    company_id: int

    class Config:
        from_attributes = True


class ApplicantSummary(BaseModel):
    id: int
    name: str
    email: str
    skills: Optional[str] = None
    location: Optional[str] = None

    class Config:
        from_attributes = True


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    applicant_id: int
    resume: Optional[str] = None
    cover_letter: Optional[str] = None
    status: ApplicationStatus
    applied_at: datetime
    updated_at: datetime
    job: Optional[ApplicationJobSummary] = None

    class Config:
        from_attributes = True


class ReceivedApplicationResponse(ApplicationResponse):
    """Application as seen by the company that posted the job."""
    applicant: Optional[ApplicantSummary] = None


class ApplicationCreateResponse(BaseModel):
    application: ApplicationResponse
    usage: QuotaUsage


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    pagination: Pagination


class ReceivedApplicationListResponse(BaseModel):
    applications: List[ReceivedApplicationResponse]
    pagination: Pagination
