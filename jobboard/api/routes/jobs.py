"""
Job posting endpoints.

Listing and detail are public. Posting counts against the company's
subscription: internships and every other job type have separate limits.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import require_company
from jobboard.core.errors import AppError, InternalError, NotFound
from jobboard.core.plan_limits import resource_kind_for_job_type
from jobboard.core.principals import Principal
from jobboard.db.models import Company, Job, JobType
from jobboard.db.session import get_db
from jobboard.schemas.common import MessageResponse, Pagination
from jobboard.schemas.job import (
    JobCreate,
    JobCreateResponse,
    JobListResponse,
    JobResponse,
    JobUpdate,
    QuotaUsage,
)
from jobboard.services.quota_service import consume_quota

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def get_owned_job(db: Session, job_id: int, company_id: int) -> Job:
    job = (
        db.query(Job)
        .filter(Job.id == job_id, Job.company_id == company_id, Job.is_removed.is_(False))
        .first()
    )
    if not job:
        raise NotFound("Job not found")
    return job


@router.get("", response_model=JobListResponse)
def list_jobs(
    type: Optional[JobType] = Query(None, description="Filter by job type"),
    location: Optional[str] = Query(None, description="Filter by location (partial match)"),
    company: Optional[str] = Query(None, description="Filter by company name (partial match)"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db),
):
    """
    List open job postings, newest first.
    """
    query = db.query(Job).filter(Job.is_removed.is_(False))

    if type:
        query = query.filter(Job.type == type)
    if location:
        query = query.filter(Job.location.ilike(f"%{location}%"))
    if company:
        query = query.join(Job.company).filter(Company.name.ilike(f"%{company}%"))

    total = query.count()
    jobs = (
        query.order_by(Job.created_at.desc(), Job.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/company/my-jobs", response_model=JobListResponse)
def list_company_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
):
    query = db.query(Job).filter(Job.company_id == principal.entity_id, Job.is_removed.is_(False))
    total = query.count()
    jobs = (
        query.order_by(Job.created_at.desc(), Job.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    job = db.query(Job).filter(Job.id == job_id, Job.is_removed.is_(False)).first()
    if not job:
        raise NotFound("Job not found")
    return JobResponse.model_validate(job)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobCreateResponse)
def create_job(
    job_data: JobCreate,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
):
    """
    Post a job.

    The quota counter and the job row are committed together; if either
    fails, neither is persisted.
    """
    try:
        grant = consume_quota(db, principal.entity_id, resource_kind_for_job_type(job_data.type))

        job = Job(company_id=principal.entity_id, **job_data.model_dump())
        db.add(job)
        db.commit()
        db.refresh(job)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create job: {e}", exc_info=True)
        raise InternalError("Failed to create job")

    logger.info(f"Job created: job_id={job.id}, company_id={principal.entity_id}, type={job.type.value}")
    return JobCreateResponse(
        job=JobResponse.model_validate(job),
        usage=QuotaUsage.from_grant(grant),
    )


@router.put("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    job_data: JobUpdate,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
):
    try:
        job = get_owned_job(db, job_id, principal.entity_id)
        for field, value in job_data.model_dump(exclude_unset=True).items():
            setattr(job, field, value)
        db.commit()
        db.refresh(job)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update job {job_id}: {e}", exc_info=True)
        raise InternalError("Failed to update job")

    logger.info(f"Job updated: job_id={job.id}")
    return JobResponse.model_validate(job)


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: int,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
):
    """Soft delete: the posting disappears from listings, applications keep it."""
    try:
        job = get_owned_job(db, job_id, principal.entity_id)
        job.is_removed = True
        db.commit()
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete job {job_id}: {e}", exc_info=True)
        raise InternalError("Failed to delete job")

    logger.info(f"Job removed: job_id={job_id}, company_id={principal.entity_id}")
    return MessageResponse(message="Job deleted successfully")
