"""
Job application endpoints.

Users apply, list and withdraw their applications; companies review the
applications received for their own postings.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import require_company, require_user
from jobboard.core.errors import AppError, Conflict, InternalError, NotFound, ValidationError
from jobboard.core.plan_limits import ResourceKind
from jobboard.core.principals import Principal
from jobboard.db.models import FINAL_STATUSES, ApplicationStatus, Job, JobApplication
from jobboard.db.session import get_db
from jobboard.schemas.application import (
    ApplicationCreate,
    ApplicationCreateResponse,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ReceivedApplicationListResponse,
    ReceivedApplicationResponse,
)
from jobboard.schemas.common import Pagination
from jobboard.schemas.job import QuotaUsage
from jobboard.services.quota_service import consume_quota

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])

DUPLICATE_MESSAGE = "You have already applied to this job"


def get_own_application(db: Session, application_id: int, user_id: int) -> JobApplication:
    application = (
        db.query(JobApplication)
        .filter(JobApplication.id == application_id, JobApplication.applicant_id == user_id)
        .first()
    )
    if not application:
        raise NotFound("Application not found")
    return application


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApplicationCreateResponse)
def apply(
    payload: ApplicationCreate,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    Apply to an open job.

    Counts against the user's application limit. The counter and the
    application are committed together.
    """
    try:
        job = db.query(Job).filter(Job.id == payload.job_id, Job.is_removed.is_(False)).first()
        if not job:
            raise NotFound("Job not found")

        existing = (
            db.query(JobApplication.id)
            .filter(JobApplication.job_id == job.id, JobApplication.applicant_id == principal.entity_id)
            .first()
        )
        if existing:
            raise Conflict(DUPLICATE_MESSAGE)

        grant = consume_quota(db, principal.entity_id, ResourceKind.APPLICATION)

        application = JobApplication(
            job_id=job.id,
            applicant_id=principal.entity_id,
            resume=payload.resume,
            cover_letter=payload.cover_letter,
            status=ApplicationStatus.PENDING,
        )
        db.add(application)
        db.commit()
        db.refresh(application)
    except IntegrityError:
        db.rollback()
        raise Conflict(DUPLICATE_MESSAGE)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create application: {e}", exc_info=True)
        raise InternalError("Failed to submit application")

    logger.info(
        f"Application created: application_id={application.id}, job_id={job.id}, user_id={principal.entity_id}"
    )
    return ApplicationCreateResponse(
        application=ApplicationResponse.model_validate(application),
        usage=QuotaUsage.from_grant(grant),
    )


@router.get("/my-applications", response_model=ApplicationListResponse)
def list_my_applications(
    status: Optional[ApplicationStatus] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    query = db.query(JobApplication).filter(JobApplication.applicant_id == principal.entity_id)
    if status:
        query = query.filter(JobApplication.status == status)

    total = query.count()
    applications = (
        query.order_by(JobApplication.applied_at.desc(), JobApplication.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/job/{job_id}", response_model=ReceivedApplicationListResponse)
def list_job_applications(
    job_id: int,
    status: Optional[ApplicationStatus] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
):
    """Applications received for one of the company's postings."""
    job = db.query(Job).filter(Job.id == job_id, Job.company_id == principal.entity_id).first()
    if not job:
        raise NotFound("Job not found")

    query = db.query(JobApplication).filter(JobApplication.job_id == job.id)
    if status:
        query = query.filter(JobApplication.status == status)

    total = query.count()
    applications = (
        query.order_by(JobApplication.applied_at.desc(), JobApplication.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return ReceivedApplicationListResponse(
        applications=[ReceivedApplicationResponse.model_validate(a) for a in applications],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: int,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    return ApplicationResponse.model_validate(
        get_own_application(db, application_id, principal.entity_id)
    )


@router.patch("/{application_id}/status", response_model=ReceivedApplicationResponse)
def update_application_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
):
    """
    Move an application through review. Only the company that posted the job
    may do this; withdrawal is reserved to the applicant.
    """
    try:
        application = (
            db.query(JobApplication)
            .join(JobApplication.job)
            .filter(JobApplication.id == application_id, Job.company_id == principal.entity_id)
            .first()
        )
        if not application:
            raise NotFound("Application not found")
        if payload.status == ApplicationStatus.WITHDRAWN:
            raise ValidationError("Only the applicant can withdraw an application")
        if application.status == ApplicationStatus.WITHDRAWN:
            raise ValidationError("Application has been withdrawn")

        previous = application.status
        application.status = payload.status
        db.commit()
        db.refresh(application)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update application {application_id}: {e}", exc_info=True)
        raise InternalError("Failed to update application status")

    logger.info(
        f"Application status changed: application_id={application.id}, "
        f"{previous.value} -> {application.status.value}"
    )
    return ReceivedApplicationResponse.model_validate(application)


@router.delete("/{application_id}", response_model=ApplicationResponse)
def withdraw_application(
    application_id: int,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    Withdraw an application. Accepted or rejected applications are final.
    Withdrawing does not give back the application quota.
    """
    try:
        application = get_own_application(db, application_id, principal.entity_id)
        if application.status in FINAL_STATUSES:
            raise ValidationError(
                f"Cannot withdraw an application that has been {application.status.value.lower()}"
            )
        if application.status != ApplicationStatus.WITHDRAWN:
            application.status = ApplicationStatus.WITHDRAWN
            db.commit()
            db.refresh(application)
            logger.info(f"Application withdrawn: application_id={application.id}")
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to withdraw application {application_id}: {e}", exc_info=True)
        raise InternalError("Failed to withdraw application")

    return ApplicationResponse.model_validate(application)
