"""
Saved jobs for users.
"""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import require_user
from jobboard.core.errors import AppError, Conflict, InternalError, NotFound
from jobboard.core.principals import Principal
from jobboard.db.models import Bookmark, Job
from jobboard.db.session import get_db
from jobboard.schemas.bookmark import (
    BookmarkCheckResponse,
    BookmarkCreate,
    BookmarkListResponse,
    BookmarkResponse,
)
from jobboard.schemas.common import MessageResponse, Pagination

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookmarks", tags=["Bookmarks"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BookmarkResponse)
def add_bookmark(
    payload: BookmarkCreate,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        job = db.query(Job).filter(Job.id == payload.job_id, Job.is_removed.is_(False)).first()
        if not job:
            raise NotFound("Job not found")

        existing = (
            db.query(Bookmark.id)
            .filter(Bookmark.user_id == principal.entity_id, Bookmark.job_id == job.id)
            .first()
        )
        if existing:
            raise Conflict("Job already bookmarked")

        bookmark = Bookmark(user_id=principal.entity_id, job_id=job.id)
        db.add(bookmark)
        db.commit()
        db.refresh(bookmark)
    except IntegrityError:
        db.rollback()
        raise Conflict("Job already bookmarked")
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to bookmark job {payload.job_id}: {e}", exc_info=True)
        raise InternalError("Failed to bookmark job")

    logger.info(f"Bookmark added: user_id={principal.entity_id}, job_id={job.id}")
    return BookmarkResponse.model_validate(bookmark)


@router.get("", response_model=BookmarkListResponse)
def list_bookmarks(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    query = (
        db.query(Bookmark)
        .join(Bookmark.job)
        .filter(Bookmark.user_id == principal.entity_id, Job.is_removed.is_(False))
    )
    total = query.count()
    bookmarks = (
        query.order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return BookmarkListResponse(
        bookmarks=[BookmarkResponse.model_validate(b) for b in bookmarks],
        pagination=Pagination.build(page, limit, total),
    )


@router.delete("/{job_id}", response_model=MessageResponse)
def remove_bookmark(
    job_id: int,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        bookmark = (
            db.query(Bookmark)
            .filter(Bookmark.user_id == principal.entity_id, Bookmark.job_id == job_id)
            .first()
        )
        if not bookmark:
            raise NotFound("Bookmark not found")
        db.delete(bookmark)
        db.commit()
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to remove bookmark for job {job_id}: {e}", exc_info=True)
        raise InternalError("Failed to remove bookmark")

    logger.info(f"Bookmark removed: user_id={principal.entity_id}, job_id={job_id}")
    return MessageResponse(message="Bookmark removed successfully")


@router.get("/check/{job_id}", response_model=BookmarkCheckResponse)
def check_bookmark(
    job_id: int,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    exists = (
        db.query(Bookmark.id)
        .filter(Bookmark.user_id == principal.entity_id, Bookmark.job_id == job_id)
        .first()
    )
    return BookmarkCheckResponse(bookmarked=exists is not None)
