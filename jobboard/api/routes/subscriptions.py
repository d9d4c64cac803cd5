"""
Plan catalogue, subscription lifecycle and usage endpoints.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import require_entity
from jobboard.core.errors import AppError, InternalError, NotFound
from jobboard.core.principals import Principal
from jobboard.db.models import SubscriptionStatus
from jobboard.db.session import get_db
from jobboard.schemas.subscription import (
    CurrentSubscriptionResponse,
    LatestPayment,
    PlanListResponse,
    PlanResponse,
    SubscriptionCreate,
    SubscriptionResponse,
    UsageResponse,
)
from jobboard.services import quota_service, subscription_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


def _current_response(subscription) -> CurrentSubscriptionResponse:
    if subscription is None:
        return CurrentSubscriptionResponse()
    latest = subscription.payments[0] if subscription.payments else None
    return CurrentSubscriptionResponse(
        subscription=SubscriptionResponse.model_validate(subscription),
        latest_payment=LatestPayment.model_validate(latest) if latest else None,
        requires_payment=subscription.status == SubscriptionStatus.PENDING,
    )


@router.get("/plans", response_model=PlanListResponse)
def list_plans(db: Session = Depends(get_db)):
    """Available plans, cheapest first."""
    return PlanListResponse(
        plans=[PlanResponse.model_validate(plan) for plan in subscription_service.list_plans(db)]
    )


@router.get("/current", response_model=CurrentSubscriptionResponse)
def current_subscription(
    principal: Principal = Depends(require_entity),
    db: Session = Depends(get_db),
):
    return _current_response(subscription_service.get_current(db, principal))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CurrentSubscriptionResponse)
def choose_plan(
    payload: SubscriptionCreate,
    principal: Principal = Depends(require_entity),
    db: Session = Depends(get_db),
):
    """
    Bind the caller to a plan.

    Free plans are active immediately. Paid plans stay PENDING until
    POST /payments/verify succeeds. Fails with 409 while a subscription is
    ACTIVE; cancel it first.
    """
    try:
        subscription = subscription_service.select_plan(db, principal, payload.plan_id)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to select plan {payload.plan_id}: {e}", exc_info=True)
        raise InternalError("Failed to create subscription")

    return _current_response(subscription)


@router.delete("", response_model=SubscriptionResponse)
def cancel_subscription(
    principal: Principal = Depends(require_entity),
    db: Session = Depends(get_db),
):
    try:
        subscription = subscription_service.cancel(db, principal)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to cancel subscription: {e}", exc_info=True)
        raise InternalError("Failed to cancel subscription")

    return SubscriptionResponse.model_validate(subscription)


@router.get("/usage", response_model=UsageResponse)
def usage(
    principal: Principal = Depends(require_entity),
    db: Session = Depends(get_db),
):
    summary = quota_service.get_usage(db, principal)
    if summary is None:
        raise NotFound("Subscription not found")
    return UsageResponse(**summary)
