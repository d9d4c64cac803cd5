"""
Payment endpoints for paid plans.

Flow: POST /subscriptions (paid plan, PENDING) -> POST /payments/create-order
-> client checkout with the provider -> POST /payments/verify (ACTIVE).
"""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import get_payment_provider, require_entity
from jobboard.core.errors import AppError, InternalError
from jobboard.core.logging_config import sanitize_log_data
from jobboard.core.principals import Principal
from jobboard.db.session import get_db
from jobboard.schemas.common import Pagination
from jobboard.schemas.payment import (
    CreateOrderRequest,
    CreateOrderResponse,
    OrderDetails,
    PaymentHistoryResponse,
    PaymentResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from jobboard.schemas.subscription import PlanResponse, SubscriptionResponse
from jobboard.services import payment_service
from jobboard.services.payment_provider import PaymentProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/create-order", status_code=status.HTTP_201_CREATED, response_model=CreateOrderResponse)
def create_order(
    payload: CreateOrderRequest,
    principal: Principal = Depends(require_entity),
    provider: PaymentProvider = Depends(get_payment_provider),
    db: Session = Depends(get_db),
):
    try:
        order, payment = payment_service.create_order(db, principal, payload.plan_id, provider)
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create payment order for plan {payload.plan_id}: {e}", exc_info=True)
        raise InternalError("Failed to create payment order")

    return CreateOrderResponse(
        order=OrderDetails(**order.to_dict()),
        payment_id=payment.id,
        plan=PlanResponse.model_validate(payment.plan),
    )


@router.post("/verify", response_model=VerifyPaymentResponse)
def verify_payment(
    payload: VerifyPaymentRequest,
    principal: Principal = Depends(require_entity),
    provider: PaymentProvider = Depends(get_payment_provider),
    db: Session = Depends(get_db),
):
    """
    Verify the provider signature and activate the pending subscription.

    Safe to retry: repeating a successful verification returns the same
    payment with activated=false.
    """
    try:
        payment, activated = payment_service.verify_payment(
            db,
            principal,
            order_id=payload.order_id,
            payment_id=payload.payment_id,
            signature=payload.signature,
            provider=provider,
        )
    except AppError as e:
        db.rollback()
        logger.warning(f"Payment verification rejected ({e.code}): {sanitize_log_data(payload.model_dump())}")
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to verify payment for order {payload.order_id}: {e}", exc_info=True)
        raise InternalError("Failed to verify payment")

    return VerifyPaymentResponse(
        payment=PaymentResponse.model_validate(payment),
        subscription=SubscriptionResponse.model_validate(payment.subscription),
        activated=activated,
    )


@router.get("/history", response_model=PaymentHistoryResponse)
def payment_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(require_entity),
    db: Session = Depends(get_db),
):
    payments, total = payment_service.payment_history(db, principal, page, limit)
    return PaymentHistoryResponse(
        payments=[PaymentResponse.model_validate(p) for p in payments],
        pagination=Pagination.build(page, limit, total),
    )
