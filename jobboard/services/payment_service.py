"""
Payment orders and verification for paid subscriptions.
"""
import logging
import time
from typing import List, Tuple

from sqlalchemy.orm import Session

from jobboard.core import config
from jobboard.core.errors import Conflict, NotFound, SignatureMismatch, ValidationError
from jobboard.core.principals import Principal
from jobboard.db.models import Payment, PaymentStatus, SubscriptionStatus
from jobboard.services import subscription_service
from jobboard.services.entity_service import adapter_for
from jobboard.services.payment_provider import PaymentProvider, ProviderOrder

logger = logging.getLogger(__name__)


def create_order(
    db: Session,
    principal: Principal,
    plan_id: int,
    provider: PaymentProvider,
    currency: str = None,
) -> Tuple[ProviderOrder, Payment]:
    """
    Open a provider order for the caller's pending subscription.

    The caller must already have selected the paid plan (subscription PENDING
    on that plan). One PENDING Payment row is stored per order.
    """
    plan = subscription_service.get_plan(db, plan_id)
    if plan.is_free:
        raise ValidationError("Free plans do not require payment")

    adapter = adapter_for(principal.entity_kind)
    subscription = adapter.get_subscription(db, principal.entity_id)
    if (
        subscription is None
        or subscription.status != SubscriptionStatus.PENDING
        or subscription.plan_id != plan.id
    ):
        raise Conflict("Select the plan before paying for it")

    currency = currency or config.PAYMENT_CURRENCY
    kind = principal.entity_kind.value
    order = provider.create_order(
        amount=plan.price,
        currency=currency,
        receipt=f"sub_{kind.lower()}_{principal.entity_id}_{int(time.time() * 1000)}",
        metadata={
            "entity_type": kind,
            "entity_id": str(principal.entity_id),
            "plan_id": str(plan.id),
            "plan_name": plan.name,
        },
    )

    payment = Payment(
        amount=plan.price,
        currency=currency,
        status=PaymentStatus.PENDING,
        provider=provider.name,
        provider_order_id=order.order_id,
        plan_id=plan.id,
        **adapter.payment_link(subscription),
    )
    db.add(payment)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(payment)

    logger.info(
        f"Payment order created: payment_id={payment.id}, order_id={order.order_id}, "
        f"owner={kind}:{principal.entity_id}, plan={plan.name}"
    )
    return order, payment


def verify_payment(
    db: Session,
    principal: Principal,
    order_id: str,
    payment_id: str,
    signature: str,
    provider: PaymentProvider,
) -> Tuple[Payment, bool]:
    """
    Confirm a payment and activate the subscription it funds.

    The payment completes only while the subscription is still PENDING on the
    plan the order was opened for; otherwise it is left PENDING.

    Idempotent: verifying an already completed payment with the same provider
    payment id returns it unchanged.

    Returns:
        (payment, activated) where activated is True only for the call that
        moved the subscription PENDING -> ACTIVE
    """
    if not provider.verify_signature(order_id, payment_id, signature):
        logger.warning(f"Payment signature mismatch: order_id={order_id}")
        raise SignatureMismatch()

    adapter = adapter_for(principal.entity_kind)
    subscription = adapter.get_subscription(db, principal.entity_id)
    payment = None
    if subscription is not None:
        payment = (
            db.query(Payment)
            .filter(Payment.provider_order_id == order_id, adapter.payment_filter(subscription))
            .first()
        )
    if payment is None:
        raise NotFound("Payment record not found")

    if payment.status == PaymentStatus.COMPLETED:
        if payment.provider_payment_id == payment_id:
            return payment, False
        raise Conflict("Payment order was already completed with a different payment")

    if subscription.status != SubscriptionStatus.PENDING or subscription.plan_id != payment.plan_id:
        logger.warning(
            f"Payment does not fund the current plan: payment_id={payment.id}, "
            f"payment_plan={payment.plan_id}, subscription_plan={subscription.plan_id}, "
            f"subscription_status={subscription.status.value}"
        )
        raise Conflict("This payment is for a plan that is no longer awaiting payment")

    try:
        updated = (
            db.query(Payment)
            .filter(Payment.id == payment.id, Payment.status == PaymentStatus.PENDING)
            .update(
                {"status": PaymentStatus.COMPLETED, "provider_payment_id": payment_id},
                synchronize_session=False,
            )
        )
        if updated == 0:
            # Another request completed it first
            db.rollback()
            db.refresh(payment)
            if payment.provider_payment_id == payment_id:
                return payment, False
            raise Conflict("Payment order was already completed with a different payment")

        if not subscription_service.activate_from_payment(db, subscription, plan_id=payment.plan_id):
            # Plan switched or subscription changed after the check above
            db.rollback()
            raise Conflict("This payment is for a plan that is no longer awaiting payment")
        db.commit()
    except Conflict:
        raise
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info(
        f"Payment verified and subscription activated: payment_id={payment.id}, "
        f"owner={principal.entity_kind.value}:{principal.entity_id}, plan_id={payment.plan_id}"
    )
    return payment, True


def payment_history(db: Session, principal: Principal, page: int, limit: int) -> Tuple[List[Payment], int]:
    adapter = adapter_for(principal.entity_kind)
    subscription = adapter.get_subscription(db, principal.entity_id)
    if subscription is None:
        return [], 0

    query = db.query(Payment).filter(adapter.payment_filter(subscription))
    total = query.count()
    payments = (
        query.order_by(Payment.created_at.desc(), Payment.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return payments, total
