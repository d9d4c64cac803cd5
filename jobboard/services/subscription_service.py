"""
Subscription lifecycle.

    NONE -> PENDING -> ACTIVE -> CANCELLED
    NONE -> ACTIVE                 (free plans skip payment)

Each owner has at most one subscription row. Selecting a plan creates the row
or rewrites it in place; every status transition is a conditional UPDATE on
the expected current status, so concurrent requests for the same owner cannot
both succeed.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.errors import Conflict, InternalError, NotFound
from jobboard.core.principals import EntityKind, Principal
from jobboard.db.models import Plan, PlanType, SubscriptionStatus
from jobboard.services.entity_service import EntityAdapter, adapter_for
from jobboard.services.quota_service import usage_counters

logger = logging.getLogger(__name__)


def list_plans(db: Session) -> List[Plan]:
    return db.query(Plan).order_by(Plan.price.asc()).all()


def get_plan(db: Session, plan_id: int) -> Plan:
    plan = db.query(Plan).filter(Plan.id == plan_id).first()
    if not plan:
        raise NotFound("Plan not found")
    return plan


def get_free_plan(db: Session) -> Plan:
    plan = (
        db.query(Plan)
        .filter(Plan.type == PlanType.FREE)
        .order_by(Plan.price.asc())
        .first()
    )
    if not plan:
        logger.error("Free plan not found; reference data has not been seeded")
        raise InternalError("Free plan not found")
    return plan


def _fresh_fields(plan: Plan, kind: EntityKind, now: Optional[datetime] = None) -> dict:
    """Column values for a subscription that has just been bound to a plan."""
    start = now or datetime.utcnow()
    fields = {
        "plan_id": plan.id,
        "status": SubscriptionStatus.ACTIVE if plan.is_free else SubscriptionStatus.PENDING,
        "start_date": start,
        "end_date": start + timedelta(days=plan.duration),
    }
    fields.update({counter: 0 for counter in usage_counters(kind)})
    return fields


def attach_initial_subscription(db: Session, adapter: EntityAdapter, owner_id: int, plan: Plan):
    """
    Add the first subscription for a newly registered entity.

    Does not commit; registration commits the entity, its role and its
    subscription together.
    """
    subscription = adapter.new_subscription(owner_id, **_fresh_fields(plan, adapter.kind))
    db.add(subscription)
    return subscription


def get_current(db: Session, principal: Principal):
    return adapter_for(principal.entity_kind).get_subscription(db, principal.entity_id)


def select_plan(db: Session, principal: Principal, plan_id: int, now: Optional[datetime] = None):
    """
    Bind the caller's subscription to a plan.

    Free plans become ACTIVE immediately; paid plans start PENDING until a
    payment is verified. Usage counters restart from zero.

    Raises:
        NotFound: plan does not exist
        Conflict: the caller already has an ACTIVE subscription
    """
    plan = get_plan(db, plan_id)
    adapter = adapter_for(principal.entity_kind)
    model = adapter.subscription_model
    fields = _fresh_fields(plan, principal.entity_kind, now)

    existing = adapter.get_subscription(db, principal.entity_id)
    if existing is not None and existing.status == SubscriptionStatus.ACTIVE:
        raise Conflict(
            f"{principal.entity_kind.value} already has an active subscription. Cancel it before choosing a new plan."
        )

    if existing is None:
        subscription = adapter.new_subscription(principal.entity_id, **fields)
        db.add(subscription)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise Conflict("Subscription was changed by another request. Please retry.")
    else:
        updated = (
            db.query(model)
            .filter(model.id == existing.id, model.status != SubscriptionStatus.ACTIVE)
            .update(fields, synchronize_session=False)
        )
        if updated == 0:
            db.rollback()
            raise Conflict(
                f"{principal.entity_kind.value} already has an active subscription. Cancel it before choosing a new plan."
            )
        db.commit()
        subscription = existing

    db.refresh(subscription)
    logger.info(
        f"Subscription bound: owner={principal.entity_kind.value}:{principal.entity_id}, "
        f"plan={plan.name}, status={subscription.status.value}"
    )
    return subscription


def activate_from_payment(db: Session, subscription, plan_id: Optional[int] = None) -> bool:
    """
    Move a subscription PENDING -> ACTIVE.

    With plan_id, only a subscription still bound to that plan is activated.

    Returns True if this call performed the transition. Does not commit; the
    payment verification commits the payment and the activation together.
    """
    model = type(subscription)
    query = db.query(model).filter(model.id == subscription.id, model.status == SubscriptionStatus.PENDING)
    if plan_id is not None:
        query = query.filter(model.plan_id == plan_id)
    updated = query.update({"status": SubscriptionStatus.ACTIVE}, synchronize_session=False)
    return updated == 1


def cancel(db: Session, principal: Principal):
    """
    Cancel the caller's ACTIVE subscription.

    Raises:
        NotFound: no subscription
        Conflict: subscription is not ACTIVE
    """
    adapter = adapter_for(principal.entity_kind)
    model = adapter.subscription_model
    subscription = adapter.get_subscription(db, principal.entity_id)
    if subscription is None:
        raise NotFound("Subscription not found")

    updated = (
        db.query(model)
        .filter(model.id == subscription.id, model.status == SubscriptionStatus.ACTIVE)
        .update({"status": SubscriptionStatus.CANCELLED}, synchronize_session=False)
    )
    if updated == 0:
        db.rollback()
        raise Conflict("No active subscription to cancel")

    db.commit()
    db.refresh(subscription)
    logger.info(
        f"Subscription cancelled: owner={principal.entity_kind.value}:{principal.entity_id}"
    )
    return subscription
