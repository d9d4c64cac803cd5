"""
Quota service: subscription usage counters checked against plan limits.

consume_quota() is called inside the same database transaction that creates
the billable resource. It increments the counter with a single conditional
UPDATE, so two concurrent requests cannot both pass the check on a stale read
and overshoot the plan limit. It never commits: the caller commits the
increment together with the resource, or rolls both back.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from sqlalchemy.orm import Session

from jobboard.core.errors import LimitReached, SubscriptionRequired
from jobboard.core.plan_limits import (
    QUOTA_RULES,
    ResourceKind,
    is_unlimited,
    rules_for_owner,
)
from jobboard.core.principals import EntityKind, Principal
from jobboard.db.models import SubscriptionStatus
from jobboard.services.entity_service import adapter_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaGrant:
    """Result of an allowed consumption."""
    resource: ResourceKind
    used: int
    limit: Optional[int]

    @property
    def unlimited(self) -> bool:
        return is_unlimited(self.limit)

    @property
    def remaining(self) -> Optional[int]:
        if self.unlimited:
            return None
        return max(0, self.limit - self.used)


def load_subscription(db: Session, owner_id: int, resource: ResourceKind):
    """Owner's subscription row (with plan) for the entity kind the resource belongs to."""
    rule = QUOTA_RULES[resource]
    return adapter_for(rule.owner_kind).get_subscription(db, owner_id)


def consume_quota(db: Session, owner_id: int, resource: ResourceKind) -> QuotaGrant:
    """
    Reserve one unit of a billable resource for an owner.

    Args:
        db: Database session (left uncommitted)
        owner_id: User id for applications, Company id for jobs/internships
        resource: Which counter to advance

    Returns:
        QuotaGrant with the counter value after this consumption

    Raises:
        SubscriptionRequired: no subscription, or subscription not ACTIVE
        LimitReached: counter already at the plan limit
    """
    rule = QUOTA_RULES[resource]
    model = adapter_for(rule.owner_kind).subscription_model

    subscription = load_subscription(db, owner_id, resource)
    if subscription is None or subscription.status != SubscriptionStatus.ACTIVE:
        logger.warning(
            f"Quota denied (no active subscription): owner_id={owner_id}, resource={resource.value}"
        )
        raise SubscriptionRequired(
            "Active subscription required. Choose a plan to continue.",
            resource=resource.value,
        )

    limit = getattr(subscription.plan, rule.plan_limit)
    counter = getattr(model, rule.counter)

    query = db.query(model).filter(
        model.id == subscription.id,
        model.status == SubscriptionStatus.ACTIVE,
    )
    if not is_unlimited(limit):
        query = query.filter(counter < limit)

    updated = query.update({counter: counter + 1}, synchronize_session=False)

    if updated == 0:
        db.refresh(subscription)
        used = getattr(subscription, rule.counter)
        if subscription.status != SubscriptionStatus.ACTIVE:
            raise SubscriptionRequired(
                "Active subscription required. Choose a plan to continue.",
                resource=resource.value,
            )
        logger.warning(
            f"Quota exceeded: owner_id={owner_id}, resource={resource.value}, "
            f"plan={subscription.plan.name}, limit={limit}, used={used}"
        )
        raise LimitReached(
            f"{rule.label} limit reached. Upgrade to premium for unlimited {rule.label.lower()}s.",
            resource=resource.value,
            limit=limit,
            used=used,
        )

    db.refresh(subscription)
    grant = QuotaGrant(resource=resource, used=getattr(subscription, rule.counter), limit=limit)

    logger.info(
        f"Usage consumed: owner_id={owner_id}, resource={resource.value}, "
        f"used={grant.used}/{'unlimited' if grant.unlimited else limit}"
    )
    return grant


def _usage_entry(used: int, limit: int) -> Dict:
    unlimited = is_unlimited(limit)
    return {
        "used": used,
        "limit": limit,
        "remaining": None if unlimited else max(0, limit - used),
        "unlimited": unlimited,
    }


def get_usage(db: Session, principal: Principal) -> Optional[Dict]:
    """
    Usage summary for GET /subscriptions/usage.

    Returns None when the caller has no subscription.
    """
    subscription = adapter_for(principal.entity_kind).get_subscription(db, principal.entity_id)
    if subscription is None:
        return None

    resources = {}
    for resource, rule in rules_for_owner(principal.entity_kind).items():
        resources[resource.value] = _usage_entry(
            getattr(subscription, rule.counter),
            getattr(subscription.plan, rule.plan_limit),
        )

    return {
        "plan": subscription.plan.name,
        "status": subscription.status.value,
        "resources": resources,
    }


def usage_counters(kind: EntityKind) -> Tuple[str, ...]:
    """Names of the subscription counters that apply to an entity kind."""
    return tuple(rule.counter for rule in rules_for_owner(kind).values())
