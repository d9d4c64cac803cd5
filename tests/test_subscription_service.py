"""
Unit tests for the subscription lifecycle.
"""
from datetime import datetime, timedelta

import pytest

from jobboard.core.errors import Conflict, NotFound
from jobboard.core.principals import EntityKind, Principal
from jobboard.db.init_db import PREMIUM_PLAN_NAME
from jobboard.db.models import Payment, SubscriptionStatus, UserSubscription
from jobboard.services import subscription_service


def _principal(entity, kind=EntityKind.USER):
    return Principal(entity.id, kind)


def test_free_plan_activates_without_payment(db, create_user, free_plan):
    user = create_user(plan_name=None)

    subscription = subscription_service.select_plan(db, _principal(user), free_plan.id)

    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.plan_id == free_plan.id
    assert db.query(Payment).count() == 0


def test_paid_plan_starts_pending(db, create_user, premium_plan):
    user = create_user(plan_name=None)
    now = datetime(2026, 1, 1, 12, 0, 0)

    subscription = subscription_service.select_plan(db, _principal(user), premium_plan.id, now=now)

    assert subscription.status == SubscriptionStatus.PENDING
    assert subscription.applications_used == 0
    assert subscription.start_date.replace(tzinfo=None) == now
    assert subscription.end_date.replace(tzinfo=None) == now + timedelta(days=30)


def test_second_subscription_while_active_conflicts(db, create_user, premium_plan):
    user = create_user()

    with pytest.raises(Conflict):
        subscription_service.select_plan(db, _principal(user), premium_plan.id)

    db.expire_all()
    subscription = subscription_service.get_current(db, _principal(user))
    assert subscription.plan.name == "Free Plan"


def test_select_after_cancel_resets_counters(db, create_user, premium_plan):
    user = create_user(status=SubscriptionStatus.CANCELLED)
    current = subscription_service.get_current(db, _principal(user))
    current.applications_used = 5
    db.commit()

    subscription = subscription_service.select_plan(db, _principal(user), premium_plan.id)

    assert subscription.status == SubscriptionStatus.PENDING
    assert subscription.plan_id == premium_plan.id
    assert subscription.applications_used == 0
    # Still a single row per owner
    assert db.query(UserSubscription).filter(UserSubscription.user_id == user.id).count() == 1


def test_pending_can_switch_plan(db, create_company, free_plan):
    company = create_company(plan_name=PREMIUM_PLAN_NAME, status=SubscriptionStatus.PENDING)

    subscription = subscription_service.select_plan(db, _principal(company, EntityKind.COMPANY), free_plan.id)

    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.plan_id == free_plan.id


def test_select_unknown_plan(db, create_user):
    user = create_user(plan_name=None)

    with pytest.raises(NotFound):
        subscription_service.select_plan(db, _principal(user), 999)


def test_cancel_active(db, create_user):
    user = create_user()

    subscription = subscription_service.cancel(db, _principal(user))

    assert subscription.status == SubscriptionStatus.CANCELLED


def test_cancel_twice_conflicts(db, create_user):
    user = create_user()
    subscription_service.cancel(db, _principal(user))

    with pytest.raises(Conflict):
        subscription_service.cancel(db, _principal(user))


def test_cancel_pending_conflicts(db, create_user):
    user = create_user(plan_name=PREMIUM_PLAN_NAME, status=SubscriptionStatus.PENDING)

    with pytest.raises(Conflict):
        subscription_service.cancel(db, _principal(user))


def test_cancel_without_subscription(db, create_user):
    user = create_user(plan_name=None)

    with pytest.raises(NotFound):
        subscription_service.cancel(db, _principal(user))


def test_activate_from_payment_only_once(db, create_user):
    user = create_user(plan_name=PREMIUM_PLAN_NAME, status=SubscriptionStatus.PENDING)
    subscription = subscription_service.get_current(db, _principal(user))

    assert subscription_service.activate_from_payment(db, subscription) is True
    db.commit()
    assert subscription_service.activate_from_payment(db, subscription) is False
    db.commit()

    db.expire_all()
    assert subscription_service.get_current(db, _principal(user)).status == SubscriptionStatus.ACTIVE


def test_list_plans_by_price(db):
    names = [plan.name for plan in subscription_service.list_plans(db)]
    assert names == ["Free Plan", "Premium Plan"]
