"""
Schema creation and reference-data seeding.
"""
import logging
from sqlalchemy.orm import Session

from jobboard.db.base import Base
from jobboard.db.session import engine as default_engine
from jobboard.core.plan_limits import FREE_PLAN_LIMITS, PREMIUM_PLAN_LIMITS
from jobboard.core.principals import EntityKind

logger = logging.getLogger(__name__)

FREE_PLAN_NAME = "Free Plan"
PREMIUM_PLAN_NAME = "Premium Plan"

REFERENCE_PLANS = [
    {
        "name": FREE_PLAN_NAME,
        "description": "Basic plan with limited features",
        "type": "FREE",
        "price": 0,
        "duration": 30,
        **FREE_PLAN_LIMITS,
    },
    {
        "name": PREMIUM_PLAN_NAME,
        "description": "Premium plan with unlimited features",
        "type": "PREMIUM",
        "price": 29.99,
        "duration": 30,
        **PREMIUM_PLAN_LIMITS,
    },
]


def init_db(bind=None) -> None:
    """Create all tables on the given engine (defaults to the app engine)."""
    import jobboard.db.models  # noqa: F401  registers every model on Base.metadata

    Base.metadata.create_all(bind=bind or default_engine)
    logger.info("Database tables ensured")


def seed_reference_data(db: Session) -> None:
    """
    Upsert roles and reference plans. Safe to run repeatedly: existing rows
    are left untouched.
    """
    from jobboard.db.models import Role, Plan, PlanType

    for kind in EntityKind:
        if not db.query(Role).filter(Role.name == kind.value).first():
            db.add(Role(name=kind.value))
            logger.info(f"Role created: {kind.value}")

    for plan_data in REFERENCE_PLANS:
        if not db.query(Plan).filter(Plan.name == plan_data["name"]).first():
            db.add(Plan(**{**plan_data, "type": PlanType(plan_data["type"])}))
            logger.info(f"Plan created: {plan_data['name']}")

    db.commit()
