"""
Seed roles, reference plans and a demo company.
Run: python -m scripts.seed
"""
import logging
import sys

from jobboard.core.principals import EntityKind
from jobboard.core.security import hash_password
from jobboard.db.init_db import init_db, seed_reference_data
from jobboard.db.session import SessionLocal
from jobboard.services import subscription_service
from jobboard.services.entity_service import adapter_for

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_COMPANY = {
    "email": "test@company.com",
    "name": "Test Company",
    "about": "A test company for job posting",
    "industry": "Technology",
}
DEMO_PASSWORD = "company123"


def seed_demo_company(db) -> bool:
    """Create the demo company on the free plan. Returns False if it already exists."""
    adapter = adapter_for(EntityKind.COMPANY)
    if adapter.find_by_email(db, DEMO_COMPANY["email"]):
        logger.info(f"Demo company already exists: {DEMO_COMPANY['email']}")
        return False

    company = adapter.model(**DEMO_COMPANY, password_hash=hash_password(DEMO_PASSWORD))
    db.add(company)
    db.flush()
    adapter.assign_role(db, company)
    subscription_service.attach_initial_subscription(
        db, adapter, company.id, subscription_service.get_free_plan(db)
    )
    db.commit()
    logger.info(f"Demo company created: {DEMO_COMPANY['email']} (ID: {company.id})")
    return True


def main() -> int:
    init_db()
    db = SessionLocal()
    try:
        seed_reference_data(db)
        seed_demo_company(db)
    except Exception as e:
        db.rollback()
        logger.error(f"Seed failed: {e}", exc_info=True)
        return 1
    finally:
        db.close()

    print(f"\n[SUCCESS] Database seeded. Demo company: {DEMO_COMPANY['email']} / {DEMO_PASSWORD}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
