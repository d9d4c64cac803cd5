"""
Shared fixtures: in-memory SQLite database, seeded plans, entity factories
and a TestClient wired to the test database.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import jobboard.db.models  # noqa: F401
from jobboard.core.principals import EntityKind
from jobboard.core.rate_limit import reset_rate_limits
from jobboard.core.security import TokenCodec, hash_password
from jobboard.db.base import Base
from jobboard.db.init_db import FREE_PLAN_NAME, PREMIUM_PLAN_NAME, seed_reference_data
from jobboard.db.models import Job, JobType, Plan, SubscriptionStatus
from jobboard.db.session import get_db
from jobboard.main import app
from jobboard.services import subscription_service
from jobboard.services.entity_service import adapter_for
from jobboard.services.payment_provider import MockPaymentProvider


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_SECRET_KEY = "test-secret-key"
TEST_PAYMENT_SECRET = "test-payment-secret"
TEST_PASSWORD = "testpass123"
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create tables and seed roles/plans for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()
    reset_rate_limits()
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db():
    """Provide a database session for tests."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def codec():
    return TokenCodec(TEST_SECRET_KEY)


@pytest.fixture
def provider():
    return MockPaymentProvider(TEST_PAYMENT_SECRET)


@pytest.fixture
def client(codec, provider):
    """TestClient bound to the test database, codec and mock provider."""
    app.dependency_overrides[get_db] = override_get_db
    app.state.token_codec = codec
    app.state.payment_provider = provider
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def free_plan(db):
    return db.query(Plan).filter(Plan.name == FREE_PLAN_NAME).one()


@pytest.fixture
def premium_plan(db):
    return db.query(Plan).filter(Plan.name == PREMIUM_PLAN_NAME).one()


def _create_entity(db, kind, email, name, plan_name, status, banned):
    adapter = adapter_for(kind)
    entity = adapter.model(
        email=email,
        name=name,
        password_hash=TEST_PASSWORD_HASH,
        is_banned=banned,
    )
    db.add(entity)
    db.flush()
    adapter.assign_role(db, entity)

    if plan_name is not None:
        plan = db.query(Plan).filter(Plan.name == plan_name).one()
        subscription = subscription_service.attach_initial_subscription(db, adapter, entity.id, plan)
        if status is not None:
            subscription.status = status

    db.commit()
    db.refresh(entity)
    return entity


@pytest.fixture
def create_user(db):
    """
    Factory for users.

    plan_name=None leaves the user without a subscription; status overrides
    the status the plan would normally start in.
    """
    def _create(email="jane@example.com", name="Jane Doe", plan_name=FREE_PLAN_NAME,
                status=SubscriptionStatus.ACTIVE, banned=False):
        return _create_entity(db, EntityKind.USER, email, name, plan_name, status, banned)
    return _create


@pytest.fixture
def create_company(db):
    """Factory for companies, same options as create_user."""
    def _create(email="hr@acme.example.com", name="Acme Corp", plan_name=FREE_PLAN_NAME,
                status=SubscriptionStatus.ACTIVE, banned=False):
        return _create_entity(db, EntityKind.COMPANY, email, name, plan_name, status, banned)
    return _create


@pytest.fixture
def create_job(db):
    """Factory for job postings inserted directly (no quota)."""
    def _create(company, title="Backend Engineer", type=JobType.FULL_TIME,
                location="Remote", removed=False):
        job = Job(
            company_id=company.id,
            title=title,
            description=f"{title} at {company.name}",
            location=location,
            salary="10-20 LPA",
            type=type,
            is_removed=removed,
        )
        db.add(job)
        db.commit()
        db.refresh(job)
        return job
    return _create


@pytest.fixture
def auth_headers(codec):
    """Build an Authorization header for a User or Company row."""
    def _headers(entity, kind=None):
        if kind is None:
            kind = EntityKind.COMPANY if hasattr(entity, "industry") else EntityKind.USER
        return {"Authorization": f"Bearer {codec.issue(entity.id, kind)}"}
    return _headers
