"""
Tests for user and company registration endpoints.
"""
from jobboard.db.models import Company, CompanySubscription, SubscriptionStatus, User, UserSubscription


def test_register_user_success(client, db, codec):
    """Registration returns a token, the User role and a free ACTIVE subscription."""
    response = client.post(
        "/api/auth/register/user",
        json={
            "name": "Jane Doe",
            "email": "Jane.Doe@Example.com",
            "password": "testpass123",
            "skills": "python,sql",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["entity_type"] == "User"
    assert data["roles"] == ["User"]
    assert data["token_type"] == "bearer"
    assert data["profile"]["email"] == "jane.doe@example.com"
    assert data["profile"]["skills"] == "python,sql"
    assert "password_hash" not in data["profile"]
    assert data["subscription"]["plan"]["name"] == "Free Plan"
    assert data["subscription"]["applications_used"] == 0

    principal = codec.verify(data["access_token"])
    assert principal.entity_id == data["profile"]["id"]
    assert principal.is_user

    user = db.query(User).filter(User.email == "jane.doe@example.com").one()
    subscription = db.query(UserSubscription).filter(UserSubscription.user_id == user.id).one()
    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.plan.name == "Free Plan"
    assert subscription.applications_used == 0
    assert subscription.payments == []


def test_register_company_success(client, db):
    response = client.post(
        "/api/auth/register/company",
        json={
            "name": "Acme Corp",
            "email": "hr@acme.example.com",
            "password": "testpass123",
            "industry": "Software",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["entity_type"] == "Company"
    assert data["roles"] == ["Company"]
    assert data["profile"]["industry"] == "Software"

    company = db.query(Company).filter(Company.email == "hr@acme.example.com").one()
    subscription = db.query(CompanySubscription).filter(CompanySubscription.company_id == company.id).one()
    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.jobs_posted == 0
    assert subscription.internships_posted == 0


def test_register_duplicate_email(client, create_user):
    create_user(email="taken@example.com")

    response = client.post(
        "/api/auth/register/user",
        json={"name": "Someone", "email": "TAKEN@example.com", "password": "testpass123"},
    )

    assert response.status_code == 409
    assert response.json()["error"] == "Email already registered"


def test_same_email_allowed_across_kinds(client, create_user):
    """Users and companies live in separate tables."""
    create_user(email="shared@example.com")

    response = client.post(
        "/api/auth/register/company",
        json={"name": "Shared Inc", "email": "shared@example.com", "password": "testpass123"},
    )

    assert response.status_code == 201


def test_register_short_password(client):
    response = client.post(
        "/api/auth/register/user",
        json={"name": "Jane", "email": "jane@example.com", "password": "short"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_error"
    assert body["details"][0]["field"] == "password"


def test_register_password_over_bcrypt_limit(client):
    response = client.post(
        "/api/auth/register/user",
        json={"name": "Jane", "email": "jane@example.com", "password": "é" * 40},
    )

    assert response.status_code == 400


def test_register_invalid_email(client):
    response = client.post(
        "/api/auth/register/user",
        json={"name": "Jane", "email": "not-an-email", "password": "testpass123"},
    )

    assert response.status_code == 400
