"""
Integration tests for GET /api/subscriptions/usage.
"""
from jobboard.db.init_db import PREMIUM_PLAN_NAME
from jobboard.db.models import UserSubscription


def test_get_usage_free_plan_no_usage(client, create_user, auth_headers):
    """Free plan user with no applications yet."""
    response = client.get("/api/subscriptions/usage", headers=auth_headers(create_user()))

    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "Free Plan"
    assert data["status"] == "ACTIVE"
    assert data["resources"] == {
        "application": {"used": 0, "limit": 5, "remaining": 5, "unlimited": False},
    }


def test_get_usage_with_existing_usage(client, db, create_user, auth_headers):
    user = create_user()
    subscription = db.query(UserSubscription).filter(UserSubscription.user_id == user.id).one()
    subscription.applications_used = 3
    db.commit()

    response = client.get("/api/subscriptions/usage", headers=auth_headers(user))

    assert response.status_code == 200
    application = response.json()["resources"]["application"]
    assert application["used"] == 3
    assert application["remaining"] == 2


def test_get_usage_company(client, create_company, auth_headers):
    response = client.get("/api/subscriptions/usage", headers=auth_headers(create_company()))

    assert response.status_code == 200
    resources = response.json()["resources"]
    assert resources["job"]["limit"] == 1
    assert resources["internship"]["limit"] == 2


def test_get_usage_premium_unlimited(client, create_company, auth_headers):
    company = create_company(plan_name=PREMIUM_PLAN_NAME)

    response = client.get("/api/subscriptions/usage", headers=auth_headers(company))

    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "Premium Plan"
    for resource in data["resources"].values():
        assert resource["unlimited"] is True
        assert resource["remaining"] is None


def test_get_usage_without_subscription(client, create_user, auth_headers):
    user = create_user(plan_name=None)

    response = client.get("/api/subscriptions/usage", headers=auth_headers(user))

    assert response.status_code == 404


def test_get_usage_unauthorized(client):
    response = client.get("/api/subscriptions/usage")
    assert response.status_code == 401


def test_get_usage_invalid_token(client):
    headers = {"Authorization": "Bearer invalid_token"}
    response = client.get("/api/subscriptions/usage", headers=headers)
    assert response.status_code == 401
