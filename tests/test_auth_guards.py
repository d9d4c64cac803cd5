"""
Tests for the authorization gate: token extraction, kind gating and bans.
"""
import pytest

from jobboard.core.auth_dependency import require_company, require_user
from jobboard.core.errors import Forbidden, Unauthorized
from jobboard.core.principals import EntityKind, Principal


def test_missing_token(client):
    response = client.get("/api/subscriptions/current")

    assert response.status_code == 401
    assert response.json()["error"] == "Missing token"
    assert response.json()["code"] == "unauthorized"


def test_non_bearer_scheme_is_missing_token(client):
    response = client.get("/api/subscriptions/current", headers={"Authorization": "Basic abc"})
    assert response.status_code == 401
    assert response.json()["error"] == "Missing token"


def test_invalid_token(client):
    response = client.get(
        "/api/subscriptions/current",
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"


def test_company_token_on_user_route(client, create_company, create_job, auth_headers):
    company = create_company()
    job = create_job(company)

    response = client.post("/api/applications", json={"job_id": job.id}, headers=auth_headers(company))

    assert response.status_code == 403
    assert response.json()["error"] == "Only users can perform this action"


def test_user_token_on_company_route(client, create_user, auth_headers):
    user = create_user()

    response = client.post(
        "/api/jobs",
        json={"title": "X", "description": "Y", "location": "Z", "type": "FULL_TIME"},
        headers=auth_headers(user),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Only companies can perform this action"


def test_banned_user_forbidden(client, create_user, create_company, create_job, auth_headers):
    user = create_user(banned=True)
    job = create_job(create_company())

    response = client.post("/api/applications", json={"job_id": job.id}, headers=auth_headers(user))

    assert response.status_code == 403
    assert response.json()["error"] == "Account is banned"


def test_banned_company_forbidden(client, create_company, auth_headers):
    company = create_company(banned=True)

    response = client.get("/api/jobs/company/my-jobs", headers=auth_headers(company))

    assert response.status_code == 403
    assert response.json()["error"] == "Account is banned"


def test_banned_entity_forbidden_on_shared_routes(client, create_user, auth_headers):
    user = create_user(banned=True)

    response = client.get("/api/subscriptions/usage", headers=auth_headers(user))

    assert response.status_code == 403
    assert response.json()["error"] == "Account is banned"


def test_token_for_deleted_entity(client, codec):
    headers = {"Authorization": f"Bearer {codec.issue(9999, EntityKind.USER)}"}

    response = client.get("/api/bookmarks", headers=headers)

    assert response.status_code == 401


def test_kind_checked_before_ban(db, create_company):
    """A banned company calling a user route learns about the kind, not the ban."""
    company = create_company(banned=True)
    principal = Principal(entity_id=company.id, entity_kind=EntityKind.COMPANY)

    with pytest.raises(Forbidden) as exc:
        require_user(principal, db)
    assert exc.value.message == "Only users can perform this action"


def test_guard_returns_principal(db, create_company):
    company = create_company()
    principal = Principal(entity_id=company.id, entity_kind=EntityKind.COMPANY)

    assert require_company(principal, db) == principal


def test_guard_rejects_unknown_entity(db):
    with pytest.raises(Unauthorized):
        require_user(Principal(entity_id=12345, entity_kind=EntityKind.USER), db)
