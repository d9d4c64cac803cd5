"""
Tests for job application endpoints.
"""
import pytest

from jobboard.db.models import ApplicationStatus, JobApplication


@pytest.fixture
def applied(db, create_user, create_company, create_job, client, auth_headers):
    """A user with one PENDING application to a company's job."""
    user = create_user()
    company = create_company()
    job = create_job(company)
    response = client.post(
        "/api/applications",
        json={"job_id": job.id, "cover_letter": "Hello"},
        headers=auth_headers(user),
    )
    assert response.status_code == 201
    return user, company, job, response.json()["application"]


def _set_status(db, application_id, status):
    db.expire_all()
    db.get(JobApplication, application_id).status = status
    db.commit()


def test_apply_creates_pending_application(applied):
    user, _, job, application = applied
    assert application["status"] == "PENDING"
    assert application["job_id"] == job.id
    assert application["applicant_id"] == user.id
    assert application["cover_letter"] == "Hello"


def test_apply_to_removed_job(client, create_user, create_company, create_job, auth_headers):
    job = create_job(create_company(), removed=True)

    response = client.post("/api/applications", json={"job_id": job.id}, headers=auth_headers(create_user()))

    assert response.status_code == 404


def test_apply_without_active_subscription(client, create_user, create_company, create_job, auth_headers):
    from jobboard.db.models import SubscriptionStatus

    user = create_user(status=SubscriptionStatus.CANCELLED)
    job = create_job(create_company())

    response = client.post("/api/applications", json={"job_id": job.id}, headers=auth_headers(user))

    assert response.status_code == 403
    assert response.json()["code"] == "subscription_required"


def test_my_applications(client, applied, auth_headers):
    user, _, _, application = applied

    response = client.get("/api/applications/my-applications", headers=auth_headers(user))

    assert response.status_code == 200
    data = response.json()
    assert [a["id"] for a in data["applications"]] == [application["id"]]
    assert data["applications"][0]["job"]["title"] == "Backend Engineer"
    assert data["pagination"]["total"] == 1

    filtered = client.get(
        "/api/applications/my-applications",
        params={"status": "ACCEPTED"},
        headers=auth_headers(user),
    )
    assert filtered.json()["applications"] == []


def test_get_own_application_only(client, applied, create_user, auth_headers):
    user, _, _, application = applied
    other = create_user(email="other@example.com")

    assert client.get(f"/api/applications/{application['id']}", headers=auth_headers(user)).status_code == 200
    assert client.get(f"/api/applications/{application['id']}", headers=auth_headers(other)).status_code == 404


def test_withdraw_pending(client, applied, auth_headers):
    user, _, _, application = applied

    response = client.delete(f"/api/applications/{application['id']}", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["status"] == "WITHDRAWN"

    # Withdrawing again is a no-op
    again = client.delete(f"/api/applications/{application['id']}", headers=auth_headers(user))
    assert again.status_code == 200
    assert again.json()["status"] == "WITHDRAWN"


@pytest.mark.parametrize("status", [ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED])
def test_withdraw_final_decision_fails(client, db, applied, auth_headers, status):
    user, _, _, application = applied
    _set_status(db, application["id"], status)

    response = client.delete(f"/api/applications/{application['id']}", headers=auth_headers(user))

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"
    db.expire_all()
    assert db.get(JobApplication, application["id"]).status == status


def test_company_updates_status(client, applied, auth_headers):
    _, company, _, application = applied

    response = client.patch(
        f"/api/applications/{application['id']}/status",
        json={"status": "SHORTLISTED"},
        headers=auth_headers(company),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "SHORTLISTED"
    assert response.json()["applicant"]["email"] == "jane@example.com"


def test_company_invalid_status(client, applied, auth_headers):
    _, company, _, application = applied

    response = client.patch(
        f"/api/applications/{application['id']}/status",
        json={"status": "HIRED"},
        headers=auth_headers(company),
    )

    assert response.status_code == 400


def test_company_cannot_withdraw_for_applicant(client, applied, auth_headers):
    _, company, _, application = applied

    response = client.patch(
        f"/api/applications/{application['id']}/status",
        json={"status": "WITHDRAWN"},
        headers=auth_headers(company),
    )

    assert response.status_code == 400


def test_other_company_cannot_update_status(client, applied, create_company, auth_headers):
    _, _, _, application = applied
    other = create_company(email="hr@globex.example.com", name="Globex")

    response = client.patch(
        f"/api/applications/{application['id']}/status",
        json={"status": "REJECTED"},
        headers=auth_headers(other),
    )

    assert response.status_code == 404


def test_user_cannot_update_status(client, applied, auth_headers):
    user, _, _, application = applied

    response = client.patch(
        f"/api/applications/{application['id']}/status",
        json={"status": "ACCEPTED"},
        headers=auth_headers(user),
    )

    assert response.status_code == 403


def test_job_applications_for_owner(client, applied, create_company, auth_headers):
    _, company, job, application = applied
    other = create_company(email="hr@globex.example.com", name="Globex")

    response = client.get(f"/api/applications/job/{job.id}", headers=auth_headers(company))

    assert response.status_code == 200
    data = response.json()
    assert [a["id"] for a in data["applications"]] == [application["id"]]
    assert data["applications"][0]["applicant"]["name"] == "Jane Doe"

    assert client.get(f"/api/applications/job/{job.id}", headers=auth_headers(other)).status_code == 404
