"""
Route-level tests for usage limits on job postings and applications.
"""
from jobboard.db.models import (
    CompanySubscription,
    Job,
    JobApplication,
    SubscriptionStatus,
    UserSubscription,
)

JOB_PAYLOAD = {
    "title": "Backend Engineer",
    "description": "Build APIs",
    "location": "Remote",
    "salary": "10-20 LPA",
}


def _post_job(client, headers, job_type):
    return client.post("/api/jobs", json={**JOB_PAYLOAD, "type": job_type}, headers=headers)


def test_five_applications_then_blocked(client, db, create_user, create_company, create_job, auth_headers):
    """Free plan allows 5 applications; the 6th is refused with an upgrade hint."""
    user = create_user()
    company = create_company()
    jobs = [create_job(company, title=f"Job {i}") for i in range(6)]
    headers = auth_headers(user)

    for i, job in enumerate(jobs[:5], start=1):
        response = client.post("/api/applications", json={"job_id": job.id}, headers=headers)
        assert response.status_code == 201
        assert response.json()["usage"]["used"] == i

    response = client.post("/api/applications", json={"job_id": jobs[5].id}, headers=headers)

    assert response.status_code == 403
    body = response.json()
    assert body["code"] == "limit_reached"
    assert body["limit"] == 5
    assert "Upgrade to premium" in body["error"]

    db.expire_all()
    assert db.query(JobApplication).filter(JobApplication.applicant_id == user.id).count() == 5
    subscription = db.query(UserSubscription).filter(UserSubscription.user_id == user.id).one()
    assert subscription.applications_used == 5


def test_company_job_and_internship_limits(client, db, create_company, auth_headers):
    """Free plan: 1 job and 2 internships, tracked independently."""
    company = create_company()
    headers = auth_headers(company)

    assert _post_job(client, headers, "FULL_TIME").status_code == 201

    second = _post_job(client, headers, "FULL_TIME")
    assert second.status_code == 403
    assert second.json()["resource"] == "job"

    # Part-time and contract share the job counter
    assert _post_job(client, headers, "CONTRACT").status_code == 403

    first_internship = _post_job(client, headers, "INTERNSHIP")
    assert first_internship.status_code == 201
    assert first_internship.json()["usage"] == {
        "resource": "internship", "used": 1, "limit": 2, "remaining": 1, "unlimited": False,
    }
    assert _post_job(client, headers, "INTERNSHIP").status_code == 201
    assert _post_job(client, headers, "INTERNSHIP").status_code == 403

    db.expire_all()
    subscription = db.query(CompanySubscription).filter(CompanySubscription.company_id == company.id).one()
    assert subscription.jobs_posted == 1
    assert subscription.internships_posted == 2
    assert db.query(Job).filter(Job.company_id == company.id).count() == 3


def test_pending_subscription_cannot_post(client, create_company, auth_headers):
    company = create_company(status=SubscriptionStatus.PENDING)

    response = _post_job(client, auth_headers(company), "FULL_TIME")

    assert response.status_code == 403
    assert response.json()["code"] == "subscription_required"


def test_duplicate_application_does_not_consume_quota(client, db, create_user, create_company, create_job, auth_headers):
    user = create_user()
    job = create_job(create_company())
    headers = auth_headers(user)

    assert client.post("/api/applications", json={"job_id": job.id}, headers=headers).status_code == 201
    response = client.post("/api/applications", json={"job_id": job.id}, headers=headers)

    assert response.status_code == 409
    db.expire_all()
    subscription = db.query(UserSubscription).filter(UserSubscription.user_id == user.id).one()
    assert subscription.applications_used == 1


def test_application_to_missing_job_does_not_consume_quota(client, db, create_user, auth_headers):
    user = create_user()

    response = client.post("/api/applications", json={"job_id": 4242}, headers=auth_headers(user))

    assert response.status_code == 404
    db.expire_all()
    subscription = db.query(UserSubscription).filter(UserSubscription.user_id == user.id).one()
    assert subscription.applications_used == 0


def test_failed_create_rolls_back_counter(client, db, create_company, auth_headers, monkeypatch):
    """If the job row cannot be written, the counter increment is discarded too."""
    from jobboard.api.routes import jobs as jobs_routes

    company = create_company()

    def explode(**kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(jobs_routes, "Job", explode)

    response = _post_job(client, auth_headers(company), "FULL_TIME")

    assert response.status_code == 500
    db.expire_all()
    subscription = db.query(CompanySubscription).filter(CompanySubscription.company_id == company.id).one()
    assert subscription.jobs_posted == 0
