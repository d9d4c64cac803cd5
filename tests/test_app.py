"""
Tests for app-level wiring: root, health and error bodies.
"""
import pytest
from fastapi import FastAPI

from jobboard.core import config
from jobboard.core.security import TokenCodec
from jobboard.main import configure_services
from jobboard.services.payment_provider import MockPaymentProvider


def test_root(client):
    assert client.get("/").json() == {"status": "Job Board API running"}


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "connected"


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_validation_error_body(client):
    response = client.post("/api/auth/login", json={"email": "a@example.com"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert {detail["field"] for detail in body["details"]} == {"password", "entity_type"}


def test_services_require_token_secret(monkeypatch):
    monkeypatch.setattr(config, "SECRET_KEY", None)
    monkeypatch.setattr(config, "PAYMENT_SIGNING_SECRET", "payment-secret")

    with pytest.raises(ValueError):
        configure_services(FastAPI())


def test_services_require_payment_secret(monkeypatch):
    monkeypatch.setattr(config, "SECRET_KEY", "token-secret")
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", None)
    monkeypatch.setattr(config, "PAYMENT_SIGNING_SECRET", None)

    with pytest.raises(ValueError):
        configure_services(FastAPI())


def test_services_built_from_config(monkeypatch):
    monkeypatch.setattr(config, "SECRET_KEY", "token-secret")
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", None)
    monkeypatch.setattr(config, "PAYMENT_SIGNING_SECRET", "payment-secret")
    app = FastAPI()

    configure_services(app)

    assert isinstance(app.state.token_codec, TokenCodec)
    assert isinstance(app.state.payment_provider, MockPaymentProvider)
