"""Tests for the contact form route."""

import pytest
from fastapi.testclient import TestClient

from portfolio_api.api.routes.contact import get_contact_service
from portfolio_api.core.config import settings
from portfolio_api.main import app
from portfolio_api.schemas.contact import ContactReceipt
from portfolio_api.services.contact_service import ContactSubmission


class RecordingContactService:
    def __init__(self) -> None:
        self.submissions: list[ContactSubmission] = []

    def submit(self, submission: ContactSubmission) -> ContactReceipt:
        self.submissions.append(submission)
        return ContactReceipt(name=submission.name, delivery="test")


@pytest.fixture
def service():
    recording = RecordingContactService()
    app.dependency_overrides[get_contact_service] = lambda: recording
    yield recording
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


VALID_FORM = {"name": "Jane Doe", "email": "jane@example.com", "message": "Hello there"}


def test_valid_submission_is_accepted(client: TestClient, service: RecordingContactService):
    response = client.post("/api/contact", json=VALID_FORM)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {"received": True, "name": "Jane Doe", "delivery": "test"}
    assert "error" not in body
    assert "statusCode" not in body
    assert service.submissions == [
        ContactSubmission(name="Jane Doe", email="jane@example.com", message="Hello there")
    ]


def test_success_carries_rate_limit_and_security_headers(client: TestClient, service):
    response = client.post("/api/contact", json=VALID_FORM)

    assert response.headers["X-RateLimit-Remaining"] == str(settings.rate_limit.contact_max_requests - 1)
    assert response.headers["X-RateLimit-Reset"].endswith("Z")
    assert "Retry-After" not in response.headers
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Cache-Control"] == "no-cache, no-store, must-revalidate"


def test_missing_fields_are_listed_in_order(client: TestClient, service: RecordingContactService):
    response = client.post("/api/contact", json={"name": "John", "email": "  "})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "VALIDATION_ERROR"
    assert body["message"] == "All fields are required"
    assert body["statusCode"] == 400
    assert body["details"] == {"missingFields": ["email", "message"]}
    assert "data" not in body
    assert service.submissions == []


def test_invalid_email_is_rejected(client: TestClient, service: RecordingContactService):
    response = client.post("/api/contact", json={**VALID_FORM, "email": "not-an-email"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid email format"
    assert body["details"] == {"field": "email"}
    assert service.submissions == []


def test_markup_is_stripped_from_submission(client: TestClient, service: RecordingContactService):
    client.post("/api/contact", json={**VALID_FORM, "message": "<b>Hi</b> onclick=alert(1)"})

    assert service.submissions[0].message == "bHi/b alert(1)"


def test_message_that_is_only_markup_counts_as_missing(client: TestClient, service):
    response = client.post("/api/contact", json={**VALID_FORM, "message": "<>"})

    assert response.status_code == 400
    assert response.json()["details"] == {"missingFields": ["message"]}


def test_malformed_body_is_a_validation_error(client: TestClient, service):
    response = client.post("/api/contact", json={"name": 123})

    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert response.headers["X-RateLimit-Remaining"] == str(settings.rate_limit.contact_max_requests - 1)
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_contact_form_is_rate_limited_per_ip(client: TestClient, service: RecordingContactService):
    headers = {"X-Forwarded-For": "203.0.113.50"}
    for _ in range(settings.rate_limit.contact_max_requests):
        assert client.post("/api/contact", json=VALID_FORM, headers=headers).status_code == 200

    response = client.post("/api/contact", json=VALID_FORM, headers=headers)

    assert response.status_code == 429
    body = response.json()
    assert body["error"] == "RATE_LIMITED"
    assert body["details"]["retryAfter"] > 0
    assert int(response.headers["Retry-After"]) == body["details"]["retryAfter"]
    assert len(service.submissions) == settings.rate_limit.contact_max_requests

    other = client.post("/api/contact", json=VALID_FORM, headers={"X-Forwarded-For": "203.0.113.51"})
    assert other.status_code == 200


def test_rejected_requests_still_consume_quota(client: TestClient, service):
    headers = {"X-Forwarded-For": "203.0.113.60"}
    for _ in range(settings.rate_limit.contact_max_requests):
        client.post("/api/contact", json={}, headers=headers)

    assert client.post("/api/contact", json=VALID_FORM, headers=headers).status_code == 429
