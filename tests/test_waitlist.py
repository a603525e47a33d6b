"""
Signup form tests: validation, first-time signup, duplicates and failures,
through the form object and both the HTML and JSON routes.
"""

from unittest.mock import MagicMock, PropertyMock, patch

import pytest

from campusconnect.modules.email.email_service import EmailService
from campusconnect.modules.notifications import ServiceError, DuplicateSubscriberError
from campusconnect.modules.waitlist.forms import (
    SignupForm, MISSING, INVALID, SUBSCRIBED, DUPLICATE, ERROR,
)


def _notification_rows(service):
    return service.recent_notifications(100)


# ---------------------------------------------------------------------------
# SignupForm
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("first_name,email,notify", [
    ("", "ada@example.com", True),
    ("Ada", "", True),
    ("Ada", "ada@example.com", False),
    ("   ", "ada@example.com", True),
    ("", "", False),
])
def test_missing_field_never_calls_service(first_name, email, notify):
    service = MagicMock()
    form = SignupForm(first_name, email, notify)

    result = form.submit(service)

    assert result.outcome == MISSING
    assert result.title == "Missing Information"
    assert service.method_calls == []


def test_malformed_email_never_calls_service():
    service = MagicMock()
    result = SignupForm("Ada", "ada..lovelace@example", True).submit(service)

    assert result.outcome == INVALID
    assert service.method_calls == []


def test_from_data_accepts_camel_case_and_checkbox_values():
    form = SignupForm.from_data({"firstName": " Ada ", "email": "ada@example.com", "notify": "on"})
    assert form.first_name == "Ada"
    assert form.notify is True

    form = SignupForm.from_data({"first_name": "Ada", "email": "ada@example.com", "consent": False})
    assert form.notify is False

    assert SignupForm.from_data(None).is_complete() is False


def test_duplicate_is_soft_success_and_clears_form():
    service = MagicMock()
    service.insert_subscriber.side_effect = DuplicateSubscriberError("ada@example.com")
    form = SignupForm("Ada", "ada@example.com", True)

    result = form.submit(service, "CampusConnect")

    assert result.outcome == DUPLICATE
    assert result.category == "info"
    assert "already on our list" in result.message
    assert result.clears_form
    assert (form.first_name, form.email, form.notify) == ("", "", False)
    service.send_welcome.assert_not_called()


def test_service_failure_keeps_form_intact():
    service = MagicMock()
    service.insert_subscriber.side_effect = ServiceError("connection refused")
    form = SignupForm("Ada", "ada@example.com", True)

    result = form.submit(service)

    assert result.outcome == ERROR
    assert result.message == "Something went wrong. Please try again."
    assert not result.clears_form
    assert form.email == "ada@example.com"


def test_welcome_log_failure_does_not_undo_signup():
    service = MagicMock()
    service.insert_subscriber.return_value = {"email": "ada@example.com", "first_name": "Ada"}
    service.send_welcome.side_effect = ServiceError("log table locked")

    result = SignupForm("Ada", "ada@example.com", True).submit(service, "CampusConnect")

    assert result.outcome == SUBSCRIBED
    assert result.message == "Thanks Ada! We'll notify you at ada@example.com when CampusConnect launches."


# ---------------------------------------------------------------------------
# Service-backed signup
# ---------------------------------------------------------------------------

def test_fresh_signup_creates_subscriber_and_welcome_record(service):
    result = SignupForm("Ada", "Ada@Example.com ", True).submit(service)

    assert result.outcome == SUBSCRIBED
    subscribers = service.list_subscribers()
    assert [s["email"] for s in subscribers] == ["ada@example.com"]
    assert subscribers[0]["first_name"] == "Ada"
    assert subscribers[0]["is_active"] is True

    rows = _notification_rows(service)
    assert len(rows) == 1
    assert rows[0]["type"] == "welcome"
    assert rows[0]["recipient_email"] == "ada@example.com"
    assert rows[0]["success"] is True


def test_resubmitting_same_email_adds_nothing(service):
    SignupForm("Ada", "ada@example.com", True).submit(service)
    result = SignupForm("Ada", "ADA@example.com", True).submit(service)

    assert result.outcome == DUPLICATE
    assert len(service.list_subscribers()) == 1
    assert service.get_stats() == {"total_subscribers": 1, "total_notifications": 1}


def test_welcome_email_sent_when_provider_configured(service):
    with patch.object(EmailService, "is_configured", new_callable=PropertyMock, return_value=True), \
            patch.object(service.email_service, "send_welcome_email", return_value=False) as send:
        SignupForm("Ada", "ada@example.com", True).submit(service)

    send.assert_called_once_with("ada@example.com", "Ada")
    rows = _notification_rows(service)
    assert rows[0]["type"] == "welcome"
    assert rows[0]["success"] is False


# ---------------------------------------------------------------------------
# HTML routes
# ---------------------------------------------------------------------------

def test_landing_page_renders_form(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "Launching" in body
    assert 'name="first_name"' in body
    assert 'name="notify"' in body


def test_form_post_missing_fields_shows_warning(client, service):
    response = client.post("/", data={"first_name": "Ada", "email": "ada@example.com"})

    assert response.status_code == 400
    body = response.get_data(as_text=True)
    assert "Missing Information" in body
    assert 'value="ada@example.com"' in body
    assert service.list_subscribers() == []


def test_form_post_success_redirects_with_toast(client, service):
    response = client.post(
        "/",
        data={"first_name": "Ada", "email": "ada@example.com", "notify": "on"},
        follow_redirects=True,
    )

    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "Success!" in body
    assert "ada@example.com" in body
    assert 'value=""' in body
    assert len(service.list_subscribers()) == 1


def test_form_post_duplicate_shows_already_subscribed(client):
    data = {"first_name": "Ada", "email": "ada@example.com", "notify": "on"}
    client.post("/", data=data)
    response = client.post("/", data=data, follow_redirects=True)

    body = response.get_data(as_text=True)
    assert "Already Subscribed!" in body
    assert "Something went wrong" not in body


def test_form_post_unexpected_error_is_generic(client, app):
    broken = MagicMock()
    broken.insert_subscriber.side_effect = RuntimeError("boom")
    app.extensions["campusconnect"].notifications = broken

    response = client.post("/", data={"first_name": "Ada", "email": "ada@example.com", "notify": "on"})

    assert response.status_code == 500
    assert "Something went wrong. Please try again." in response.get_data(as_text=True)

    logs = client.get("/admin/api/logs?source=waitlist").get_json()["logs"]
    assert logs[0]["message"] == "Exception occurred: RuntimeError"
    assert "boom" in logs[0]["details"]


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------

def test_api_signup_flow(client, service):
    payload = {"firstName": "Grace", "email": "grace@example.com", "notify": True}

    first = client.post("/api/waitlist", json=payload)
    assert first.status_code == 201
    assert first.get_json()["outcome"] == "subscribed"

    second = client.post("/api/waitlist", json=payload)
    assert second.status_code == 200
    assert second.get_json()["title"] == "Already Subscribed! 🎉"

    assert service.get_stats()["total_subscribers"] == 1


def test_api_missing_consent_makes_no_call(client, app):
    spy = MagicMock()
    app.extensions["campusconnect"].notifications = spy

    response = client.post("/api/waitlist", json={"firstName": "Grace", "email": "grace@example.com"})

    assert response.status_code == 400
    assert response.get_json()["outcome"] == "missing"
    assert spy.method_calls == []


def test_api_rejects_non_json_body(client):
    response = client.post("/api/waitlist", data="not json", content_type="text/plain")
    assert response.status_code == 400


@pytest.mark.parametrize("payload", [
    {"firstName": "Grace", "email": 5, "notify": True},
    {"firstName": ["Grace"], "email": "grace@example.com", "notify": True},
    {"firstName": None, "email": {"address": "grace@example.com"}, "notify": True},
])
def test_api_non_string_fields_count_as_missing(client, service, payload):
    response = client.post("/api/waitlist", json=payload)

    assert response.status_code == 400
    assert response.get_json()["outcome"] == "missing"
    assert service.list_subscribers() == []
