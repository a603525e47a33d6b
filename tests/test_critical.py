"""
Critical Integration Tests for CampusConnect
============================================

Focused tests covering the integration points most likely to break.
Run with: pytest tests/test_critical.py -v
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from campusconnect import CampusConnect
from campusconnect.app import create_app


def _base_app(db_dir):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = db_dir
    app.config["DATABASE"] = os.path.join(db_dir, "campusconnect.db")
    app.config["RESEND_API_KEY"] = ""
    app.config["ADMIN_PASSWORD"] = ""
    return app


# ---------------------------------------------------------------------------
# 1. Framework initialisation -- CampusConnect(app) does not raise
# ---------------------------------------------------------------------------

def test_framework_initialisation(tmp_db_dir):
    """CampusConnect(app) boots without errors and stores itself on the app."""
    app = _base_app(tmp_db_dir)
    ext = CampusConnect(app)

    assert "campusconnect" in app.extensions
    assert app.extensions["campusconnect"] is ext
    assert ext.notifications is not None


# ---------------------------------------------------------------------------
# 2. Config resolution -- defaults fill gaps without overriding the app
# ---------------------------------------------------------------------------

def test_config_defaults_do_not_override(app, tmp_db_dir):
    assert app.config["DATABASE"] == os.path.join(tmp_db_dir, "campusconnect.db")
    assert app.config["SECRET_KEY"] == "test-secret"
    assert app.config["EMAIL_BRAND_NAME"] == "CampusConnect"
    assert app.config["DATA_BACKEND"] == "sqlite"


def test_database_defaults_to_db_dir(tmp_db_dir):
    app = Flask(__name__)
    app.config["DB_DIR"] = tmp_db_dir
    app.config["RESEND_API_KEY"] = ""
    CampusConnect(app)

    assert app.config["DATABASE"].startswith(tmp_db_dir)
    assert app.config["SECRET_KEY"], "SECRET_KEY should fall back to the Config default"


# ---------------------------------------------------------------------------
# 3. Email service init -- providers initialise without crashing
# ---------------------------------------------------------------------------

def test_email_service_init_resend(app):
    """EmailService.init_app() with Resend provider stores config correctly."""
    from campusconnect.modules.email.email_service import EmailService

    svc = EmailService()
    app.config["RESEND_API_KEY"] = "re_test_fake_key_123"
    app.config["EMAIL_PROVIDER"] = "resend"
    app.config["EMAIL_BRAND_NAME"] = "TestBrand"

    svc.init_app(app)

    assert svc.provider == "resend"
    assert svc.brand_name == "TestBrand"
    assert svc.api_key == "re_test_fake_key_123"


def test_email_style_config_reaches_templates(tmp_db_dir):
    app = _base_app(tmp_db_dir)
    app.config["EMAIL_STYLE"] = {"accent": "#6366f1", "btn_bg": "#6366f1"}
    ext = CampusConnect(app)

    assert ext.email_service.style["btn_bg"] == "#6366f1"
    assert ext.email_service.style["bg"] == "#0f172a"
    _, html_body, _ = ext.email_service.welcome_message("Ada")
    assert "background: #6366f1" in html_body


def test_email_style_defaults_to_empty(app):
    assert app.config["EMAIL_STYLE"] == {}


def test_email_service_init_ses(app):
    """SES provider does not crash even if boto3 is not installed."""
    from campusconnect.modules.email.email_service import EmailService

    svc = EmailService()
    app.config["EMAIL_PROVIDER"] = "ses"
    app.config["AWS_REGION"] = "us-east-1"

    svc.init_app(app)

    assert svc.provider == "ses"


def test_email_service_init_smtp_without_password(app):
    from campusconnect.modules.email.email_service import EmailService

    svc = EmailService()
    app.config["EMAIL_PROVIDER"] = "smtp"
    app.config["EMAIL_PASSWORD"] = None

    svc.init_app(app)

    assert svc.provider == "smtp"
    assert svc.is_configured is False


# ---------------------------------------------------------------------------
# 4. Blueprint registration
# ---------------------------------------------------------------------------

def test_all_blueprints_registered(app):
    registered = app.extensions["campusconnect"].get_registered_modules()
    assert registered == ["waitlist", "dashboard"]
    assert "waitlist" in app.blueprints
    assert "admin" in app.blueprints


def test_features_can_disable_dashboard(tmp_db_dir):
    app = _base_app(tmp_db_dir)
    ext = CampusConnect(app, {"features": {"dashboard": False}})

    assert ext.get_registered_modules() == ["waitlist"]
    assert "admin" not in app.blueprints
    assert app.test_client().get("/").status_code == 200


def test_dashboard_renders_without_waitlist(tmp_db_dir):
    app = _base_app(tmp_db_dir)
    ext = CampusConnect(app, {"features": {"waitlist": False}})

    assert ext.get_registered_modules() == ["dashboard"]
    response = app.test_client().get("/admin/")
    assert response.status_code == 200
    assert "Admin Panel" in response.get_data(as_text=True)


# ---------------------------------------------------------------------------
# 5. Routes -- every public and admin surface is in the URL map
# ---------------------------------------------------------------------------

EXPECTED_RULES = [
    ("/", "GET"),
    ("/", "POST"),
    ("/api/waitlist", "POST"),
    ("/admin", "GET"),
    ("/admin/send-update", "POST"),
    ("/admin/send-launch", "POST"),
    ("/admin/refresh", "POST"),
    ("/admin/api/subscribers", "GET"),
    ("/admin/api/stats", "GET"),
    ("/admin/api/notifications", "GET"),
    ("/admin/api/logs", "GET"),
    ("/admin/api/send-update", "POST"),
    ("/admin/api/send-launch", "POST"),
    ("/health", "GET"),
]


@pytest.mark.parametrize("rule,method", EXPECTED_RULES)
def test_route_registered(app, rule, method):
    methods = set()
    for r in app.url_map.iter_rules():
        if r.rule == rule:
            methods |= r.methods
    assert method in methods, f"{method} {rule} not registered"


# ---------------------------------------------------------------------------
# 6. Template context and filters
# ---------------------------------------------------------------------------

def test_template_context_injection(app):
    with app.test_request_context("/"):
        ctx = {}
        for func in app.template_context_processors[None]:
            ctx.update(func())

        assert ctx["brand_name"] == "CampusConnect"
        assert isinstance(ctx["current_year"], int)


def test_format_date_filter_registered(app):
    fmt = app.jinja_env.filters["format_date"]
    assert fmt("2025-03-04 10:11:12") == "04 Mar 2025"
    assert fmt("2025-03-04T10:11:12+00:00") == "04 Mar 2025"
    assert fmt(None) == ""
    assert fmt("not a date") == "not a date"


# ---------------------------------------------------------------------------
# 7. Database directory creation
# ---------------------------------------------------------------------------

def test_database_dir_creation():
    d = tempfile.mkdtemp(prefix="campusconnect-dbtest-")
    target = os.path.join(d, "sub", "databases")

    try:
        app = _base_app(target)
        CampusConnect(app)
        assert os.path.isdir(target), f"DB_DIR was not created at {target}"
        assert os.path.isfile(app.config["DATABASE"])
    finally:
        shutil.rmtree(d, ignore_errors=True)


def test_unknown_backend_rejected(tmp_db_dir):
    app = _base_app(tmp_db_dir)
    app.config["DATA_BACKEND"] = "mongodb"
    with pytest.raises(ValueError):
        CampusConnect(app)


# ---------------------------------------------------------------------------
# 8. Health endpoint
# ---------------------------------------------------------------------------

def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "ok"
    assert data["checks"]["database"]["ok"] is True
    assert data["checks"]["email"]["provider"] == "resend"


# ---------------------------------------------------------------------------
# 9. Admin auth guard
# ---------------------------------------------------------------------------

def test_admin_open_without_password(client):
    response = client.get("/admin")
    assert response.status_code == 200


def test_admin_auth_redirect(tmp_db_dir):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DATABASE": os.path.join(tmp_db_dir, "campusconnect.db"),
        "RESEND_API_KEY": "",
        "ADMIN_EMAIL": "admin@example.com",
        "ADMIN_PASSWORD": "hunter22",
    })
    client = app.test_client()

    response = client.get("/admin", follow_redirects=False)
    assert response.status_code == 302
    assert "/admin/login" in response.headers.get("Location", "")

    api = client.get("/admin/api/stats")
    assert api.status_code == 401

    bad = client.post("/admin/login", data={"email": "admin@example.com", "password": "nope"})
    assert bad.status_code == 401

    good = client.post("/admin/login?next=/admin",
                       data={"email": "Admin@Example.com", "password": "hunter22"})
    assert good.status_code == 302
    assert client.get("/admin").status_code == 200

    client.get("/admin/logout")
    assert client.get("/admin").status_code == 302


def test_login_ignores_offsite_next(tmp_db_dir):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DATABASE": os.path.join(tmp_db_dir, "campusconnect.db"),
        "RESEND_API_KEY": "",
        "ADMIN_EMAIL": "admin@example.com",
        "ADMIN_PASSWORD": "hunter22",
    })
    response = app.test_client().post(
        "/admin/login?next=//evil.example.com",
        data={"email": "admin@example.com", "password": "hunter22"},
    )
    assert response.status_code == 302
    assert "evil.example.com" not in response.headers["Location"]


# ---------------------------------------------------------------------------
# 10. CORS on the public API
# ---------------------------------------------------------------------------

def test_waitlist_api_allows_cross_origin(client):
    response = client.post(
        "/api/waitlist",
        json={},
        headers={"Origin": "https://campusconnect.example.com"},
    )
    assert response.headers.get("Access-Control-Allow-Origin") in ("*", "https://campusconnect.example.com")
