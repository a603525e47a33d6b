"""
Shared fixtures: a fully initialised app on a throwaway SQLite database.
Run with: pytest -v  (install with: pip install -e ".[dev]")
"""

import os
import shutil
import tempfile

import pytest

from campusconnect.app import create_app


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="campusconnect-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    """App with the waitlist and dashboard registered, email sending disabled."""
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DB_DIR": tmp_db_dir,
        "DATABASE": os.path.join(tmp_db_dir, "campusconnect.db"),
        "DATA_BACKEND": "sqlite",
        "EMAIL_PROVIDER": "resend",
        "RESEND_API_KEY": "",
        "EMAIL_SEND_DELAY": 0,
        "EMAIL_BRAND_NAME": "CampusConnect",
        "ADMIN_PASSWORD": "",
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def service(app):
    """The NotificationService registered on the app."""
    return app.extensions["campusconnect"].notifications


@pytest.fixture
def add_subscribers(service):
    """Insert subscribers directly through the service."""
    def _add(*people):
        for first_name, email in people:
            service.insert_subscriber({"first_name": first_name, "email": email})
    return _add
