import os
import tempfile

# logger and config read these at import time
os.environ.setdefault("APP_LOG_DIR", tempfile.mkdtemp(prefix="vendor-catalog-logs-"))
os.environ["APP_ENV"] = "testing"

import mongomock
import pytest

from app import create_app
from app.models.vendor_model import Vendor


ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "adminpass1"
DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path):
    overrides = {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "BCRYPT_LOG_ROUNDS": 4,
        "RATELIMIT_ENABLED": False,
        "FILE_SERVER_ROOT": str(tmp_path),
        "UPLOAD_ROOT_DIR": str(tmp_path / "uploads"),
        "EMAIL_PROVIDER": "smtp",
        "SENDER_EMAIL": "noreply@example.com",
    }
    app = create_app(config_overrides=overrides, mongo_client=mongomock.MongoClient())
    with app.app_context():
        Vendor(username=ADMIN_USERNAME, password=ADMIN_PASSWORD, role="admin").save()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload_root(app):
    return app.config["UPLOAD_ROOT_DIR"]


def login(client, username, password):
    response = client.post("/api/authenticate", json={"username": username, "password": password})
    assert response.status_code == 200, response.get_json()
    return response.get_json()["data"]["token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    return bearer(login(client, ADMIN_USERNAME, ADMIN_PASSWORD))


@pytest.fixture
def make_vendor(client, admin_headers):
    """Create a vendor through the API and return (vendor_id, user headers)."""
    def _make(username, password=DEFAULT_PASSWORD, contact=None):
        payload = {"username": username, "password": password, "role": "user"}
        if contact is not None:
            payload["contact"] = contact
        response = client.post("/api/vendor", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.get_json()
        vendor_id = response.get_json()["data"]["_id"]
        return vendor_id, bearer(login(client, username, password))
    return _make


@pytest.fixture
def vendor(make_vendor):
    return make_vendor("shopone")


@pytest.fixture
def product_payload():
    return {
        "category": "shoes",
        "name": "Runner",
        "description": "Light running shoe",
        "price": 59.9,
        "keywords": ["running", "shoe"],
    }


@pytest.fixture
def make_product(client, product_payload):
    def _make(vendor_id, headers, **overrides):
        payload = dict(product_payload, **overrides)
        response = client.post(f"/api/vendor/{vendor_id}/products", json=payload, headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]["_id"]
    return _make
