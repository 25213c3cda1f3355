import os

from app.models.product_model import Product
from app.models.vendor_model import Vendor

CONTACT = {
    "name": "Mario",
    "lastname": "Rossi",
    "shopname": "shopone",
    "address": "Via Roma 1",
    "phone": "0123456",
    "city": "Roma",
    "state": "RM",
    "country": "Italy",
    "postcode": "00100",
    "email": "Mario@Example.COM",
    "site": "https://Example.com",
}


def test_create_vendor_provisions_subtrees(client, admin_headers, upload_root):
    response = client.post(
        "/api/vendor",
        json={"username": "shoptwo", "password": "secret123", "role": "user", "contact": CONTACT},
        headers=admin_headers,
    )
    assert response.status_code == 201
    vendor_id = response.get_json()["data"]["_id"]

    assert os.path.isdir(os.path.join(upload_root, vendor_id, "products"))
    assert os.path.isdir(os.path.join(upload_root, vendor_id, "announcements"))


def test_create_vendor_rejects_duplicate_username(client, admin_headers, vendor, upload_root):
    before = set(os.listdir(upload_root))
    response = client.post(
        "/api/vendor",
        json={"username": "shopone", "password": "secret123", "role": "user"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert "username" in response.get_json()["errors"]
    assert set(os.listdir(upload_root)) == before


def test_create_vendor_validates_body(client, admin_headers):
    response = client.post(
        "/api/vendor",
        json={"username": "bad name!", "password": "secret123", "role": "superuser"},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_only_admin_creates_vendors(client, vendor):
    _, user_headers = vendor
    payload = {"username": "sneaky", "password": "secret123", "role": "admin"}
    assert client.post("/api/vendor", json=payload, headers=user_headers).status_code == 403
    assert client.post("/api/vendor", json=payload).status_code == 403


def test_user_sees_redacted_vendor(client, vendor):
    vendor_id, user_headers = vendor
    response = client.get(f"/api/vendor/{vendor_id}", headers=user_headers)
    data = response.get_json()["data"]

    assert response.status_code == 200
    assert set(data["account"]) == {"username", "password_hash"}
    assert data["account"]["username"] == "shopone"


def test_admin_sees_full_vendor(client, admin_headers, vendor):
    vendor_id, _ = vendor
    data = client.get(f"/api/vendor/{vendor_id}", headers=admin_headers).get_json()["data"]
    assert data["account"]["role"] == "user"
    assert data["product_ids"] == []


def test_user_cannot_read_other_vendor(client, make_vendor):
    vendor_a, _ = make_vendor("shopa")
    _, headers_b = make_vendor("shopb")
    assert client.get(f"/api/vendor/{vendor_a}", headers=headers_b).status_code == 403
    assert client.get(f"/api/vendor/{vendor_a}/account", headers=headers_b).status_code == 403


def test_invalid_and_missing_vendor_ids(client, admin_headers):
    invalid = client.get("/api/vendor/not-an-id", headers=admin_headers)
    assert invalid.status_code == 400
    assert invalid.get_json()["errors"] == {"vendor_id": ["invalid vendor"]}

    missing = client.get("/api/vendor/5f1d7f3e9b1e8a3c4d2b1a00", headers=admin_headers)
    assert missing.status_code == 404


def test_list_vendors_paginates_and_filters(client, admin_headers, make_vendor):
    for name in ("shopa", "shopb", "shopc"):
        make_vendor(name)

    page = client.get("/api/vendor?limit=2&offset=0&sort=account.username", headers=admin_headers).get_json()["data"]
    assert page["total"] == 4  # three shops plus the admin
    assert page["limit"] == 2
    assert len(page["docs"]) == 2

    users = client.get("/api/vendor?role=user", headers=admin_headers).get_json()["data"]
    assert users["total"] == 3

    named = client.get("/api/vendor?username=shopb", headers=admin_headers).get_json()["data"]
    assert [v["account"]["username"] for v in named["docs"]] == ["shopb"]


def test_user_cannot_change_own_role(client, app, vendor):
    vendor_id, headers = vendor
    response = client.put(
        f"/api/vendor/{vendor_id}/account",
        json={"password": "secret123", "role": "admin"},
        headers=headers,
    )
    assert response.status_code == 200
    with app.app_context():
        assert Vendor.find_by_id(vendor_id)["account"]["role"] == "user"


def test_admin_changes_role(client, app, admin_headers, vendor):
    vendor_id, _ = vendor
    response = client.put(
        f"/api/vendor/{vendor_id}/account",
        json={"password": "secret123", "role": "admin"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    with app.app_context():
        assert Vendor.find_by_id(vendor_id)["account"]["role"] == "admin"


def test_contact_is_public_and_normalised(client, vendor):
    vendor_id, headers = vendor
    assert client.put(f"/api/vendor/{vendor_id}/contact", json=CONTACT, headers=headers).status_code == 200

    response = client.get(f"/api/vendor/{vendor_id}/contact")
    contact = response.get_json()["data"]
    assert response.status_code == 200
    assert contact["email"] == "mario@example.com"
    assert contact["site"] == "https://example.com"
    assert contact["shopname"] == "shopone"


def test_guest_cannot_update_contact(client, vendor):
    vendor_id, _ = vendor
    assert client.put(f"/api/vendor/{vendor_id}/contact", json=CONTACT).status_code == 403


def test_delete_vendor_cascades(client, app, admin_headers, vendor, make_product, upload_root):
    vendor_id, headers = vendor
    make_product(vendor_id, headers)

    response = client.delete(f"/api/vendor/{vendor_id}", headers=admin_headers)
    assert response.status_code == 200
    assert not os.path.exists(os.path.join(upload_root, vendor_id))
    assert client.get(f"/api/vendor/{vendor_id}", headers=admin_headers).status_code == 404
    with app.app_context():
        assert Product.count({}) == 0


def test_delete_missing_vendor_is_not_found(client, admin_headers):
    assert client.delete("/api/vendor/5f1d7f3e9b1e8a3c4d2b1a00", headers=admin_headers).status_code == 404


def test_user_cannot_delete_vendor(client, vendor):
    vendor_id, headers = vendor
    assert client.delete(f"/api/vendor/{vendor_id}", headers=headers).status_code == 403


def test_duplicate_username_race_is_a_bad_request(client, app, admin_headers, vendor, monkeypatch):
    # a concurrent create already passed the existence check
    monkeypatch.setattr(Vendor, "username_exists", classmethod(lambda cls, username: False))

    response = client.post(
        "/api/vendor",
        json={"username": "shopone", "password": "secret123", "role": "user"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.get_json()["errors"] == {"username": ["username already exists"]}
    with app.app_context():
        assert Vendor.count({"account.username": "shopone"}) == 1


def test_delete_vendor_releases_its_lock(client, app, admin_headers, vendor, make_product):
    vendor_id, headers = vendor
    make_product(vendor_id, headers)
    locks = app.extensions["lifecycle"].locks
    assert vendor_id in locks

    assert client.delete(f"/api/vendor/{vendor_id}", headers=admin_headers).status_code == 200
    assert vendor_id not in locks
