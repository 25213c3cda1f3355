import io
import os
import threading

import pytest

from app.models.product_model import Product
from app.models.vendor_model import Vendor
from app.services.lifecycle_service import (
    LifecycleProtocol,
    LifecycleState,
    VendorLocks,
)
from app.utils.errors import NotFoundError, PartialLifecycleFailure, StoreFailure


def _fail(error):
    def action(ctx):
        raise error
    return action


def test_protocol_commits_and_collects_results():
    protocol = LifecycleProtocol("demo")
    protocol.step("first", lambda ctx: 1)
    protocol.step("second", lambda ctx: ctx["first"] + 1)

    results = protocol.run()

    assert protocol.state == LifecycleState.COMMITTED
    assert results == {"first": 1, "second": 2}
    assert protocol.completed == ["first", "second"]


def test_failure_on_first_step_rejects_with_original_error():
    protocol = LifecycleProtocol("demo")
    protocol.step("first", _fail(NotFoundError("vendor not found")))
    protocol.step("second", lambda ctx: pytest.fail("must not run"))

    with pytest.raises(NotFoundError):
        protocol.run()
    assert protocol.state == LifecycleState.REJECTED


def test_failure_after_a_committed_step_is_partial():
    protocol = LifecycleProtocol("demo")
    protocol.step("persist", lambda ctx: "id")
    protocol.step("provision", _fail(StoreFailure("asset store", "disk full")))
    protocol.step("never", lambda ctx: pytest.fail("must not run"))

    with pytest.raises(PartialLifecycleFailure) as exc_info:
        protocol.run()

    error = exc_info.value
    assert protocol.state == LifecycleState.PARTIALLY_COMMITTED
    assert error.failed_step == "provision"
    assert error.last_succeeded_step == "persist"
    assert isinstance(error.cause, StoreFailure)


def test_reject_marks_state_and_raises():
    protocol = LifecycleProtocol("demo")
    with pytest.raises(NotFoundError):
        protocol.reject(NotFoundError())
    assert protocol.state == LifecycleState.REJECTED


def test_vendor_locks_are_per_vendor():
    locks = VendorLocks()
    assert locks.for_vendor("a") is locks.for_vendor("a")
    assert locks.for_vendor("a") is not locks.for_vendor("b")


def test_concurrent_child_creation_keeps_every_id(app, vendor):
    vendor_id, _ = vendor
    coordinator = app.extensions["lifecycle"]
    created, errors = [], []

    def create(index):
        try:
            created.append(coordinator.create_child("announcement", vendor_id, {
                "announcement_text": f"news {index}",
            }))
        except Exception as e:  # collected and asserted below
            errors.append(e)

    threads = [threading.Thread(target=create, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert not errors
    stored = Vendor.find_by_id(vendor_id)
    assert sorted(str(i) for i in stored["announcement_ids"]) == sorted(created)


def test_create_vendor_partial_failure_reports_steps(client, app, admin_headers, monkeypatch):
    coordinator = app.extensions["lifecycle"]

    def broken_subtree(path):
        raise StoreFailure("asset store", "permission denied")

    monkeypatch.setattr(coordinator.assets, "create_subtree", broken_subtree)

    response = client.post(
        "/api/vendor",
        json={"username": "brokenshop", "password": "secret123", "role": "user"},
        headers=admin_headers,
    )
    body = response.get_json()

    assert response.status_code == 500
    assert body["errors"] == {
        "operation": "create_vendor",
        "failed_step": "provision_products_subtree",
        "last_succeeded_step": "persist_vendor",
    }
    # the committed step is not rolled back
    with app.app_context():
        assert Vendor.get_by_username("brokenshop") is not None


def test_store_failure_detail_is_not_leaked(client, app, admin_headers, monkeypatch):
    def broken_count(query):
        raise StoreFailure("resource store", "connection refused to 10.0.0.5")

    monkeypatch.setattr(Vendor, "count", staticmethod(broken_count))

    response = client.post(
        "/api/vendor",
        json={"username": "anothershop", "password": "secret123", "role": "user"},
        headers=admin_headers,
    )
    assert response.status_code == 500
    assert "10.0.0.5" not in response.get_data(as_text=True)


def _post_image(client, url, field, headers, name="photo.jpg"):
    data = {field: (io.BytesIO(b"\xff\xd8\xff\xe0" + b"0" * 32), name, "image/jpeg")}
    return client.post(url, data=data, headers=headers, content_type="multipart/form-data")


def _broken_store(*args, **kwargs):
    raise StoreFailure("asset store", "input/output error")


def test_clear_gallery_stops_at_first_purge_failure(client, app, vendor, make_product, monkeypatch):
    vendor_id, headers = vendor
    product_id = make_product(vendor_id, headers)
    url = f"/api/vendor/{vendor_id}/products/{product_id}/gallery"
    for index in range(2):
        assert _post_image(client, url, "product_gallery_image", headers, f"g{index}.jpg").status_code == 200

    coordinator = app.extensions["lifecycle"]
    remove_asset = coordinator.assets.remove_asset
    calls = []

    def fail_second_purge(ref):
        calls.append(ref)
        if len(calls) == 2:
            _broken_store()
        return remove_asset(ref)

    monkeypatch.setattr(coordinator.assets, "remove_asset", fail_second_purge)
    response = client.delete(url, headers=headers)

    assert response.status_code == 500
    assert response.get_json()["errors"] == {
        "operation": "clear_gallery",
        "failed_step": "purge_gallery_image_1",
        "last_succeeded_step": "purge_gallery_image_0",
    }
    with app.app_context():
        assert len(Product.find_by_id(product_id)["gallery"]) == 2


def test_failed_purge_of_old_image_stores_nothing(client, app, vendor, make_product, upload_root, monkeypatch):
    vendor_id, headers = vendor
    product_id = make_product(vendor_id, headers)
    url = f"/api/vendor/{vendor_id}/products/{product_id}/image"
    old_ref = _post_image(client, url, "product_image", headers).get_json()["data"]["image"]

    monkeypatch.setattr(app.extensions["lifecycle"].assets, "remove_asset", _broken_store)
    response = _post_image(client, url, "product_image", headers, "replacement.jpg")

    assert response.status_code == 500
    with app.app_context():
        assert Product.find_by_id(product_id)["image"] == old_ref
    assert len(os.listdir(os.path.join(upload_root, vendor_id, "products", product_id))) == 1


def test_delete_child_fails_while_deregistering(client, app, vendor, make_product, monkeypatch):
    vendor_id, headers = vendor
    product_id = make_product(vendor_id, headers)
    monkeypatch.setattr(Vendor, "set_child_ids", classmethod(_broken_store))

    response = client.delete(f"/api/vendor/{vendor_id}/products/{product_id}", headers=headers)

    assert response.status_code == 500
    errors = response.get_json()["errors"]
    assert errors["failed_step"] == "deregister_from_vendor"
    assert errors["last_succeeded_step"] == "remove_child"
    with app.app_context():
        assert Product.find_by_id(product_id) is None
        assert [str(i) for i in Vendor.find_by_id(vendor_id)["product_ids"]] == [product_id]


def test_delete_child_fails_while_purging_subtree(client, app, vendor, make_product, upload_root, monkeypatch):
    vendor_id, headers = vendor
    product_id = make_product(vendor_id, headers)
    monkeypatch.setattr(app.extensions["lifecycle"].assets, "remove_subtree", _broken_store)

    response = client.delete(f"/api/vendor/{vendor_id}/products/{product_id}", headers=headers)

    assert response.status_code == 500
    errors = response.get_json()["errors"]
    assert errors["failed_step"] == "purge_child_subtree"
    assert errors["last_succeeded_step"] == "deregister_from_vendor"
    with app.app_context():
        assert Vendor.find_by_id(vendor_id)["product_ids"] == []
    assert os.path.isdir(os.path.join(upload_root, vendor_id, "products", product_id))


def test_create_after_delete_gets_a_fresh_id(client, app, vendor, make_product):
    vendor_id, headers = vendor
    old_id = make_product(vendor_id, headers)
    assert client.delete(f"/api/vendor/{vendor_id}/products/{old_id}", headers=headers).status_code == 200

    new_id = make_product(vendor_id, headers)

    assert new_id != old_id
    with app.app_context():
        assert [str(i) for i in Vendor.find_by_id(vendor_id)["product_ids"]] == [new_id]
