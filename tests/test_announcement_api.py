import io
import os

from app.models.announcement_model import Announcement
from app.models.vendor_model import Vendor


def create_announcement(client, vendor_id, headers, text="Summer sale", featured=False):
    response = client.post(
        f"/api/vendor/{vendor_id}/announcements",
        json={"announcement_text": text, "featured": featured},
        headers=headers,
    )
    assert response.status_code == 201, response.get_json()
    return response.get_json()["data"]["_id"]


def test_announcement_lifecycle(client, app, vendor, upload_root):
    vendor_id, headers = vendor
    announcement_id = create_announcement(client, vendor_id, headers)

    with app.app_context():
        assert [str(a) for a in Vendor.find_by_id(vendor_id)["announcement_ids"]] == [announcement_id]
    assert os.path.isdir(os.path.join(upload_root, vendor_id, "announcements", announcement_id))

    url = f"/api/vendor/{vendor_id}/announcements/{announcement_id}"
    updated = client.put(url, json={"announcement_text": "Winter sale", "featured": True}, headers=headers)
    assert updated.status_code == 200

    fetched = client.get(url).get_json()["data"]
    assert fetched["announcement_text"] == "Winter sale"
    assert fetched["featured"] is True

    assert client.delete(url, headers=headers).status_code == 200
    assert client.get(url).status_code == 404
    with app.app_context():
        assert Vendor.find_by_id(vendor_id)["announcement_ids"] == []
    assert not os.path.exists(os.path.join(upload_root, vendor_id, "announcements", announcement_id))


def test_guest_lists_announcements(client, vendor):
    vendor_id, headers = vendor
    create_announcement(client, vendor_id, headers, "one", featured=True)
    create_announcement(client, vendor_id, headers, "two")

    page = client.get(f"/api/vendor/{vendor_id}/announcements?featured=true").get_json()["data"]
    assert page["total"] == 1
    assert page["docs"][0]["announcement_text"] == "one"


def test_guest_cannot_create_announcement(client, vendor):
    vendor_id, _ = vendor
    response = client.post(f"/api/vendor/{vendor_id}/announcements", json={"announcement_text": "hi"})
    assert response.status_code == 403


def test_announcement_requires_text(client, vendor):
    vendor_id, headers = vendor
    response = client.post(f"/api/vendor/{vendor_id}/announcements", json={"featured": True}, headers=headers)
    assert response.status_code == 400


def test_announcement_image(client, app, vendor, tmp_path):
    vendor_id, headers = vendor
    announcement_id = create_announcement(client, vendor_id, headers)
    url = f"/api/vendor/{vendor_id}/announcements/{announcement_id}/image"

    response = client.post(
        url,
        data={"announcement_image": (io.BytesIO(b"\xff\xd8\xff"), "banner.jpg", "image/jpeg")},
        headers=headers,
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    ref = response.get_json()["data"]["image"]
    assert (tmp_path / ref).exists()

    assert client.delete(url, headers=headers).status_code == 200
    assert not (tmp_path / ref).exists()
    with app.app_context():
        assert Announcement.find_by_id(announcement_id)["image"] is None


def test_clear_announcements(client, app, vendor):
    vendor_id, headers = vendor
    create_announcement(client, vendor_id, headers, "one")
    create_announcement(client, vendor_id, headers, "two")

    response = client.delete(f"/api/vendor/{vendor_id}/announcements", headers=headers)
    assert response.get_json()["message"] == "announcements empty"
    with app.app_context():
        assert Announcement.count({}) == 0
        assert Vendor.find_by_id(vendor_id)["announcement_ids"] == []
