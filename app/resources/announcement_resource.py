# resources/announcement_resource.py
from flask import current_app, g, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ..constants.service_code import ROLES, UPLOAD_FIELDS
from ..models.announcement_model import Announcement
from ..models.base_model import to_object_id
from ..models.vendor_model import Vendor
from ..schemas.announcement_schema import AnnouncementSchema, AnnouncementListQuerySchema
from ..security.auth import require_role
from ..utils.errors import NotFoundError
from ..utils.file_upload import UploadLimits, read_single_upload
from ..utils.helpers import build_list_query, make_log_tag
from ..utils.json_response import prepared_response
from ..utils.logger import Log
from ..utils.validation import validate_path_ids


blp_announcement = Blueprint("Announcements", __name__, description="Vendor announcements")

ADMIN = ROLES["ADMIN"]
USER = ROLES["USER"]
GUEST = ROLES["GUEST"]


def _log_tag(resource, method, vendor_id, **kwargs):
    identity = g.get("current_user") or {}
    return make_log_tag(
        "announcement_resource.py", resource, method, request.remote_addr,
        identity.get("id"), identity.get("role"), vendor_id, **kwargs,
    )


@blp_announcement.route("/vendor/<string:vendor_id>/announcements")
class AnnouncementsResource(MethodView):

    @require_role([ADMIN, USER, GUEST])
    @blp_announcement.arguments(AnnouncementListQuerySchema, location="query", error_status_code=400)
    def get(self, query_args, vendor_id):
        validate_path_ids(vendor_id=vendor_id)
        if not Vendor.find_by_id(vendor_id):
            raise NotFoundError("vendor not found")

        query, sort, limit, offset = build_list_query(
            query_args, base_filter={"vendor_id": to_object_id(vendor_id)}
        )
        page = Announcement.find_by_filter(query, sort=sort, limit=limit, offset=offset)
        page["docs"] = [Announcement.serialize(a) for a in page["docs"]]
        return prepared_response(True, "OK", "announcements", data=page)

    @require_role([ADMIN, USER])
    @blp_announcement.arguments(AnnouncementSchema, error_status_code=400)
    def post(self, announcement_data, vendor_id):
        validate_path_ids(vendor_id=vendor_id)

        announcement_id = current_app.extensions["lifecycle"].create_child(
            "announcement", vendor_id, announcement_data
        )

        Log.info(f"{_log_tag('AnnouncementsResource', 'post', vendor_id)} announcement created: {announcement_id}")
        return prepared_response(True, "CREATED", "announcement created", data={"_id": announcement_id})

    @require_role([ADMIN, USER])
    def delete(self, vendor_id):
        validate_path_ids(vendor_id=vendor_id)

        current_app.extensions["lifecycle"].clear_children("announcement", vendor_id)
        return prepared_response(True, "OK", "announcements empty")


@blp_announcement.route("/vendor/<string:vendor_id>/announcements/<string:announcement_id>")
class AnnouncementResource(MethodView):

    @require_role([ADMIN, USER, GUEST])
    def get(self, vendor_id, announcement_id):
        validate_path_ids(vendor_id=vendor_id, announcement_id=announcement_id)
        if not Vendor.find_by_id(vendor_id):
            raise NotFoundError("vendor not found")

        announcement = Announcement.find_by_id(announcement_id, vendor_id=vendor_id)
        if not announcement:
            raise NotFoundError("announcement not found")
        return prepared_response(True, "OK", "announcement", data=Announcement.serialize(announcement))

    @require_role([ADMIN, USER])
    @blp_announcement.arguments(AnnouncementSchema, error_status_code=400)
    def put(self, announcement_data, vendor_id, announcement_id):
        validate_path_ids(vendor_id=vendor_id, announcement_id=announcement_id)
        if not Vendor.find_by_id(vendor_id):
            raise NotFoundError("vendor not found")

        if not Announcement.update(announcement_id, vendor_id, **announcement_data):
            raise NotFoundError("announcement not found")
        return prepared_response(True, "OK", "announcement updated")

    @require_role([ADMIN, USER])
    def delete(self, vendor_id, announcement_id):
        validate_path_ids(vendor_id=vendor_id, announcement_id=announcement_id)

        current_app.extensions["lifecycle"].delete_child("announcement", vendor_id, announcement_id)

        Log.info(f"{_log_tag('AnnouncementResource', 'delete', vendor_id, announcement=announcement_id)} deleted")
        return prepared_response(True, "OK", "announcement deleted")


@blp_announcement.route("/vendor/<string:vendor_id>/announcements/<string:announcement_id>/image")
class AnnouncementImageResource(MethodView):

    @require_role([ADMIN, USER])
    @blp_announcement.doc(summary="Set the announcement image (multipart, field announcement_image)")
    def post(self, vendor_id, announcement_id):
        validate_path_ids(vendor_id=vendor_id, announcement_id=announcement_id)
        limits = UploadLimits.from_config(current_app.config)

        asset_ref = current_app.extensions["lifecycle"].set_image(
            "announcement", vendor_id, announcement_id,
            lambda: read_single_upload(request, UPLOAD_FIELDS["ANNOUNCEMENT_IMAGE"], limits),
        )
        return prepared_response(True, "OK", "announcement image saved", data={"image": asset_ref})

    @require_role([ADMIN, USER])
    def delete(self, vendor_id, announcement_id):
        validate_path_ids(vendor_id=vendor_id, announcement_id=announcement_id)

        current_app.extensions["lifecycle"].delete_image("announcement", vendor_id, announcement_id)
        return prepared_response(True, "OK", "announcement image deleted")
