# resources/vendor_resource.py
from flask import current_app, g, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ..constants.service_code import ROLES
from ..models.vendor_model import Vendor
from ..schemas.vendor_schema import (
    AccountUpdateSchema,
    ContactSchema,
    VendorCreateSchema,
    VendorListQuerySchema,
)
from ..security.auth import require_role
from ..security.policy import redact
from ..utils.errors import NotFoundError
from ..utils.helpers import build_list_query, make_log_tag
from ..utils.json_response import prepared_response
from ..utils.logger import Log
from ..utils.validation import validate_path_ids


blp_vendor = Blueprint("Vendors", __name__, description="Vendor, account and contact management")

ADMIN = ROLES["ADMIN"]
USER = ROLES["USER"]
GUEST = ROLES["GUEST"]


def _log_tag(resource, method, vendor_id=None):
    identity = g.get("current_user") or {}
    return make_log_tag(
        "vendor_resource.py", resource, method, request.remote_addr,
        identity.get("id"), identity.get("role"), vendor_id,
    )


def _load_vendor(vendor_id):
    validate_path_ids(vendor_id=vendor_id)
    vendor = Vendor.find_by_id(vendor_id)
    if not vendor:
        raise NotFoundError("vendor not found")
    return vendor


@blp_vendor.route("/vendor")
class VendorsResource(MethodView):

    @require_role([ADMIN])
    @blp_vendor.arguments(VendorCreateSchema, error_status_code=400)
    @blp_vendor.doc(summary="Create a vendor with its account and upload directories")
    def post(self, vendor_data):
        log_tag = _log_tag("VendorsResource", "post")
        Log.info(f"{log_tag} creating vendor {vendor_data['username']}")

        vendor_id = current_app.extensions["lifecycle"].create_vendor(
            username=vendor_data["username"],
            password=vendor_data["password"],
            role=vendor_data["role"],
            contact=vendor_data.get("contact"),
        )

        Log.info(f"{log_tag} vendor created: {vendor_id}")
        return prepared_response(True, "CREATED", "vendor created", data={"_id": vendor_id})

    @require_role([ADMIN])
    @blp_vendor.arguments(VendorListQuerySchema, location="query", error_status_code=400)
    @blp_vendor.doc(summary="List vendors (paginated)")
    def get(self, query_args):
        query_args = dict(query_args)
        filters = {}
        if query_args.get("username"):
            filters["account.username"] = query_args["username"]
        if query_args.get("role"):
            filters["account.role"] = query_args["role"]
        query_args.pop("username", None)
        query_args.pop("role", None)

        query, sort, limit, offset = build_list_query(query_args, base_filter=filters)
        page = Vendor.find_by_filter(query, sort=sort, limit=limit, offset=offset)

        role = g.current_user["role"]
        page["docs"] = [redact(Vendor.serialize(v), role) for v in page["docs"]]
        return prepared_response(True, "OK", "vendors", data=page)


@blp_vendor.route("/vendor/<string:vendor_id>")
class VendorResource(MethodView):

    @require_role([ADMIN, USER])
    @blp_vendor.doc(summary="Get a vendor (account redacted for users)")
    def get(self, vendor_id):
        vendor = _load_vendor(vendor_id)
        return prepared_response(
            True, "OK", "vendor", data=redact(Vendor.serialize(vendor), g.current_user["role"])
        )

    @require_role([ADMIN])
    @blp_vendor.doc(summary="Delete a vendor, its catalog and its uploads")
    def delete(self, vendor_id):
        validate_path_ids(vendor_id=vendor_id)
        log_tag = _log_tag("VendorResource", "delete", vendor_id)

        current_app.extensions["lifecycle"].delete_vendor(vendor_id)

        Log.info(f"{log_tag} vendor deleted")
        return prepared_response(True, "OK", "vendor deleted")


@blp_vendor.route("/vendor/<string:vendor_id>/account")
class VendorAccountResource(MethodView):

    @require_role([ADMIN, USER])
    @blp_vendor.doc(summary="Get a vendor's account (redacted for users)")
    def get(self, vendor_id):
        vendor = _load_vendor(vendor_id)
        redacted = redact(Vendor.serialize(vendor), g.current_user["role"])
        return prepared_response(True, "OK", "account", data=redacted["account"])

    @require_role([ADMIN, USER])
    @blp_vendor.arguments(AccountUpdateSchema, error_status_code=400)
    @blp_vendor.doc(summary="Change password (and, for admins, role)")
    def put(self, account_data, vendor_id):
        _load_vendor(vendor_id)
        log_tag = _log_tag("VendorAccountResource", "put", vendor_id)

        role = None
        if g.current_user["role"] == ADMIN and account_data.get("role"):
            role = account_data["role"]

        if not Vendor.update_account(vendor_id, account_data["password"], role=role):
            raise NotFoundError("vendor not found")

        Log.info(f"{log_tag} account updated")
        return prepared_response(True, "OK", "account updated")


@blp_vendor.route("/vendor/<string:vendor_id>/contact")
class VendorContactResource(MethodView):

    @require_role([ADMIN, USER, GUEST])
    @blp_vendor.doc(summary="Get a vendor's public contact")
    def get(self, vendor_id):
        vendor = _load_vendor(vendor_id)
        return prepared_response(True, "OK", "contact", data=Vendor.serialize(vendor.get("contact") or {}))

    @require_role([ADMIN, USER])
    @blp_vendor.arguments(ContactSchema, error_status_code=400)
    @blp_vendor.doc(summary="Replace a vendor's contact")
    def put(self, contact_data, vendor_id):
        _load_vendor(vendor_id)

        if not Vendor.update_contact(vendor_id, contact_data):
            raise NotFoundError("vendor not found")

        Log.info(f"{_log_tag('VendorContactResource', 'put', vendor_id)} contact updated")
        return prepared_response(True, "OK", "contact updated")
