# resources/request_resource.py
from flask import current_app, g, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ..constants.service_code import ROLES
from ..models.base_model import to_object_id
from ..models.request_model import Request
from ..models.vendor_model import Vendor
from ..schemas.request_schema import (
    RequestCreateSchema,
    RequestListQuerySchema,
    RequestUpdateSchema,
)
from ..security.auth import require_role
from ..utils.errors import NotFoundError
from ..utils.helpers import build_list_query, make_log_tag
from ..utils.json_response import prepared_response
from ..utils.logger import Log
from ..utils.validation import validate_path_ids


blp_request = Blueprint("Requests", __name__, description="Customer requests on vendor products")

ADMIN = ROLES["ADMIN"]
USER = ROLES["USER"]
GUEST = ROLES["GUEST"]


def _require_vendor(vendor_id):
    if not Vendor.find_by_id(vendor_id):
        raise NotFoundError("vendor not found")


@blp_request.route("/vendor/<string:vendor_id>/requests")
class RequestsResource(MethodView):

    @require_role([ADMIN, USER])
    @blp_request.arguments(RequestListQuerySchema, location="query", error_status_code=400)
    def get(self, query_args, vendor_id):
        validate_path_ids(vendor_id=vendor_id)
        _require_vendor(vendor_id)

        query_args = dict(query_args)
        if query_args.get("product"):
            query_args["product_id"] = query_args["product"]
        query_args.pop("product", None)

        query, sort, limit, offset = build_list_query(
            query_args, base_filter={"vendor_id": to_object_id(vendor_id)}, id_fields=("product_id",)
        )
        page = Request.find_by_filter(query, sort=sort, limit=limit, offset=offset)
        page["docs"] = [Request.serialize(r) for r in page["docs"]]
        return prepared_response(True, "OK", "requests", data=page)

    @require_role([ADMIN, USER, GUEST])
    @blp_request.arguments(RequestCreateSchema, error_status_code=400)
    def post(self, request_data, vendor_id):
        validate_path_ids(vendor_id=vendor_id)
        identity = g.get("current_user") or {}
        log_tag = make_log_tag(
            "request_resource.py", "RequestsResource", "post", request.remote_addr,
            identity.get("id"), identity.get("role"), vendor_id,
        )

        request_data = dict(request_data)
        request_data["product_id"] = request_data.pop("product")

        request_id = current_app.extensions["lifecycle"].create_child("request", vendor_id, request_data)

        Log.info(f"{log_tag} request created: {request_id}")
        return prepared_response(True, "CREATED", "request created", data={"_id": request_id})

    @require_role([ADMIN, USER])
    def delete(self, vendor_id):
        validate_path_ids(vendor_id=vendor_id)

        current_app.extensions["lifecycle"].clear_children("request", vendor_id)
        return prepared_response(True, "OK", "requests empty")


@blp_request.route("/vendor/<string:vendor_id>/requests/<string:request_id>")
class RequestResource(MethodView):

    @require_role([ADMIN, USER])
    def get(self, vendor_id, request_id):
        validate_path_ids(vendor_id=vendor_id, request_id=request_id)
        _require_vendor(vendor_id)

        customer_request = Request.find_by_id(request_id, vendor_id=vendor_id)
        if not customer_request:
            raise NotFoundError("request not found")
        return prepared_response(True, "OK", "request", data=Request.serialize(customer_request))

    @require_role([ADMIN, USER])
    @blp_request.arguments(RequestUpdateSchema, error_status_code=400)
    def put(self, request_data, vendor_id, request_id):
        validate_path_ids(vendor_id=vendor_id, request_id=request_id)
        _require_vendor(vendor_id)

        if not Request.update(request_id, vendor_id, **request_data):
            raise NotFoundError("request not found")
        return prepared_response(True, "OK", "request updated")

    @require_role([ADMIN, USER])
    def delete(self, vendor_id, request_id):
        validate_path_ids(vendor_id=vendor_id, request_id=request_id)

        current_app.extensions["lifecycle"].delete_child("request", vendor_id, request_id)
        return prepared_response(True, "OK", "request deleted")
