# resources/mailbox_resource.py
from flask import current_app, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ..constants.service_code import ROLES
from ..models.vendor_model import Vendor
from ..schemas.mailbox_schema import MailboxMessageSchema
from ..security.auth import require_role
from ..utils.errors import NotFoundError
from ..utils.json_response import prepared_response
from ..utils.logger import Log
from ..utils.validation import validate_path_ids


blp_mailbox = Blueprint("Mailbox", __name__, description="Contact messages relayed to vendors")


@blp_mailbox.route("/vendor/<string:vendor_id>/mailbox")
class MailboxResource(MethodView):

    @require_role([ROLES["ADMIN"], ROLES["USER"], ROLES["GUEST"]])
    @blp_mailbox.arguments(MailboxMessageSchema, error_status_code=400)
    @blp_mailbox.doc(summary="Send a contact message to the vendor's e-mail")
    def post(self, message_data, vendor_id):
        validate_path_ids(vendor_id=vendor_id)
        vendor = Vendor.find_by_id(vendor_id)
        if not vendor:
            raise NotFoundError("vendor not found")

        current_app.extensions["email_service"].send_to_mailbox(vendor, **message_data)

        Log.info(f"[mailbox_resource.py][MailboxResource][post][ip:{request.remote_addr}] delivered to {vendor_id}")
        return prepared_response(True, "OK", "mail delivered to mailbox")
