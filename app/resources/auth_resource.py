# resources/auth_resource.py
import time

from flask import current_app, jsonify, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ..schemas.login_schema import LoginSchema
from ..utils.json_response import prepared_response
from ..utils.logger import Log
from ..utils.rate_limits import authenticate_limiter


blp_auth = Blueprint("Authentication", __name__, description="API info and authentication")


@blp_auth.route("/")
class ApiInfoResource(MethodView):

    @blp_auth.doc(summary="API heartbeat: server time and API version")
    def get(self):
        return jsonify({
            "time": int(time.time() * 1000),
            "version": current_app.config["API_VERSION_NUMBER"],
        })


@blp_auth.route("/authenticate")
class AuthenticateResource(MethodView):

    @authenticate_limiter
    @blp_auth.arguments(LoginSchema, error_status_code=400)
    @blp_auth.doc(
        summary="Exchange username and password for a bearer token",
        description="The same error is returned for an unknown username and a wrong password.",
    )
    def post(self, login_data):
        log_tag = f"[auth_resource.py][AuthenticateResource][post][ip:{request.remote_addr}]"
        Log.info(f"{log_tag} authenticating {login_data['username']}")

        vendor_id, token = current_app.extensions["authenticator"].authenticate(
            login_data["username"], login_data["password"]
        )

        Log.info(f"{log_tag} token issued for vendor {vendor_id}")
        return prepared_response(
            status=True,
            status_code="OK",
            message="authenticated",
            data={"_id": vendor_id, "token": token},
        )
