from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix
from marshmallow import ValidationError
from flask_smorest import Api
from flask_limiter.errors import RateLimitExceeded

from .utils.extensions import limiter
from .extensions import db, cors, password_hasher, asset_store
from .security.auth import authenticator
from .services.lifecycle_service import lifecycle
from .services.email_service import email_service

from .config import load_config
from .routes import register_routes
from .utils.errors import ApiError, StoreFailure, PartialLifecycleFailure
from .utils.error_handlers import (
    handle_validation_error, handle_api_error, handle_store_failure,
    handle_partial_lifecycle_failure, handle_rate_limit,
)


def create_app(config_overrides=None, mongo_client=None):
    app = Flask(__name__)

    # behind nginx: trust one hop of X-Forwarded-* so remote_addr is the client
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)

    # settings, then the OpenAPI keys flask-smorest needs before Api(app)
    load_config(app, config_overrides)

    app.config["API_TITLE"] = "Vendor Catalog API"
    app.config["API_VERSION"] = app.config["API_VERSION_NUMBER"]
    app.config["OPENAPI_VERSION"] = "3.0.3"
    app.config["OPENAPI_URL_PREFIX"] = "/api"
    app.config["OPENAPI_JSON_PATH"] = "openapi.json"
    app.config["OPENAPI_SWAGGER_UI_PATH"] = "/docs"
    app.config["OPENAPI_SWAGGER_UI_URL"] = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"

    api = Api(app)

    # stores first: the authenticator and coordinator use them
    limiter.init_app(app)
    db.init_app(app, client=mongo_client)
    password_hasher.init_app(app)
    asset_store.init_app(app)
    authenticator.init_app(app)
    lifecycle.init_app(app)
    email_service.init_app(app)
    cors.init_app(app, origins=app.config["ALLOWED_ORIGINS"])

    # most specific class wins, so ApiError only catches what is left
    app.errorhandler(ValidationError)(handle_validation_error)
    app.errorhandler(StoreFailure)(handle_store_failure)
    app.errorhandler(PartialLifecycleFailure)(handle_partial_lifecycle_failure)
    app.errorhandler(ApiError)(handle_api_error)
    app.errorhandler(RateLimitExceeded)(handle_rate_limit)

    register_routes(app, api)

    return app
