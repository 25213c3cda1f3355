from ..resources import (
    blp_auth,
    blp_vendor,
    blp_product,
    blp_announcement,
    blp_request,
    blp_mailbox,
)


API_URL_PREFIX = "/api"


def register_routes(app, api):
    blueprints = [
        blp_auth,
        blp_vendor,
        blp_product,
        blp_announcement,
        blp_request,
        blp_mailbox,
    ]

    for blueprint in blueprints:
        api.register_blueprint(blueprint, url_prefix=API_URL_PREFIX)

    # Root route
    @app.route('/')
    def index():
        return {"message": "Vendor catalog service online. API is served under /api."}
