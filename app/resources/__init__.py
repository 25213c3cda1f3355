from .auth_resource import blp_auth
from .vendor_resource import blp_vendor
from .product_resource import blp_product
from .announcement_resource import blp_announcement
from .request_resource import blp_request
from .mailbox_resource import blp_mailbox
