# resources/product_resource.py
from flask import current_app, g, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ..constants.service_code import ROLES, UPLOAD_FIELDS
from ..models.base_model import to_object_id
from ..models.product_model import Product
from ..models.vendor_model import Vendor
from ..schemas.product_schema import ProductSchema, ProductListQuerySchema
from ..security.auth import require_role
from ..utils.errors import NotFoundError
from ..utils.file_upload import UploadLimits, read_single_upload
from ..utils.helpers import build_list_query, make_log_tag
from ..utils.json_response import prepared_response
from ..utils.logger import Log
from ..utils.validation import validate_path_ids


blp_product = Blueprint("Products", __name__, description="Product catalog, images and gallery")

ADMIN = ROLES["ADMIN"]
USER = ROLES["USER"]
GUEST = ROLES["GUEST"]


def _log_tag(resource, method, vendor_id, **kwargs):
    identity = g.get("current_user") or {}
    return make_log_tag(
        "product_resource.py", resource, method, request.remote_addr,
        identity.get("id"), identity.get("role"), vendor_id, **kwargs,
    )


def _require_vendor(vendor_id):
    if not Vendor.find_by_id(vendor_id):
        raise NotFoundError("vendor not found")


def _upload_reader(field_name):
    limits = UploadLimits.from_config(current_app.config)
    return lambda: read_single_upload(request, field_name, limits)


@blp_product.route("/vendor/<string:vendor_id>/products")
class ProductsResource(MethodView):

    @require_role([ADMIN, USER, GUEST])
    @blp_product.arguments(ProductListQuerySchema, location="query", error_status_code=400)
    @blp_product.doc(summary="List a vendor's products (paginated)")
    def get(self, query_args, vendor_id):
        validate_path_ids(vendor_id=vendor_id)
        _require_vendor(vendor_id)

        query, sort, limit, offset = build_list_query(
            query_args, base_filter={"vendor_id": to_object_id(vendor_id)}
        )
        page = Product.find_by_filter(query, sort=sort, limit=limit, offset=offset)
        page["docs"] = [Product.serialize(p) for p in page["docs"]]
        return prepared_response(True, "OK", "products", data=page)

    @require_role([ADMIN, USER])
    @blp_product.arguments(ProductSchema, error_status_code=400)
    @blp_product.doc(summary="Create a product under the vendor")
    def post(self, product_data, vendor_id):
        validate_path_ids(vendor_id=vendor_id)
        log_tag = _log_tag("ProductsResource", "post", vendor_id)

        product_id = current_app.extensions["lifecycle"].create_child("product", vendor_id, product_data)

        Log.info(f"{log_tag} product created: {product_id}")
        return prepared_response(True, "CREATED", "product created", data={"_id": product_id})

    @require_role([ADMIN, USER])
    @blp_product.doc(summary="Delete every product of the vendor")
    def delete(self, vendor_id):
        validate_path_ids(vendor_id=vendor_id)
        log_tag = _log_tag("ProductsResource", "delete", vendor_id)

        removed = current_app.extensions["lifecycle"].clear_children("product", vendor_id)

        Log.info(f"{log_tag} {removed} products removed")
        return prepared_response(True, "OK", "products empty")


@blp_product.route("/vendor/<string:vendor_id>/products/<string:product_id>")
class ProductResource(MethodView):

    @require_role([ADMIN, USER, GUEST])
    @blp_product.doc(summary="Get one product")
    def get(self, vendor_id, product_id):
        validate_path_ids(vendor_id=vendor_id, product_id=product_id)
        _require_vendor(vendor_id)

        product = Product.find_by_id(product_id, vendor_id=vendor_id)
        if not product:
            raise NotFoundError("product not found")
        return prepared_response(True, "OK", "product", data=Product.serialize(product))

    @require_role([ADMIN, USER])
    @blp_product.arguments(ProductSchema, error_status_code=400)
    @blp_product.doc(summary="Update a product's editable fields")
    def put(self, product_data, vendor_id, product_id):
        validate_path_ids(vendor_id=vendor_id, product_id=product_id)
        _require_vendor(vendor_id)

        if not Product.update(product_id, vendor_id, **product_data):
            raise NotFoundError("product not found")

        Log.info(f"{_log_tag('ProductResource', 'put', vendor_id, product=product_id)} product updated")
        return prepared_response(True, "OK", "product updated")

    @require_role([ADMIN, USER])
    @blp_product.doc(summary="Delete a product and its uploads")
    def delete(self, vendor_id, product_id):
        validate_path_ids(vendor_id=vendor_id, product_id=product_id)

        current_app.extensions["lifecycle"].delete_child("product", vendor_id, product_id)

        Log.info(f"{_log_tag('ProductResource', 'delete', vendor_id, product=product_id)} product deleted")
        return prepared_response(True, "OK", "product deleted")


@blp_product.route("/vendor/<string:vendor_id>/products/<string:product_id>/image")
class ProductImageResource(MethodView):

    @require_role([ADMIN, USER])
    @blp_product.doc(summary="Set the product's wallpaper image (multipart, field product_image)")
    def post(self, vendor_id, product_id):
        validate_path_ids(vendor_id=vendor_id, product_id=product_id)

        asset_ref = current_app.extensions["lifecycle"].set_image(
            "product", vendor_id, product_id, _upload_reader(UPLOAD_FIELDS["PRODUCT_IMAGE"])
        )

        Log.info(f"{_log_tag('ProductImageResource', 'post', vendor_id, product=product_id)} image saved")
        return prepared_response(True, "OK", "product image saved", data={"image": asset_ref})

    @require_role([ADMIN, USER])
    @blp_product.doc(summary="Remove the product's wallpaper image")
    def delete(self, vendor_id, product_id):
        validate_path_ids(vendor_id=vendor_id, product_id=product_id)

        current_app.extensions["lifecycle"].delete_image("product", vendor_id, product_id)
        return prepared_response(True, "OK", "product image deleted")


@blp_product.route("/vendor/<string:vendor_id>/products/<string:product_id>/gallery")
class ProductGalleryResource(MethodView):

    @require_role([ADMIN, USER])
    @blp_product.doc(summary="Append an image to the product gallery (multipart, field product_gallery_image)")
    def post(self, vendor_id, product_id):
        validate_path_ids(vendor_id=vendor_id, product_id=product_id)

        asset_ref = current_app.extensions["lifecycle"].append_gallery_image(
            vendor_id, product_id, _upload_reader(UPLOAD_FIELDS["PRODUCT_GALLERY_IMAGE"])
        )

        Log.info(f"{_log_tag('ProductGalleryResource', 'post', vendor_id, product=product_id)} gallery image saved")
        return prepared_response(True, "OK", "product gallery image saved", data={"image": asset_ref})

    @require_role([ADMIN, USER])
    @blp_product.doc(summary="Remove every gallery image")
    def delete(self, vendor_id, product_id):
        validate_path_ids(vendor_id=vendor_id, product_id=product_id)

        current_app.extensions["lifecycle"].clear_gallery(vendor_id, product_id)
        return prepared_response(True, "OK", "product image gallery deleted")
