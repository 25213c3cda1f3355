from ..utils.logger import Log
from .base_model import BaseModel, to_object_id


class Product(BaseModel):
    """
    A Product belongs to exactly one vendor; `vendor_id` is set at creation and
    never taken from client input afterwards.
    """

    collection_name = "products"

    # fields a client may change through an update
    MUTABLE_FIELDS = (
        "category",
        "name",
        "description",
        "price",
        "featured",
        "enabled",
        "sale",
        "keywords",
    )

    def __init__(self, vendor_id, category=None, name=None, description=None, price=0.0,
                 featured=False, enabled=True, sale=None, keywords=None, **kwargs):
        super().__init__(**kwargs)
        self.vendor_id = to_object_id(vendor_id)
        self.category = category
        self.name = name
        self.description = description
        self.price = float(price or 0.0)
        self.image = None
        self.gallery = []
        self.featured = featured
        self.enabled = enabled
        self.sale = sale
        self.keywords = keywords or []

    @classmethod
    def update(cls, product_id, vendor_id, **updates):
        updates = {k: v for k, v in updates.items() if k in cls.MUTABLE_FIELDS}
        Log.info(f"[product_model.py][update] product {product_id} fields {sorted(updates)}")
        return cls.update_fields(product_id, updates, vendor_id=vendor_id)

    @classmethod
    def set_image(cls, product_id, vendor_id, asset_ref):
        return cls.update_fields(product_id, {"image": asset_ref}, vendor_id=vendor_id)

    @classmethod
    def set_gallery(cls, product_id, vendor_id, gallery):
        return cls.update_fields(product_id, {"gallery": list(gallery)}, vendor_id=vendor_id)
