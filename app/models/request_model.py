from .base_model import BaseModel, to_object_id


class Request(BaseModel):
    """
    A customer request against one of the vendor's products.

    `product_id` is a lookup reference only: deleting the product leaves the
    request in place.
    """

    collection_name = "requests"

    MUTABLE_FIELDS = ("name", "email", "phone", "notes", "status")

    def __init__(self, vendor_id, product_id, name=None, email=None, phone=None,
                 notes=None, status="pending", **kwargs):
        super().__init__(**kwargs)
        self.vendor_id = to_object_id(vendor_id)
        self.product_id = to_object_id(product_id)
        self.name = name
        self.email = email
        self.phone = phone
        self.notes = notes
        self.status = status

    @classmethod
    def update(cls, request_id, vendor_id, **updates):
        updates = {k: v for k, v in updates.items() if k in cls.MUTABLE_FIELDS}
        return cls.update_fields(request_id, updates, vendor_id=vendor_id)
