from .base_model import BaseModel, to_object_id


class Announcement(BaseModel):
    collection_name = "announcements"

    MUTABLE_FIELDS = ("announcement_text", "featured")

    def __init__(self, vendor_id, announcement_text, featured=False, **kwargs):
        super().__init__(**kwargs)
        self.vendor_id = to_object_id(vendor_id)
        self.announcement_text = announcement_text
        self.image = None
        self.featured = featured

    @classmethod
    def update(cls, announcement_id, vendor_id, **updates):
        updates = {k: v for k, v in updates.items() if k in cls.MUTABLE_FIELDS}
        return cls.update_fields(announcement_id, updates, vendor_id=vendor_id)

    @classmethod
    def set_image(cls, announcement_id, vendor_id, asset_ref):
        return cls.update_fields(announcement_id, {"image": asset_ref}, vendor_id=vendor_id)
