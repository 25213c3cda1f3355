# app/services/lifecycle_service.py
"""
Multi-step operations spanning the resource store and the asset store.

Each operation is a LifecycleProtocol: an ordered list of named steps run one
after the other. There is no shared transaction and no compensation: a failure
before the first committed step leaves the protocol REJECTED and re-raises the
original error, a failure after it leaves it PARTIALLY_COMMITTED and raises
PartialLifecycleFailure naming the failed and last succeeded steps.
"""
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from marshmallow import ValidationError

from ..constants.service_code import GALLERY_FILE_PREFIX
from ..extensions import asset_store
from ..models.announcement_model import Announcement
from ..models.base_model import to_object_id
from ..models.product_model import Product
from ..models.request_model import Request
from ..models.vendor_model import Vendor
from ..utils.errors import (
    ApiError,
    CapacityError,
    NotFoundError,
    PartialLifecycleFailure,
)
from ..utils.logger import Log


class LifecycleState(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    PARTIALLY_COMMITTED = "partially_committed"
    REJECTED = "rejected"


@dataclass
class LifecycleStep:
    name: str
    action: Callable[[Dict[str, Any]], Any]
    # Steps are never compensated; declared so every protocol states it explicitly.
    compensate: Optional[Callable[[Dict[str, Any]], Any]] = None


@dataclass
class LifecycleProtocol:
    operation: str
    steps: List[LifecycleStep] = field(default_factory=list)
    state: LifecycleState = LifecycleState.PENDING
    completed: List[str] = field(default_factory=list)
    results: Dict[str, Any] = field(default_factory=dict)

    def step(self, name, action):
        self.steps.append(LifecycleStep(name=name, action=action))
        return self

    def reject(self, error):
        """Fail before any step ran: nothing was mutated."""
        self.state = LifecycleState.REJECTED
        Log.info(f"[lifecycle_service.py][{self.operation}] rejected: {error}")
        raise error

    def run(self):
        log_tag = f"[lifecycle_service.py][{self.operation}]"
        for current in self.steps:
            try:
                self.results[current.name] = current.action(self.results)
            except (ApiError, ValidationError) as e:
                if not self.completed:
                    self.state = LifecycleState.REJECTED
                    Log.info(f"{log_tag} rejected at '{current.name}': {e}")
                    raise

                self.state = LifecycleState.PARTIALLY_COMMITTED
                Log.error(
                    f"{log_tag} partially committed: '{current.name}' failed after "
                    f"'{self.completed[-1]}': {e}"
                )
                raise PartialLifecycleFailure(
                    self.operation, current.name, self.completed[-1], cause=e
                ) from e
            self.completed.append(current.name)

        self.state = LifecycleState.COMMITTED
        Log.info(f"{log_tag} committed: {', '.join(self.completed)}")
        return self.results


@dataclass(frozen=True)
class ChildKind:
    name: str
    model: Any
    asset_dir: Optional[str]


CHILD_KINDS = {
    "product": ChildKind("product", Product, "products"),
    "announcement": ChildKind("announcement", Announcement, "announcements"),
    "request": ChildKind("request", Request, None),
}


class VendorLocks:
    """Per-vendor mutex for parent id-list updates and gallery capacity checks."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    def for_vendor(self, vendor_id):
        key = str(vendor_id)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    def discard(self, vendor_id):
        with self._guard:
            self._locks.pop(str(vendor_id), None)

    def __contains__(self, vendor_id):
        return str(vendor_id) in self._locks


class LifecycleCoordinator:

    def __init__(self, assets=None, gallery_size=5):
        self.assets = assets or asset_store
        self.gallery_size = gallery_size
        self.locks = VendorLocks()

    def init_app(self, app):
        self.gallery_size = int(app.config.get("MAX_PRODUCT_IMAGE_GALLERY_SIZE", self.gallery_size))
        app.extensions["lifecycle"] = self

    # ------------------------------------------------------------------
    # lookups shared by every protocol
    # ------------------------------------------------------------------
    @staticmethod
    def _require_vendor(protocol, vendor_id):
        vendor = Vendor.find_by_id(vendor_id)
        if not vendor:
            protocol.reject(NotFoundError("vendor not found"))
        return vendor

    @staticmethod
    def _require_child(protocol, kind, vendor_id, child_id):
        child = CHILD_KINDS[kind].model.find_by_id(child_id, vendor_id=vendor_id)
        if not child:
            protocol.reject(NotFoundError(f"{kind} not found"))
        return child

    # ------------------------------------------------------------------
    # vendor
    # ------------------------------------------------------------------
    def create_vendor(self, username, password, role, contact=None):
        """Persist account + contact, then provision the vendor's asset subtrees."""
        protocol = LifecycleProtocol("create_vendor")

        if Vendor.username_exists(username):
            protocol.reject(ValidationError({"username": ["username already exists"]}))

        vendor = Vendor(username=username, password=password, role=role, contact=contact)

        protocol.step("persist_vendor", lambda ctx: vendor.save())
        protocol.step("provision_products_subtree", lambda ctx: self.assets.create_subtree(
            self.assets.path_for(ctx["persist_vendor"], "products")))
        protocol.step("provision_announcements_subtree", lambda ctx: self.assets.create_subtree(
            self.assets.path_for(ctx["persist_vendor"], "announcements")))

        return protocol.run()["persist_vendor"]

    def delete_vendor(self, vendor_id):
        """Remove the vendor record, its children, then purge its asset subtree."""
        protocol = LifecycleProtocol("delete_vendor")
        self._require_vendor(protocol, vendor_id)
        vendor_oid = to_object_id(vendor_id)

        def _remove_vendor(ctx):
            if not Vendor.delete_matching({"_id": vendor_oid}):
                raise NotFoundError("vendor not found")

        protocol.step("remove_vendor", _remove_vendor)
        for kind in CHILD_KINDS.values():
            protocol.step(
                f"remove_{kind.name}s",
                lambda ctx, model=kind.model: model.delete_matching({"vendor_id": vendor_oid}),
            )
        protocol.step("purge_vendor_subtree", lambda ctx: self.assets.remove_subtree(
            self.assets.path_for(vendor_id)))

        try:
            protocol.run()
        finally:
            if "remove_vendor" in protocol.completed:
                self.locks.discard(vendor_id)
        return True

    # ------------------------------------------------------------------
    # children: products, announcements, requests
    # ------------------------------------------------------------------
    def create_child(self, kind, vendor_id, data):
        """
        Validate parent -> insert child -> register id with parent -> provision
        the child's asset subtree. Returns the new child id.
        """
        child_kind = CHILD_KINDS[kind]
        protocol = LifecycleProtocol(f"create_{kind}")
        self._require_vendor(protocol, vendor_id)

        if kind == "request":
            product = Product.find_by_id(data.get("product_id"), vendor_id=vendor_id)
            if not product:
                protocol.reject(NotFoundError("product not found"))

        child = child_kind.model(vendor_id=vendor_id, **data)

        protocol.step("persist_child", lambda ctx: child.save())
        protocol.step("register_with_vendor", lambda ctx: self._push_child_id(
            vendor_id, kind, ctx["persist_child"]))
        if child_kind.asset_dir:
            protocol.step("provision_child_subtree", lambda ctx: self.assets.create_subtree(
                self.assets.path_for(vendor_id, child_kind.asset_dir, ctx["persist_child"])))

        return protocol.run()["persist_child"]

    def delete_child(self, kind, vendor_id, child_id):
        """
        Delete by (id, vendor_id) -> deregister from parent -> purge subtree.
        A missing child and a child of another vendor both report NotFound.
        """
        child_kind = CHILD_KINDS[kind]
        protocol = LifecycleProtocol(f"delete_{kind}")
        self._require_vendor(protocol, vendor_id)

        child_oid = to_object_id(child_id)
        vendor_oid = to_object_id(vendor_id)

        def _remove_child(ctx):
            if child_oid is None or not child_kind.model.delete_matching(
                    {"_id": child_oid, "vendor_id": vendor_oid}):
                raise NotFoundError(f"{kind} not found")

        protocol.step("remove_child", _remove_child)
        protocol.step("deregister_from_vendor", lambda ctx: self._pull_child_id(vendor_id, kind, child_id))
        if child_kind.asset_dir:
            protocol.step("purge_child_subtree", lambda ctx: self.assets.remove_subtree(
                self.assets.path_for(vendor_id, child_kind.asset_dir, child_id)))

        protocol.run()
        return True

    def clear_children(self, kind, vendor_id):
        """Delete every child of one kind, reset the id list, recreate an empty subtree."""
        child_kind = CHILD_KINDS[kind]
        protocol = LifecycleProtocol(f"clear_{kind}s")
        self._require_vendor(protocol, vendor_id)
        vendor_oid = to_object_id(vendor_id)

        protocol.step("remove_children", lambda ctx: child_kind.model.delete_matching({"vendor_id": vendor_oid}))
        protocol.step("reset_vendor_ids", lambda ctx: self._reset_child_ids(vendor_id, kind))
        if child_kind.asset_dir:
            kind_path = self.assets.path_for(vendor_id, child_kind.asset_dir)
            protocol.step("purge_kind_subtree", lambda ctx: self.assets.remove_subtree(kind_path))
            protocol.step("recreate_kind_subtree", lambda ctx: self.assets.create_subtree(kind_path))

        return protocol.run()["remove_children"]

    def _push_child_id(self, vendor_id, kind, child_id):
        with self.locks.for_vendor(vendor_id):
            vendor = Vendor.find_by_id(vendor_id)
            if not vendor:
                raise NotFoundError("vendor not found")
            ids = Vendor.child_ids(vendor, kind)
            ids.append(to_object_id(child_id))
            return Vendor.set_child_ids(vendor_id, kind, ids)

    def _pull_child_id(self, vendor_id, kind, child_id):
        with self.locks.for_vendor(vendor_id):
            vendor = Vendor.find_by_id(vendor_id)
            if not vendor:
                raise NotFoundError("vendor not found")
            ids = [c for c in Vendor.child_ids(vendor, kind) if str(c) != str(child_id)]
            return Vendor.set_child_ids(vendor_id, kind, ids)

    def _reset_child_ids(self, vendor_id, kind):
        with self.locks.for_vendor(vendor_id):
            return Vendor.set_child_ids(vendor_id, kind, [])

    # ------------------------------------------------------------------
    # single-slot image (product wallpaper, announcement image)
    # ------------------------------------------------------------------
    def set_image(self, kind, vendor_id, child_id, read_upload):
        """
        Replace the child's image. `read_upload` parses and validates the
        multipart body; it runs only once the child is known to exist.
        """
        child_kind = CHILD_KINDS[kind]
        protocol = LifecycleProtocol(f"set_{kind}_image")
        self._require_vendor(protocol, vendor_id)
        child = self._require_child(protocol, kind, vendor_id, child_id)

        upload = read_upload()
        old_ref = child.get("image")
        child_path = self.assets.path_for(vendor_id, child_kind.asset_dir, child_id)

        if old_ref:
            protocol.step("purge_old_image", lambda ctx: self.assets.remove_asset(old_ref))
        protocol.step("store_upload", lambda ctx: self.assets.store_upload(
            child_path, upload.stored_name(), upload.content))
        protocol.step("persist_image_ref", lambda ctx: self._persist_or_missing(
            child_kind.model.set_image(child_id, vendor_id, ctx["store_upload"]), kind))

        return protocol.run()["store_upload"]

    def delete_image(self, kind, vendor_id, child_id):
        child_kind = CHILD_KINDS[kind]
        protocol = LifecycleProtocol(f"delete_{kind}_image")
        self._require_vendor(protocol, vendor_id)
        child = self._require_child(protocol, kind, vendor_id, child_id)

        old_ref = child.get("image")
        if old_ref:
            protocol.step("purge_image", lambda ctx: self.assets.remove_asset(old_ref))
        protocol.step("clear_image_ref", lambda ctx: self._persist_or_missing(
            child_kind.model.set_image(child_id, vendor_id, None), kind))

        protocol.run()
        return True

    # ------------------------------------------------------------------
    # bounded product gallery
    # ------------------------------------------------------------------
    def append_gallery_image(self, vendor_id, product_id, read_upload):
        """
        Capacity is checked before the upload is parsed; the check and the append
        run under the vendor lock so concurrent appends cannot overfill it.
        """
        protocol = LifecycleProtocol("append_gallery_image")
        self._require_vendor(protocol, vendor_id)

        with self.locks.for_vendor(vendor_id):
            product = self._require_child(protocol, "product", vendor_id, product_id)
            gallery = list(product.get("gallery") or [])
            if len(gallery) >= self.gallery_size:
                protocol.reject(CapacityError("no room left for gallery images"))

            upload = read_upload()
            product_path = self.assets.path_for(vendor_id, "products", product_id)

            protocol.step("store_upload", lambda ctx: self.assets.store_upload(
                product_path, upload.stored_name(GALLERY_FILE_PREFIX), upload.content))
            protocol.step("persist_gallery", lambda ctx: self._persist_or_missing(
                Product.set_gallery(product_id, vendor_id, gallery + [ctx["store_upload"]]), "product"))

            return protocol.run()["store_upload"]

    def clear_gallery(self, vendor_id, product_id):
        """Purge every gallery file (abort on first failure), then empty the list."""
        protocol = LifecycleProtocol("clear_gallery")
        self._require_vendor(protocol, vendor_id)

        with self.locks.for_vendor(vendor_id):
            product = self._require_child(protocol, "product", vendor_id, product_id)

            for index, asset_ref in enumerate(product.get("gallery") or []):
                protocol.step(f"purge_gallery_image_{index}",
                              lambda ctx, ref=asset_ref: self.assets.remove_asset(ref))
            protocol.step("reset_gallery", lambda ctx: self._persist_or_missing(
                Product.set_gallery(product_id, vendor_id, []), "product"))

            protocol.run()
            return True

    @staticmethod
    def _persist_or_missing(matched, kind):
        if not matched:
            raise NotFoundError(f"{kind} not found")
        return matched


lifecycle = LifecycleCoordinator()
