import os
import shutil

from ..utils.errors import StoreFailure
from ..utils.logger import Log


class AssetStore:
    """
    Hierarchical file storage for uploaded images.

    Layout: <UPLOAD_ROOT_DIR>/<vendor_id>/<kind>/<item_id>/<filename>.
    AssetRefs are stored relative to FILE_SERVER_ROOT so the web server serving
    the files can resolve them directly.
    """

    STORE_NAME = "asset store"

    def __init__(self):
        self.upload_root = None
        self.file_server_root = None

    def init_app(self, app):
        self.upload_root = os.path.abspath(app.config["UPLOAD_ROOT_DIR"])
        self.file_server_root = os.path.abspath(app.config["FILE_SERVER_ROOT"])
        os.makedirs(self.upload_root, exist_ok=True)

    # ------------------------------------------------------------------
    # paths
    # ------------------------------------------------------------------
    def path_for(self, vendor_id, kind=None, item_id=None):
        parts = [self.upload_root, str(vendor_id)]
        if kind:
            parts.append(kind)
            if item_id:
                parts.append(str(item_id))
        return os.path.join(*parts)

    def resolve(self, asset_ref):
        """Absolute path of an AssetRef; refuses refs escaping the file server root."""
        full_path = os.path.abspath(os.path.join(self.file_server_root, asset_ref))
        if os.path.commonpath([full_path, self.file_server_root]) != self.file_server_root:
            raise StoreFailure(self.STORE_NAME, f"asset ref outside file server root: {asset_ref}")
        return full_path

    def to_asset_ref(self, full_path):
        return os.path.relpath(full_path, self.file_server_root).replace(os.sep, "/")

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------
    def create_subtree(self, path):
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise StoreFailure(self.STORE_NAME, str(e)) from e
        Log.info(f"[asset_store.py][create_subtree] {path}")
        return path

    def remove_subtree(self, path):
        if not os.path.exists(path):
            return False
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StoreFailure(self.STORE_NAME, str(e)) from e
        Log.info(f"[asset_store.py][remove_subtree] {path}")
        return True

    def store_upload(self, path, filename, content: bytes):
        """Write `content` to `path/filename` and return its AssetRef."""
        file_path = os.path.join(path, filename)
        try:
            os.makedirs(path, exist_ok=True)
            with open(file_path, "wb") as fh:
                fh.write(content)
        except OSError as e:
            raise StoreFailure(self.STORE_NAME, str(e)) from e
        Log.info(f"[asset_store.py][store_upload] {file_path} ({len(content)} bytes)")
        return self.to_asset_ref(file_path)

    def remove_asset(self, asset_ref):
        """Remove one stored file; a missing file is not an error."""
        file_path = self.resolve(asset_ref)
        try:
            if os.path.isdir(file_path):
                shutil.rmtree(file_path)
            elif os.path.exists(file_path):
                os.remove(file_path)
            else:
                return False
        except OSError as e:
            raise StoreFailure(self.STORE_NAME, str(e)) from e
        Log.info(f"[asset_store.py][remove_asset] {file_path}")
        return True


asset_store = AssetStore()
