import os
import re
import uuid
from dataclasses import dataclass

from werkzeug.utils import secure_filename

from ..constants.service_code import ALLOWED_EXTENSIONS, ALLOWED_MIMETYPE_PATTERN
from .errors import UploadRejected
from .logger import Log


@dataclass
class UploadLimits:
    max_field_name_bytes: int
    max_field_value_bytes: int
    max_non_file_fields: int
    max_file_bytes: int
    max_files_per_request: int
    max_header_pairs: int

    @classmethod
    def from_config(cls, config):
        return cls(
            max_field_name_bytes=config["UPLOAD_MAX_FIELD_NAME_SIZE"],
            max_field_value_bytes=config["UPLOAD_MAX_FIELD_SIZE"],
            max_non_file_fields=config["UPLOAD_MAX_FIELDS"],
            max_file_bytes=config["UPLOAD_MAX_FILE_SIZE"],
            max_files_per_request=config["UPLOAD_MAX_FILES_PER_REQUEST"],
            max_header_pairs=config["UPLOAD_MAX_HEADER_PAIRS"],
        )


@dataclass
class Upload:
    filename: str
    content: bytes
    mimetype: str

    def stored_name(self, prefix=""):
        """Unique on-disk name; the client filename only contributes its extension."""
        extension = os.path.splitext(self.filename)[1].lower()
        return f"{prefix}{uuid.uuid4().hex}{extension}"


# Function to check if the file has a valid extension and mimetype
def allowed_file(filename, mimetype):
    extension = os.path.splitext(filename)[1].lower().lstrip(".")
    mimetype_ok = re.search(ALLOWED_MIMETYPE_PATTERN, mimetype or "") is not None
    return extension in ALLOWED_EXTENSIONS and mimetype_ok


def _byte_len(value):
    return len(value.encode("utf-8")) if isinstance(value, str) else len(value)


def read_single_upload(req, field_name, limits: UploadLimits) -> Upload:
    """
    Validate the multipart request and return the one image sent under
    `field_name`. Nothing is written anywhere; every limit is checked first.
    """
    log_tag = f"[file_upload.py][read_single_upload][{field_name}]"

    # non-file fields
    if len(req.form) > limits.max_non_file_fields:
        raise UploadRejected("too many fields")
    for name, value in req.form.items(multi=True):
        if _byte_len(name) > limits.max_field_name_bytes:
            raise UploadRejected("field name too long")
        if _byte_len(value) > limits.max_field_value_bytes:
            raise UploadRejected("field value too long")

    # file parts
    file_parts = list(req.files.items(multi=True))
    if len(file_parts) > limits.max_files_per_request:
        raise UploadRejected("too many files")

    for name, _ in file_parts:
        if _byte_len(name) > limits.max_field_name_bytes:
            raise UploadRejected("field name too long")
        if name != field_name:
            raise UploadRejected(f"unexpected field: {name}")

    file = req.files.get(field_name)
    if file is None or not file.filename:
        raise UploadRejected(f"missing file field: {field_name}")

    if len(file.headers) > limits.max_header_pairs:
        raise UploadRejected("too many part headers")

    if not allowed_file(file.filename, file.mimetype):
        Log.info(f"{log_tag} rejected format: {file.filename} ({file.mimetype})")
        raise UploadRejected("invalid file format")

    # read one byte past the limit so oversize files are detected without buffering them all
    content = file.stream.read(limits.max_file_bytes + 1)
    if len(content) > limits.max_file_bytes:
        raise UploadRejected("file too large")

    filename = secure_filename(file.filename)
    if not filename:
        raise UploadRejected("invalid file name")

    return Upload(filename=filename, content=content, mimetype=file.mimetype)
