# utils/upload_utils.py

import logging
import os
import re
import secrets
import time
from pathlib import Path
from typing import FrozenSet, Optional
from fastapi import UploadFile
import config
from utils.errors import EmployeeValidationError, StorageFailure

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES: FrozenSet[str] = frozenset({
    "image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp",
})

def get_upload_root() -> Path:
    root = Path(config.UPLOAD_DIR).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root

def has_file(upload: Optional[UploadFile]) -> bool:
    # Browsers send an empty part with no filename when nothing was chosen
    return upload is not None and bool((upload.filename or "").strip())

def sanitize_filename(filename: str) -> str:
    name = os.path.basename((filename or "").replace("\\", "/"))
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("._")
    return name or "upload"

def unique_filename(original: str) -> str:
    """
    <epoch millis>-<random hex>-<original name>. The random part keeps two
    uploads of the same file in the same millisecond apart.
    """
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{sanitize_filename(original)}"

async def save_upload(upload: UploadFile, *, max_size_mb: Optional[int] = None) -> str:
    """
    Persist an uploaded image and return its path relative to the public mount,
    e.g. "uploads/1718000000000-a1b2c3d4-photo.png".
    """
    max_size_mb = max_size_mb or config.MAX_UPLOAD_MB

    content_type = (upload.content_type or "").lower()
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise EmployeeValidationError("Invalid file type. Only image uploads are allowed")

    data: bytes = await upload.read()
    if not data:
        raise EmployeeValidationError("Uploaded file is empty")
    if len(data) > max_size_mb * 1024 * 1024:
        raise EmployeeValidationError(f"File exceeds max size {max_size_mb} MB")

    filename = unique_filename(upload.filename)
    file_path = get_upload_root() / filename

    try:
        file_path.write_bytes(data)
    except OSError:
        logger.exception("Failed to write upload %s", file_path)
        raise StorageFailure()

    logger.info("Saved upload %s (%d bytes)", file_path, len(data))
    return f"{config.UPLOAD_URL_PREFIX}/{filename}"

def resolve_upload_path(relative_path: str) -> Optional[Path]:
    """Map a stored "uploads/<name>" reference back to a file inside the upload root."""
    prefix = f"{config.UPLOAD_URL_PREFIX}/"
    if not relative_path or not relative_path.startswith(prefix):
        return None
    name = relative_path[len(prefix):]
    if not name or "/" in name or "\\" in name or name in (".", ".."):
        return None
    return get_upload_root() / name

def delete_upload(relative_path: Optional[str]) -> bool:
    """
    Remove a previously stored upload. Cleanup only: a missing file or an
    OS error is logged and reported as False, never raised.
    """
    file_path = resolve_upload_path(relative_path or "")
    if file_path is None:
        return False
    if not file_path.exists():
        logger.warning("Delete requested but upload not found: %s", file_path)
        return False
    try:
        file_path.unlink()
    except OSError as e:
        logger.warning("Could not delete upload %s: %s", file_path, e)
        return False
    logger.info("Deleted upload %s", file_path)
    return True
