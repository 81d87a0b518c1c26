from pathlib import Path
import os
import uuid
import shutil
from typing import Optional
from fastapi import UploadFile

from products_manager.config import get_settings

MEDIA_ROOT = Path(get_settings().MEDIA_ROOT)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def is_image_upload(upload_file: UploadFile) -> bool:
    if not upload_file or not upload_file.filename:
        return False
    ext = os.path.splitext(upload_file.filename)[1].lower()
    content_type = (upload_file.content_type or "").split(";")[0].strip()
    return ext in IMAGE_EXTENSIONS and (not content_type or content_type.startswith("image/"))


def save_upload_file(upload_file: UploadFile, subdir: str = "products") -> str:
    """Save a single UploadFile to media/subdir and return its URL path (/media/subdir/filename)."""
    if not upload_file or not upload_file.filename:
        raise ValueError("No file provided")
    ext = os.path.splitext(upload_file.filename)[1].lower()
    filename = f"{uuid.uuid4().hex}{ext}"
    dst_dir = MEDIA_ROOT / subdir
    _ensure_dir(dst_dir)
    file_path = dst_dir / filename
    with file_path.open("wb") as buffer:
        shutil.copyfileobj(upload_file.file, buffer)
    return f"/media/{subdir}/{filename}"


def delete_media_file(rel_url: Optional[str]) -> bool:
    """Delete a single media file by its stored relative URL (e.g. /media/products/<file>). Returns True if removed.

    Only paths inside MEDIA_ROOT are touched; missing files are ignored.
    """
    if not rel_url or not isinstance(rel_url, str):
        return False
    if not rel_url.startswith("/media/"):
        return False
    parts = rel_url.strip("/").split("/")  # [media, subdir, filename]
    if len(parts) < 3 or ".." in parts:
        return False
    target_path = MEDIA_ROOT / "/".join(parts[1:])
    if target_path.is_file():
        target_path.unlink()
        return True
    return False
