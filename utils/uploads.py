# utils/uploads.py
import os
import uuid

from utils.errors import ValidationFailed

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
CERTIFICATION_SUBDIR = "certifications"


def certification_folder(upload_root: str) -> str:
    return os.path.join(upload_root, CERTIFICATION_SUBDIR)


def _stream_size(file_storage) -> int:
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def format_size_limit(max_bytes: int) -> str:
    """Largest whole unit that represents max_bytes exactly, e.g. 5MB, 512KB, 1000 bytes."""
    for unit, factor in (("MB", 1024 * 1024), ("KB", 1024)):
        if max_bytes >= factor and max_bytes % factor == 0:
            return f"{max_bytes // factor}{unit}"
    return f"{max_bytes} bytes"


def save_certification_image(file_storage, upload_root: str, base_url: str, max_bytes: int) -> str:
    """
    Validate and store an uploaded certification image.
    Returns the public URL under /certifications.
    """
    if file_storage is None or not file_storage.filename:
        raise ValidationFailed("No file uploaded.")

    size = _stream_size(file_storage)
    if size == 0:
        raise ValidationFailed("No file uploaded.")

    extension = os.path.splitext(file_storage.filename)[1].lower()
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationFailed("Invalid file type. Only image files are allowed.")

    if size > max_bytes:
        raise ValidationFailed(f"File size exceeds {format_size_limit(max_bytes)} limit.")

    folder = certification_folder(upload_root)
    os.makedirs(folder, exist_ok=True)

    unique_name = f"{uuid.uuid4().hex}{extension}"
    file_storage.save(os.path.join(folder, unique_name))

    return f"{base_url.rstrip('/')}/{CERTIFICATION_SUBDIR}/{unique_name}"
