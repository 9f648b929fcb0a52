# storefront/core/storage_utils.py
import uuid

from storefront.core.config import get_settings
from storefront.core.supabase_client import supabase_admin


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to the storage bucket and return a public URL.

    If a file already exists at this path, it is overwritten
    thanks to the 'upsert' option.

    Args:
        path: Full object path inside the bucket.
              Example: "products/<uuid>/<uuid>.png"
        file_bytes: File content in bytes.
        content_type: MIME type stored with the object.
    """
    bucket = supabase_admin().storage.from_(get_settings().STORAGE_BUCKET)
    bucket.upload(path, file_bytes, {"upsert": "true", "content-type": content_type})
    return bucket.get_public_url(path)


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4, e.g. "<uuid4>.png".
    """
    return f"{uuid.uuid4()}.{ext}"
