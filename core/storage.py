# core/storage.py

"""
Image upload to the BaaS object storage.

Objects are stored as <uuid4>.<ext>; the public URL follows the
provider's public-bucket layout.
"""

import logging
import uuid
from typing import Dict, Optional

import magic
from django.conf import settings

from core.baas import BaaSClient, BaaSError
from core.exceptions import ExternalServiceError, ValidationFailed

logger = logging.getLogger(__name__)


def validate_image_file(file) -> str:
    """Validate size and sniffed MIME type. Returns the file extension."""
    config = getattr(settings, "UPLOAD_CONFIG", {})
    max_size = config.get("MAX_IMAGE_SIZE_MB", 5) * 1024 * 1024
    allowed = config.get("ALLOWED_IMAGE_MIMES", {})

    if file.size > max_size:
        raise ValidationFailed(f"File too large. Max {max_size // (1024 * 1024)}MB")

    mime = magic.from_buffer(file.read(2048), mime=True)
    file.seek(0)

    if mime not in allowed:
        raise ValidationFailed(f"Invalid file type. Allowed: {', '.join(sorted(allowed))}")

    return allowed[mime]


class StorageClient(BaaSClient):
    service_name = "storage"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.default_bucket = getattr(settings, "SUPABASE_CONFIG", {}).get("STORAGE_BUCKET", "images")

    def public_url(self, bucket: str, storage_path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{storage_path}"

    def upload_image(self, file, bucket: Optional[str] = None) -> Dict[str, str]:
        bucket = bucket or self.default_bucket
        ext = validate_image_file(file)
        mime = file.content_type or "application/octet-stream"
        storage_path = f"{uuid.uuid4()}.{ext}"

        headers = self._headers(service_role=True)
        headers["Content-Type"] = mime
        headers["x-upsert"] = "false"

        try:
            self._request(
                "POST",
                f"/storage/v1/object/{bucket}/{storage_path}",
                operation="upload_image",
                headers=headers,
                data=file.read(),
            )
        except BaaSError as e:
            logger.error(f"STORAGE_UPLOAD_ERROR bucket={bucket}: {e.message}")
            raise ExternalServiceError("Image upload failed.") from e

        return {
            "public_url": self.public_url(bucket, storage_path),
            "storage_path": storage_path,
        }
