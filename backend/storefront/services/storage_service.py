"""
Storage Service
Blob storage for generated files, backed by a Supabase Storage bucket

Usage:
    storage = StorageService(settings)
    url = storage.upload("reports/sales.csv", data, "text/csv")
"""
import logging
from typing import Optional

from supabase import Client, create_client

from storefront.core.config import Settings
from storefront.core.errors import StorageError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Thin wrapper around the Supabase Storage API

    Disabled (uploads return None) when SUPABASE_URL or
    SUPABASE_SERVICE_ROLE_KEY are not set.
    """

    def __init__(self, settings: Settings, client: Optional[Client] = None):
        self.settings = settings
        self.bucket = settings.STORAGE_BUCKET
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or self.settings.storage_enabled

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = create_client(self.settings.SUPABASE_URL, self.settings.SUPABASE_SERVICE_ROLE_KEY)
        return self._client

    def upload(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> Optional[str]:
        """
        Upload bytes under ``key`` and return a signed URL for them

        Returns:
            Signed URL, or None when storage is disabled

        Raises:
            StorageError: the upload or URL signing failed
        """
        if not self.enabled:
            logger.info(f"Storage disabled, {key} kept locally only")
            return None

        try:
            self.client.storage.from_(self.bucket).upload(
                key,
                data,
                {"content-type": content_type, "upsert": "true"},
            )
        except Exception as e:
            logger.error(f"Upload of {key} to bucket {self.bucket} failed: {e}")
            raise StorageError(f"Failed to upload {key}")

        logger.info(f"Uploaded {key} to bucket {self.bucket} ({len(data)} bytes)")
        return self.get_url(key)

    def delete(self, key: str):
        """
        Remove ``key`` from the bucket; a no-op when storage is disabled

        Raises:
            StorageError: the removal failed
        """
        if not self.enabled:
            return

        try:
            self.client.storage.from_(self.bucket).remove([key])
        except Exception as e:
            logger.error(f"Removing {key} from bucket {self.bucket} failed: {e}")
            raise StorageError(f"Failed to delete {key}")

        logger.info(f"Removed {key} from bucket {self.bucket}")

    def get_url(self, key: str, expires_in: Optional[int] = None) -> str:
        """
        Create a time-limited signed URL for ``key``

        Raises:
            StorageError: storage disabled or signing failed
        """
        if not self.enabled:
            raise StorageError("Blob storage is not configured")

        expires_in = expires_in or self.settings.SIGNED_URL_EXPIRES_SECONDS
        try:
            result = self.client.storage.from_(self.bucket).create_signed_url(key, expires_in)
        except Exception as e:
            logger.error(f"Signing URL for {key} failed: {e}")
            raise StorageError(f"Failed to create URL for {key}")

        url = result.get("signedURL") or result.get("signedUrl")
        if not url:
            raise StorageError(f"Failed to create URL for {key}")
        return url
