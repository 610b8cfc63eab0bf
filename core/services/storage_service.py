# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles artwork image upload/removal/listing with Supabase Storage.
# Images are stored at the bucket root under generated, collision-resistant
# filenames (see lib.utils.generate_unique_filename).
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import generate_unique_filename
from app.config import settings
from app.exceptions import StorageUploadError
from core.models.artwork import ImageUpload

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading, listing and removing artwork images.
    """

    @staticmethod
    def _bucket():
        client = SupabaseClient.get_client()
        return client.storage.from_(settings.STORAGE_BUCKET)

    @staticmethod
    def upload_image(image: ImageUpload) -> str:
        """
        Upload an image under a freshly generated filename.

        Args:
            image: The raw image and its original filename

        Returns:
            Storage key (filename) of the uploaded object

        Raises:
            StorageUploadError: If upload fails
        """
        key = generate_unique_filename(image.filename)

        try:
            StorageService._bucket().upload(
                path=key,
                file=image.content,
                file_options={"content-type": image.content_type},
            )

            logger.info(f"Uploaded image to storage: {key} ({image.size_bytes} bytes)")
            return key

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(key, str(e))

    @staticmethod
    def get_public_url(storage_key: str) -> str:
        """
        Get a public URL for a storage file.

        Args:
            storage_key: Path in storage bucket

        Returns:
            Public URL string
        """
        try:
            return StorageService._bucket().get_public_url(storage_key)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise

    @staticmethod
    def delete_file(storage_key: str) -> bool:
        """
        Delete a file from storage.

        Args:
            storage_key: Path in storage bucket

        Returns:
            True if deleted successfully, False otherwise (failure is logged)
        """
        try:
            StorageService._bucket().remove([storage_key])
            logger.info(f"Deleted file from storage: {storage_key}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete file {storage_key}: {e}")
            return False

    @staticmethod
    def list_files() -> list[dict[str, Any]]:
        """
        List all files at the bucket root.

        Returns:
            List of file info dicts (at least a "name" key), [] on failure
        """
        try:
            response = StorageService._bucket().list()
            return response or []

        except Exception as e:
            logger.error(f"Failed to list files: {e}")
            return []
