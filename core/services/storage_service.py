# =============================================================================
# core/services/storage_service.py - Image Upload Staging
# =============================================================================
# Multipart image uploads land in a local staging directory before any
# external image host sees them. The staged file is served back under
# /uploads/<name>, which becomes the campground's image reference.
# =============================================================================

import logging
import uuid
from pathlib import Path

from app.config import settings
from app.exceptions import InvalidFileTypeError, FileTooLargeError

logger = logging.getLogger(__name__)

# URL prefix the staging directory is mounted under
UPLOADS_URL_PREFIX = "/uploads"


class StorageService:
    """
    Service for staging uploaded images on local disk.

    Files are renamed to a random id so user-supplied names never reach
    the filesystem.
    """

    @staticmethod
    def validate_image(filename: str, size_bytes: int) -> str:
        """
        Check extension and size of an upload.

        Returns:
            The normalized file extension (e.g. ".jpg")

        Raises:
            InvalidFileTypeError: If the extension is not allowed
            FileTooLargeError: If the file exceeds MAX_UPLOAD_SIZE_MB
        """
        file_ext = Path(filename).suffix.lower()
        if file_ext not in settings.allowed_extensions_list:
            raise InvalidFileTypeError(filename, settings.allowed_extensions_list)

        if size_bytes > settings.max_upload_size_bytes:
            raise FileTooLargeError(size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        return file_ext

    @staticmethod
    def stage_image(
        content: bytes,
        filename: str,
        upload_dir: str | None = None,
    ) -> str:
        """
        Write an uploaded image to the staging directory.

        Args:
            content: File bytes
            filename: Original filename (only the extension is kept)
            upload_dir: Override for settings.UPLOAD_DIR

        Returns:
            The public URL path of the staged file, e.g. "/uploads/ab12.jpg"
        """
        file_ext = StorageService.validate_image(filename, len(content))

        target_dir = Path(upload_dir or settings.UPLOAD_DIR)
        target_dir.mkdir(parents=True, exist_ok=True)

        staged_name = f"{uuid.uuid4().hex}{file_ext}"
        (target_dir / staged_name).write_bytes(content)

        logger.info(f"Staged upload {filename} as {staged_name} ({len(content)} bytes)")
        return f"{UPLOADS_URL_PREFIX}/{staged_name}"
