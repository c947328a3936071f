"""
Upload service for listing photos.
Validates an optional uploaded file, stores it and derives its public URL.
"""

from typing import Optional
import logging

from fastapi import UploadFile

from estate_api.config import Settings
from estate_api.utils.file_utils import FileStorage, FileValidator

logger = logging.getLogger(__name__)


class UploadService:
    """Service for storing and discarding listing photos."""

    def __init__(self, settings: Settings):
        self.validator = FileValidator(
            allowed_types=settings.allowed_file_types,
            max_file_size=settings.max_file_size,
        )
        self.storage = FileStorage(
            upload_dir=settings.upload_dir,
            public_base_url=settings.public_base_url,
            url_prefix=settings.uploads_url_prefix,
        )

    @staticmethod
    def has_file(photo: Optional[UploadFile]) -> bool:
        # Browsers send an empty part with no filename when nothing was picked
        return photo is not None and bool(photo.filename)

    async def store_photo(self, photo: Optional[UploadFile]) -> Optional[str]:
        """
        Persist an uploaded photo.

        Args:
            photo: The ``photo`` form part, if any

        Returns:
            Public URL of the stored file, or None when no file was sent

        Raises:
            UnsupportedFileTypeError: If the MIME type is not allowed
            FileSizeExceededError: If the file is too large
            FileUploadError: If the file is empty or cannot be written
        """
        if not self.has_file(photo):
            return None

        self.validator.validate_mime_type(photo.content_type)
        if photo.size is not None:
            self.validator.validate_file_size(photo.size)

        filename = await self.storage.save(photo, self.validator)
        url = self.storage.public_url(filename)
        logger.info(f"Stored photo {photo.filename!r} as {filename}")
        return url

    def discard(self, photo_url: Optional[str]) -> bool:
        """
        Remove the stored file behind a public photo URL.

        URLs that do not point into the upload directory are ignored. Cleanup
        runs after the database write has committed, so filesystem errors are
        logged and reported as False instead of failing the request.

        Returns:
            True if a file was removed
        """
        filename = self.storage.filename_from_url(photo_url)
        if filename is None:
            return False

        try:
            removed = self.storage.delete(filename)
        except OSError as e:
            logger.warning(f"Could not remove photo {filename}: {e}")
            return False
        if removed:
            logger.info(f"Removed photo {filename}")
        return removed

    def count_stored(self) -> int:
        return self.storage.count_files()
