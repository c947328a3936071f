"""
File upload utilities for photo validation, storage and static serving.
Provides common file operations and validation functions.
"""

import logging
import os
import time
import uuid
from pathlib import Path
from typing import List, Optional

import aiofiles
from fastapi import UploadFile
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

from estate_api.utils.exceptions import (
    FileSizeExceededError,
    FileUploadError,
    InternalServerError,
    UnsupportedFileTypeError,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class FileValidator:
    """Checks an uploaded photo against the configured type and size limits."""

    def __init__(self, allowed_types: List[str], max_file_size: int):
        self.allowed_types = allowed_types
        self.max_file_size = max_file_size

    def validate_mime_type(self, mime_type: Optional[str]) -> str:
        """
        Validate MIME type.

        Raises:
            UnsupportedFileTypeError: If MIME type is not allowed
        """
        if not mime_type or mime_type not in self.allowed_types:
            raise UnsupportedFileTypeError(mime_type or "unknown", self.allowed_types)
        return mime_type

    def validate_file_size(self, file_size: int) -> int:
        """
        Validate file size.

        Raises:
            FileSizeExceededError: If file size exceeds limit
            FileUploadError: If the file is empty
        """
        if file_size <= 0:
            raise FileUploadError("File is empty")
        if file_size > self.max_file_size:
            raise FileSizeExceededError(file_size, self.max_file_size)
        return file_size


class FileStorage:
    """Stores uploaded files in a flat directory served under a public URL prefix."""

    def __init__(self, upload_dir: str, public_base_url: str, url_prefix: str):
        self.upload_dir = Path(upload_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.url_prefix = "/" + url_prefix.strip("/")
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_unique_filename(original_filename: Optional[str]) -> str:
        """
        Millisecond timestamp plus a random suffix, keeping the original extension.
        """
        extension = Path(original_filename or "").suffix.lower()
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{extension}"

    def public_url(self, filename: str) -> str:
        return f"{self.public_base_url}{self.url_prefix}/{filename}"

    def filename_from_url(self, url: Optional[str]) -> Optional[str]:
        """Return the stored filename a public URL points at, or None if it is not ours."""
        if not url:
            return None
        base = f"{self.public_base_url}{self.url_prefix}/"
        if not url.startswith(base):
            return None
        filename = url[len(base):]
        # Only flat names; never walk out of the upload directory
        if not filename or "/" in filename or "\\" in filename or filename in (".", ".."):
            return None
        return filename

    def path_for(self, filename: str) -> Path:
        return self.upload_dir / filename

    async def save(self, file: UploadFile, validator: FileValidator) -> str:
        """
        Stream an uploaded file to disk.

        Returns:
            The stored filename

        Raises:
            FileSizeExceededError: If the stream grows beyond the size limit
            InternalServerError: If the filesystem rejects the write
        """
        filename = self.generate_unique_filename(file.filename)
        file_path = self.path_for(filename)
        written = 0

        try:
            await file.seek(0)
            async with aiofiles.open(file_path, "wb") as out:
                while True:
                    chunk = await file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > validator.max_file_size:
                        raise FileSizeExceededError(written, validator.max_file_size)
                    await out.write(chunk)
            validator.validate_file_size(written)
        except (FileSizeExceededError, FileUploadError):
            self._remove_quietly(file_path)
            raise
        except OSError as e:
            logger.error(f"Failed to save upload {filename}: {e}")
            self._remove_quietly(file_path)
            raise InternalServerError()

        return filename

    def delete(self, filename: str) -> bool:
        file_path = self.path_for(filename)
        if file_path.exists():
            file_path.unlink()
            return True
        return False

    def count_files(self) -> int:
        return sum(1 for entry in os.scandir(self.upload_dir) if entry.is_file())

    @staticmethod
    def _remove_quietly(file_path: Path) -> None:
        # Clean up partial file if it exists
        file_path.unlink(missing_ok=True)


class CachedStaticFiles(StaticFiles):
    """Static files with a long-lived Cache-Control header; stored uploads never change."""

    def __init__(self, *args, max_age: int = 31536000, **kwargs):
        super().__init__(*args, **kwargs)
        self.cache_control = f"public, max-age={max_age}"

    def file_response(self, *args, **kwargs) -> Response:
        response = super().file_response(*args, **kwargs)
        response.headers["Cache-Control"] = self.cache_control
        return response
