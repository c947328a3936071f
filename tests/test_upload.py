"""
Tests for photo validation, storage and static serving.
"""

import pytest
from unittest.mock import patch

from estate_api.services.upload import UploadService
from estate_api.utils.exceptions import (
    FileSizeExceededError,
    FileUploadError,
    InternalServerError,
    UnsupportedFileTypeError,
)
from estate_api.utils.file_utils import FileStorage, FileValidator
from tests.conftest import make_upload


class TestFileValidator:
    """Test upload type and size limits."""

    def setup_method(self):
        self.validator = FileValidator(["image/jpeg", "image/png"], max_file_size=100)

    def test_allowed_mime_type(self):
        assert self.validator.validate_mime_type("image/png") == "image/png"

    @pytest.mark.parametrize("mime_type", ["text/plain", "application/pdf", None, ""])
    def test_rejected_mime_type(self, mime_type):
        with pytest.raises(UnsupportedFileTypeError):
            self.validator.validate_mime_type(mime_type)

    def test_size_limits(self):
        assert self.validator.validate_file_size(100) == 100
        with pytest.raises(FileSizeExceededError):
            self.validator.validate_file_size(101)
        with pytest.raises(FileUploadError, match="File is empty"):
            self.validator.validate_file_size(0)


class TestFileStorage:
    """Test the flat upload directory."""

    @pytest.fixture
    def storage(self, tmp_path) -> FileStorage:
        return FileStorage(str(tmp_path / "photos"), "http://example.com/", "/uploads/")

    def test_creates_directory(self, storage: FileStorage):
        assert storage.upload_dir.is_dir()

    def test_unique_filenames_keep_extension(self):
        first = FileStorage.generate_unique_filename("Front.JPG")
        second = FileStorage.generate_unique_filename("Front.JPG")

        assert first != second
        assert first.endswith(".jpg")
        assert first.split("-")[0].isdigit()

    def test_filename_without_extension(self):
        assert "." not in FileStorage.generate_unique_filename(None)

    def test_public_url_round_trip(self, storage: FileStorage):
        url = storage.public_url("1700000000000-abcd1234.png")

        assert url == "http://example.com/uploads/1700000000000-abcd1234.png"
        assert storage.filename_from_url(url) == "1700000000000-abcd1234.png"

    @pytest.mark.parametrize("url", [
        None,
        "",
        "http://elsewhere.com/uploads/a.png",
        "http://example.com/uploads/",
        "http://example.com/uploads/../secret.txt",
        "http://example.com/uploads/nested/a.png",
    ])
    def test_foreign_or_unsafe_urls_ignored(self, storage: FileStorage, url):
        assert storage.filename_from_url(url) is None

    @pytest.mark.asyncio
    async def test_save_writes_content(self, storage: FileStorage):
        validator = FileValidator(["image/jpeg"], max_file_size=1024)

        filename = await storage.save(make_upload(b"photo-bytes"), validator)

        assert storage.path_for(filename).read_bytes() == b"photo-bytes"
        assert storage.count_files() == 1

    @pytest.mark.asyncio
    async def test_save_over_limit_leaves_nothing(self, storage: FileStorage):
        validator = FileValidator(["image/jpeg"], max_file_size=4)

        with pytest.raises(FileSizeExceededError):
            await storage.save(make_upload(b"too many bytes"), validator)

        assert storage.count_files() == 0

    @pytest.mark.asyncio
    async def test_save_empty_file_rejected(self, storage: FileStorage):
        validator = FileValidator(["image/jpeg"], max_file_size=1024)

        with pytest.raises(FileUploadError):
            await storage.save(make_upload(b""), validator)

        assert storage.count_files() == 0

    def test_delete(self, storage: FileStorage):
        storage.path_for("old.png").write_bytes(b"x")

        assert storage.delete("old.png") is True
        assert storage.delete("old.png") is False


class TestUploadService:
    """Test photo storage through the upload service."""

    @pytest.mark.asyncio
    async def test_no_photo(self, upload_service: UploadService):
        assert await upload_service.store_photo(None) is None

    @pytest.mark.asyncio
    async def test_empty_part_without_filename(self, upload_service: UploadService):
        assert await upload_service.store_photo(make_upload(b"", filename="")) is None

    @pytest.mark.asyncio
    async def test_store_and_discard(self, upload_service: UploadService, settings):
        url = await upload_service.store_photo(make_upload(filename="porch.png", content_type="image/png"))

        assert url.startswith(f"{settings.public_base_url}{settings.uploads_url_prefix}/")
        assert url.endswith(".png")

        filename = upload_service.storage.filename_from_url(url)
        assert upload_service.storage.path_for(filename).exists()

        assert upload_service.discard(url) is True
        assert not upload_service.storage.path_for(filename).exists()

    @pytest.mark.asyncio
    async def test_rejects_unsupported_type(self, upload_service: UploadService):
        with pytest.raises(UnsupportedFileTypeError):
            await upload_service.store_photo(
                make_upload(b"%PDF-1.4", filename="deed.pdf", content_type="application/pdf")
            )

    def test_discard_foreign_url(self, upload_service: UploadService):
        assert upload_service.discard("https://cdn.example.com/photo.jpg") is False
        assert upload_service.discard(None) is False


class TestStorageFailures:
    """Filesystem errors are server faults; cleanup failures are not fatal."""

    @pytest.mark.asyncio
    async def test_write_failure_is_internal_error(self, tmp_path):
        storage = FileStorage(str(tmp_path), "http://example.com", "/uploads")
        validator = FileValidator(["image/jpeg"], max_file_size=1024)

        with patch(
            "estate_api.utils.file_utils.aiofiles.open",
            side_effect=OSError(28, "No space left on device"),
        ):
            with pytest.raises(InternalServerError) as exc_info:
                await storage.save(make_upload(), validator)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Internal server error."
        assert storage.count_files() == 0

    @pytest.mark.asyncio
    async def test_discard_survives_unlink_error(self, upload_service: UploadService):
        url = await upload_service.store_photo(make_upload())

        with patch.object(upload_service.storage, "delete", side_effect=PermissionError("read-only")):
            assert upload_service.discard(url) is False

        assert upload_service.discard(url) is True
