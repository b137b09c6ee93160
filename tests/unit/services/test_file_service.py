"""
Unit tests for FileService and object key construction.
"""

import pytest

from docversions.core.exceptions import PayloadTooLargeError
from docversions.services.base_service import DocumentValidationError
from docversions.services.file_service import build_object_key


class TestBuildObjectKey:

    @pytest.mark.unit
    def test_full_key(self):
        assert build_object_key("doc-1", "100", "pdf", "a.pdf") == "doc-1/100/pdf/a.pdf"

    @pytest.mark.unit
    def test_prefix_without_file_name(self):
        assert build_object_key("doc-1", "100", "images") == "doc-1/100/images"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "parts",
        [
            ("", "100", "pdf", "a.pdf"),
            ("doc-1", " ", "pdf", "a.pdf"),
            ("doc-1", "100", "pdf", ""),
            ("doc-1", "100", "a/b", "a.pdf"),
            ("doc-1", "100", "pdf", ".."),
        ],
    )
    def test_rejects_bad_segments(self, parts):
        with pytest.raises(DocumentValidationError):
            build_object_key(*parts)


class TestValidateUpload:

    @pytest.mark.unit
    def test_accepts_pdf_with_parameters(self, file_service):
        assert file_service.validate_upload("application/pdf; charset=binary", 10) == "application/pdf"

    @pytest.mark.unit
    @pytest.mark.parametrize("content_type", [None, "", "text/plain", "image/png"])
    def test_rejects_other_media_types(self, file_service, content_type):
        with pytest.raises(DocumentValidationError):
            file_service.validate_upload(content_type, 10)

    @pytest.mark.unit
    def test_rejects_empty_body(self, file_service):
        with pytest.raises(DocumentValidationError):
            file_service.validate_upload("image/jpeg", 0)

    @pytest.mark.unit
    def test_rejects_oversize_body(self, file_service):
        file_service.max_upload_size = 5

        with pytest.raises(PayloadTooLargeError) as exc_info:
            file_service.validate_upload("image/jpeg", 6)

        assert exc_info.value.error_code == "PAYLOAD_TOO_LARGE"


class TestFileOperations:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_upload_file(self, file_service, mock_gcs_client, sample_pdf_content):
        result = await file_service.upload_file(
            "doc-1", "100", "pdf", "report.pdf", sample_pdf_content, "application/pdf"
        )

        assert result == {
            "key": "doc-1/100/pdf/report.pdf",
            "size": len(sample_pdf_content),
            "contentType": "application/pdf",
        }
        mock_gcs_client.upload_file_to_path_async.assert_awaited_once_with(
            "doc-1/100/pdf/report.pdf", sample_pdf_content, "application/pdf"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_upload_never_reaches_storage(self, file_service, mock_gcs_client):
        with pytest.raises(DocumentValidationError):
            await file_service.upload_file("doc-1", "100", "txt", "a.txt", b"hi", "text/plain")

        mock_gcs_client.upload_file_to_path_async.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_download_defaults_content_type(self, file_service, mock_gcs_client):
        mock_gcs_client.download_file_async.return_value = (b"data", None)

        content, content_type = await file_service.download_file("doc-1", "100", "pdf", "a.pdf")

        assert content == b"data"
        assert content_type == "application/octet-stream"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_list_files_maps_fields(self, file_service, mock_gcs_client):
        mock_gcs_client.list_files_with_prefix_async.return_value = [
            {
                "storage_path": "doc-1/100/pdf/a.pdf",
                "name": "a.pdf",
                "size": 42,
                "updated": "2024-01-01T00:00:00+00:00",
            }
        ]

        files = await file_service.list_files("doc-1", "100", "pdf")

        assert files == [
            {"name": "a.pdf", "size": 42, "lastModified": "2024-01-01T00:00:00+00:00"}
        ]
        mock_gcs_client.list_files_with_prefix_async.assert_awaited_once_with("doc-1/100/pdf")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_list_images_adds_url(self, file_service, mock_gcs_client):
        mock_gcs_client.list_files_with_prefix_async.return_value = [
            {
                "storage_path": "doc-1/100/images/p.jpg",
                "name": "p.jpg",
                "size": 7,
                "updated": None,
            }
        ]

        images = await file_service.list_images("doc-1", "100")

        assert images[0]["url"] == "https://storage.googleapis.com/test-bucket/doc-1/100/images/p.jpg"
        mock_gcs_client.list_files_with_prefix_async.assert_awaited_once_with("doc-1/100/images")
