"""
File Service - object store pass-through for version attachments.

Objects are keyed `{documentId}/{timestamp}/{fileType}/{fileName}`; the
document table is never consulted.
"""

from typing import Any, Dict, List, Optional, Tuple

from docversions.core.config import settings
from docversions.core.exceptions import PayloadTooLargeError
from docversions.core.gcs_client import GCSClient, get_gcs_client
from .base_service import BaseService, DocumentValidationError


def build_object_key(
    document_id: str, timestamp: str, file_type: str, file_name: Optional[str] = None
) -> str:
    """Join key segments, rejecting empty or path-like parts."""
    parts = [document_id, timestamp, file_type]
    if file_name is not None:
        parts.append(file_name)

    for part in parts:
        if not part or not part.strip():
            raise DocumentValidationError(
                "documentId, timestamp, fileType and fileName are required"
            )
        if "/" in part or part in (".", ".."):
            raise DocumentValidationError(f"Invalid key segment: {part}")

    return "/".join(parts)


class FileService(BaseService):
    """Upload, download and list version files."""

    def __init__(self, storage: Optional[GCSClient] = None):
        super().__init__("files")
        self._storage = storage
        self.max_upload_size = settings.MAX_UPLOAD_SIZE
        self.allowed_content_types = set(settings.ALLOWED_UPLOAD_CONTENT_TYPES)

    @property
    def storage(self) -> GCSClient:
        if self._storage is None:
            self._storage = get_gcs_client()
        return self._storage

    def validate_upload(self, content_type: Optional[str], size: int) -> str:
        """Check media type and size; returns the bare media type."""
        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type not in self.allowed_content_types:
            raise DocumentValidationError(
                f"Unsupported content type: {media_type or 'none'}. "
                f"Allowed: {', '.join(sorted(self.allowed_content_types))}"
            )
        if size > self.max_upload_size:
            raise PayloadTooLargeError(
                f"File exceeds maximum size of {self.max_upload_size} bytes",
                max_size=self.max_upload_size,
            )
        if size == 0:
            raise DocumentValidationError("Request body is empty")
        return media_type

    async def upload_file(
        self,
        document_id: str,
        timestamp: str,
        file_type: str,
        file_name: str,
        content: bytes,
        content_type: Optional[str],
    ) -> Dict[str, Any]:
        key = build_object_key(document_id, timestamp, file_type, file_name)
        media_type = self.validate_upload(content_type, len(content))

        await self.storage.upload_file_to_path_async(key, content, media_type)
        self.logger.info("File uploaded", key=key, size=len(content))

        return {"key": key, "size": len(content), "contentType": media_type}

    async def download_file(
        self, document_id: str, timestamp: str, file_type: str, file_name: str
    ) -> Tuple[bytes, str]:
        key = build_object_key(document_id, timestamp, file_type, file_name)
        content, content_type = await self.storage.download_file_async(key)
        return content, content_type or "application/octet-stream"

    async def list_files(
        self, document_id: str, timestamp: str, file_type: str
    ) -> List[Dict[str, Any]]:
        prefix = build_object_key(document_id, timestamp, file_type)
        objects = await self.storage.list_files_with_prefix_async(prefix)
        return [
            {"name": obj["name"], "size": obj["size"], "lastModified": obj["updated"]}
            for obj in objects
        ]

    async def list_images(self, document_id: str, timestamp: str) -> List[Dict[str, Any]]:
        """List image objects with their public URLs."""
        prefix = build_object_key(document_id, timestamp, settings.IMAGES_FILE_TYPE)
        objects = await self.storage.list_files_with_prefix_async(prefix)
        return [
            {
                "name": obj["name"],
                "size": obj["size"],
                "lastModified": obj["updated"],
                "url": self.storage.public_url(obj["storage_path"]),
            }
            for obj in objects
        ]


file_service = FileService()
