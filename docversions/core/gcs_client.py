"""Google Cloud Storage access for version files.

Objects live in a single bucket (GCS_BUCKET_NAME). The client connects
lazily on first use; blocking SDK calls are pushed to a worker thread by the
`*_async` methods.
"""

import asyncio
import os
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional, Tuple

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import storage

from docversions.core.config import settings
from docversions.core.logging import get_service_logger

logger = get_service_logger("gcs_client")

PUBLIC_URL_BASE = "https://storage.googleapis.com"


class GCSClientError(Exception):
    """Object store failure."""


class GCSBucketNotFoundError(GCSClientError):
    pass


class GCSObjectNotFoundError(GCSClientError):
    pass


@contextmanager
def _storage_errors(action: str, **context) -> Iterator[None]:
    """Translate SDK errors raised inside the block into GCSClientError."""
    try:
        yield
    except GCSClientError:
        raise
    except GoogleAPIError as e:
        logger.error(f"GCS {action} failed", error=str(e), **context)
        raise GCSClientError(f"Failed to {action}: {e}") from e


class GCSClient:
    """Bucket-scoped wrapper used by the file service."""

    def __init__(self, bucket_name: Optional[str] = None):
        self._bucket_name = bucket_name or settings.GCS_BUCKET_NAME
        self._bucket: Optional[storage.Bucket] = None

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    @property
    def is_configured(self) -> bool:
        """A project id is required before any call reaches GCS."""
        return bool(settings.GCP_PROJECT_ID)

    @property
    def bucket(self) -> storage.Bucket:
        if self._bucket is None:
            self._bucket = self._connect()
        return self._bucket

    def _connect(self) -> storage.Bucket:
        if not self.is_configured:
            raise GCSClientError(
                "GCS is not configured: set GCP_PROJECT_ID and GCS_BUCKET_NAME"
            )
        if settings.GOOGLE_APPLICATION_CREDENTIALS:
            os.environ.setdefault(
                "GOOGLE_APPLICATION_CREDENTIALS", settings.GOOGLE_APPLICATION_CREDENTIALS
            )

        try:
            client = storage.Client(project=settings.GCP_PROJECT_ID)
            bucket = client.bucket(self._bucket_name)
            bucket.reload()
        except NotFound as e:
            raise GCSBucketNotFoundError(f"Bucket '{self._bucket_name}' not found") from e
        except DefaultCredentialsError as e:
            raise GCSClientError(f"GCS authentication failed: {e}") from e
        except GoogleAPIError as e:
            raise GCSClientError(f"Failed to connect to GCS: {e}") from e

        logger.info("Connected to GCS bucket", bucket=self._bucket_name)
        return bucket

    def upload_file_to_path(
        self, storage_path: str, content: bytes, content_type: Optional[str] = None
    ) -> str:
        """Write `content` at exactly `storage_path`, replacing any object there."""
        with _storage_errors("upload file", storage_path=storage_path):
            blob = self.bucket.blob(storage_path)
            blob.upload_from_string(content, content_type=content_type)

        logger.info("Uploaded object", storage_path=storage_path, size=len(content))
        return storage_path

    def download_file(self, storage_path: str) -> Tuple[bytes, Optional[str]]:
        """Return the object's bytes and its stored content type."""
        with _storage_errors("download file", storage_path=storage_path):
            blob = self.bucket.get_blob(storage_path)
            if blob is None:
                raise GCSObjectNotFoundError(f"File not found: {storage_path}")
            try:
                content = blob.download_as_bytes()
            except NotFound as e:
                raise GCSObjectNotFoundError(f"File not found: {storage_path}") from e

        return content, blob.content_type

    def list_files_with_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        """
        List objects directly or indirectly under `prefix`.

        Each entry carries the full `storage_path`, the `name` relative to the
        prefix, `size` in bytes and `updated` as an ISO-8601 string.
        """
        prefix = prefix.rstrip("/") + "/"
        with _storage_errors("list files", prefix=prefix):
            blobs = list(self.bucket.list_blobs(prefix=prefix))

        return [
            {
                "storage_path": blob.name,
                "name": blob.name[len(prefix):],
                "size": blob.size,
                "updated": blob.updated.isoformat() if blob.updated else None,
            }
            for blob in blobs
            if not blob.name.endswith("/")
        ]

    def public_url(self, storage_path: str) -> str:
        return f"{PUBLIC_URL_BASE}/{self._bucket_name}/{storage_path}"

    def health_check(self) -> bool:
        if not self.is_configured:
            return False
        try:
            self.bucket.reload()
            return True
        except (GCSClientError, GoogleAPIError) as e:
            logger.warning("GCS health check failed", error=str(e))
            return False

    async def upload_file_to_path_async(
        self, storage_path: str, content: bytes, content_type: Optional[str] = None
    ) -> str:
        return await asyncio.to_thread(
            self.upload_file_to_path, storage_path, content, content_type
        )

    async def download_file_async(self, storage_path: str) -> Tuple[bytes, Optional[str]]:
        return await asyncio.to_thread(self.download_file, storage_path)

    async def list_files_with_prefix_async(self, prefix: str) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.list_files_with_prefix, prefix)

    async def health_check_async(self) -> bool:
        return await asyncio.to_thread(self.health_check)


@lru_cache()
def get_gcs_client() -> GCSClient:
    """Process-wide client for the configured bucket."""
    return GCSClient()
