"""
Blob storage clients.

The persisted client collection is a single serialized blob under a
fixed key. These clients know how to read and write such a blob and
nothing about what is in it.

Three implementations:
- LocalFileBlobClient: a file per key under a data directory
- R2BlobClient: Cloudflare R2 (S3-compatible) via boto3
- MockBlobClient: in-memory, for local development and tests
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """Configuration for R2/S3-compatible storage."""
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str = "auto"  # R2 uses 'auto' for region


class BlobStorageClient(Protocol):
    """
    Protocol for whole-blob storage.

    read_blob returns None when nothing is stored under the key;
    every other failure raises StorageError.
    """

    def read_blob(self, key: str) -> Optional[bytes]:
        ...

    def write_blob(self, key: str, data: bytes) -> None:
        ...


class LocalFileBlobClient:
    """
    Stores each blob as a file in a directory.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a crash mid-write leaves the previous
    blob intact.
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)
        logger.info(
            "Initialized local file storage",
            extra={"base_dir": str(self._base_dir)},
        )

    def path_for(self, key: str) -> Path:
        return self._base_dir / key

    def read_blob(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(
                "Failed to read blob",
                extra={"path": str(path), "error": str(e)},
            )
            raise StorageError(f"Read failed: {e}") from e

    def write_blob(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        temp_path: Optional[Path] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile("wb", dir=path.parent, delete=False) as tmp:
                tmp.write(data)
                temp_path = Path(tmp.name)
            temp_path.replace(path)
        except OSError as e:
            if temp_path is not None and temp_path.exists():
                os.unlink(temp_path)
            logger.error(
                "Failed to write blob",
                extra={"path": str(path), "error": str(e)},
            )
            raise StorageError(f"Write failed: {e}") from e

        logger.debug(
            "Wrote blob",
            extra={"path": str(path), "size_bytes": len(data)},
        )


class R2BlobClient:
    """
    Cloudflare R2 object storage client.

    Uses boto3 because R2 is S3-compatible, so actual S3 or MinIO work
    with only a different endpoint.
    """

    def __init__(self, config: StorageConfig) -> None:
        """
        Initialize R2 client with boto3.

        boto3 is imported here (not at module level) because the file
        and mock backends don't need it.
        """
        import boto3
        from botocore.config import Config

        self._config = config

        # R2 requires v4 signatures and path-style addressing
        boto_config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        )

        self._s3_client = boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

        logger.info(
            "Initialized R2 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    def read_blob(self, key: str) -> Optional[bytes]:
        from botocore.exceptions import ClientError

        try:
            response = self._s3_client.get_object(
                Bucket=self._config.bucket_name,
                Key=key,
            )
            return response["Body"].read()

        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            logger.error(
                "Failed to download blob",
                extra={"key": key, "error": str(e)},
            )
            raise StorageError(f"Download failed: {e}") from e
        except Exception as e:
            logger.error(
                "Failed to download blob",
                extra={"key": key, "error": str(e)},
            )
            raise StorageError(f"Download failed: {e}") from e

    def write_blob(self, key: str, data: bytes) -> None:
        try:
            self._s3_client.put_object(
                Bucket=self._config.bucket_name,
                Key=key,
                Body=data,
                ContentType="application/json",
            )

            logger.debug(
                "Uploaded blob",
                extra={"key": key, "size_bytes": len(data)},
            )

        except Exception as e:
            logger.error(
                "Failed to upload blob",
                extra={"key": key, "error": str(e)},
            )
            raise StorageError(f"Upload failed: {e}") from e


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockBlobClient:
    """
    In-memory blob storage.

    Enables running the persisted-blob code path without a disk or
    bucket. Set fail_writes to simulate a full or unavailable store.
    """

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self.fail_writes = False
        logger.info("Initialized mock blob storage (in-memory)")

    def read_blob(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def write_blob(self, key: str, data: bytes) -> None:
        if self.fail_writes:
            raise StorageError(f"Write failed: mock storage is full ({key})")
        self._blobs[key] = data


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_blob_client(
    config: Optional[StorageConfig] = None,
    base_dir: Optional[Path] = None,
    mock_mode: bool = False,
) -> BlobStorageClient:
    """
    Create a blob client based on configuration.

    Args:
        config: R2 configuration (selects the R2 client)
        base_dir: Directory for the local file client
        mock_mode: If True, return the in-memory client

    Returns:
        BlobStorageClient implementation
    """
    if mock_mode:
        return MockBlobClient()

    if config is not None:
        return R2BlobClient(config)

    if base_dir is not None:
        return LocalFileBlobClient(base_dir)

    raise ValueError("config or base_dir is required when not in mock mode")
