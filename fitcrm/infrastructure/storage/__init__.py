"""
Blob storage for the serialized client collection.

Supports local files and R2 (Cloudflare) via the S3-compatible API.
Includes mock mode for local development without credentials.
"""

from .client import (
    BlobStorageClient,
    LocalFileBlobClient,
    MockBlobClient,
    R2BlobClient,
    StorageConfig,
    StorageError,
    create_blob_client,
)

__all__ = [
    "BlobStorageClient",
    "LocalFileBlobClient",
    "MockBlobClient",
    "R2BlobClient",
    "StorageConfig",
    "StorageError",
    "create_blob_client",
]
