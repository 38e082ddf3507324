"""
Unit tests for blob storage clients.

The R2 client needs a bucket and is not exercised here.
"""

import pytest

from fitcrm.infrastructure.storage.client import (
    LocalFileBlobClient,
    MockBlobClient,
    StorageError,
    create_blob_client,
)


class TestLocalFileBlobClient:

    def test_missing_key_reads_as_none(self, tmp_path):
        client = LocalFileBlobClient(tmp_path)

        assert client.read_blob("absent.json") is None

    def test_write_then_read(self, tmp_path):
        client = LocalFileBlobClient(tmp_path / "nested" / "dir")

        client.write_blob("clients.json", b"[]")

        assert client.read_blob("clients.json") == b"[]"
        assert client.path_for("clients.json").read_bytes() == b"[]"

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        client = LocalFileBlobClient(tmp_path)

        client.write_blob("clients.json", b"[1]")
        client.write_blob("clients.json", b"[2]")

        assert client.read_blob("clients.json") == b"[2]"
        assert [p.name for p in tmp_path.iterdir()] == ["clients.json"]

    def test_unwritable_location_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        client = LocalFileBlobClient(blocker)

        with pytest.raises(StorageError):
            client.write_blob("clients.json", b"[]")


class TestMockBlobClient:

    def test_fail_writes(self):
        client = MockBlobClient()
        client.write_blob("k", b"one")
        client.fail_writes = True

        with pytest.raises(StorageError):
            client.write_blob("k", b"two")

        assert client.read_blob("k") == b"one"


class TestCreateBlobClient:

    def test_mock_mode_wins(self, tmp_path):
        assert isinstance(create_blob_client(base_dir=tmp_path, mock_mode=True), MockBlobClient)

    def test_base_dir_gives_local_client(self, tmp_path):
        assert isinstance(create_blob_client(base_dir=tmp_path), LocalFileBlobClient)

    def test_nothing_configured(self):
        with pytest.raises(ValueError):
            create_blob_client()
