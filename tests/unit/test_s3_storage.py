"""Unit tests for S3Storage adapter."""

from pathlib import Path

import boto3
import pytest
from moto import mock_aws


@pytest.fixture
def s3_client():
    """Create a mocked S3 client with a test bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket="test-bucket")
        yield client


@pytest.mark.storage
class TestDownload:
    """Tests for fetching containers."""

    def test_download_writes_file(self, s3_client, tmp_path: Path) -> None:
        """download() writes the object and reports the full size last."""
        from archivist.adapters.storage import S3Storage

        s3_client.put_object(Bucket="test-bucket", Key="a.zip", Body=b"z" * 1000)
        dest = tmp_path / "a.zip"
        calls: list[tuple[int, int]] = []

        S3Storage(client=s3_client).download(
            "s3://test-bucket/a.zip", dest, lambda d, t: calls.append((d, t))
        )

        assert dest.read_bytes() == b"z" * 1000
        assert calls[-1] == (1000, 1000)

    def test_download_missing_key(self, s3_client, tmp_path: Path) -> None:
        """A missing key raises StorageNotFoundError naming the URI."""
        from archivist.adapters.storage import S3Storage
        from archivist.core.exceptions import StorageNotFoundError

        with pytest.raises(StorageNotFoundError) as exc_info:
            S3Storage(client=s3_client).download(
                "s3://test-bucket/missing.zip", tmp_path / "x.zip", lambda d, t: None
            )

        assert exc_info.value.source == "s3://test-bucket/missing.zip"
        assert not (tmp_path / "x.zip").exists()


@pytest.mark.storage
class TestUpload:
    """Tests for delivering containers."""

    def test_upload_puts_object(self, s3_client, tmp_path: Path) -> None:
        """upload() writes the local file under the key."""
        from archivist.adapters.storage import S3Storage

        local = tmp_path / "a.zip"
        local.write_bytes(b"container bytes")
        calls: list[tuple[int, int]] = []

        S3Storage(client=s3_client).upload(
            local, "s3://test-bucket/outbox/a.zip", lambda d, t: calls.append((d, t))
        )

        body = s3_client.get_object(Bucket="test-bucket", Key="outbox/a.zip")["Body"].read()
        assert body == b"container bytes"
        assert calls and all(total == 15 for _, total in calls)

    def test_upload_missing_bucket(self, s3_client, tmp_path: Path) -> None:
        """Uploading to a missing bucket raises StorageNotFoundError."""
        from archivist.adapters.storage import S3Storage
        from archivist.core.exceptions import StorageNotFoundError

        local = tmp_path / "a.zip"
        local.write_bytes(b"x")

        with pytest.raises(StorageNotFoundError):
            S3Storage(client=s3_client).upload(local, "s3://no-such-bucket/a.zip")


@pytest.mark.storage
class TestS3Location:
    """Tests for s3:// URI parsing."""

    def test_parses_nested_key(self) -> None:
        """Bucket is the first segment; the rest is the key."""
        from archivist.adapters.storage.s3 import S3Location

        assert S3Location.parse("s3://b/x/y/a.zip") == S3Location("b", "x/y/a.zip")

    @pytest.mark.parametrize("uri", ["s3://bucket-only", "s3://bucket/", "/local/a.zip"])
    def test_rejects_invalid_uris(self, uri: str) -> None:
        """URIs without a bucket and key are configuration errors."""
        from archivist.adapters.storage.s3 import S3Location
        from archivist.core.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError, match="Invalid S3 URI"):
            S3Location.parse(uri)

    def test_satisfies_storage_port(self, s3_client) -> None:
        """S3Storage is a StoragePort."""
        from archivist.adapters.storage import S3Storage
        from archivist.core.ports import StoragePort

        assert isinstance(S3Storage(client=s3_client), StoragePort)
