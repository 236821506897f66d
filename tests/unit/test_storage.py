"""Unit tests for the S3 file storage."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from bookshelf.internal.env_settings import StorageSettings
from bookshelf.internal.exceptions import SourceUnavailable
from bookshelf.internal.storage import S3FileStorage


@pytest.fixture
def s3_client():
    return MagicMock()


class TestS3FileStorage:
    async def test_upload_returns_public_url(self, s3_client):
        storage = S3FileStorage(StorageSettings(bucket="shelf"), client=s3_client)

        url = await storage.upload(b"img", "cover-1.jpg", "image/jpeg")

        assert url == "https://shelf.s3.eu-west-1.amazonaws.com/covers/cover-1.jpg"
        s3_client.put_object.assert_called_once()
        kwargs = s3_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "shelf"
        assert kwargs["Key"] == "covers/cover-1.jpg"
        assert kwargs["Body"] == b"img"
        assert kwargs["ContentType"] == "image/jpeg"

    async def test_custom_public_base_url(self, s3_client):
        settings = StorageSettings(
            bucket="shelf", prefix="", public_base_url="https://cdn.example.com/"
        )
        storage = S3FileStorage(settings, client=s3_client)

        url = await storage.upload(b"img", "cover-1.jpg", "image/jpeg")

        assert url == "https://cdn.example.com/cover-1.jpg"
        assert storage.is_hosted(url)
        assert not storage.is_hosted("https://covers.openlibrary.org/b/id/1-M.jpg")

    async def test_client_errors_are_wrapped(self, s3_client):
        s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        storage = S3FileStorage(StorageSettings(bucket="shelf"), client=s3_client)

        with pytest.raises(SourceUnavailable):
            await storage.upload(b"img", "cover-1.jpg", "image/jpeg")
