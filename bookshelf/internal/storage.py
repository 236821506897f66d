import asyncio
from abc import ABC, abstractmethod
from typing import Any

from typing_extensions import override

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from bookshelf.internal.env_settings import StorageSettings
from bookshelf.internal.exceptions import SourceUnavailable
from bookshelf.util.log import logger


class FileStorage(ABC):
    """Durable public file storage for rehosted cover images."""

    @abstractmethod
    async def upload(self, data: bytes, filename: str, content_type: str) -> str:
        """Store the payload and return its public URL"""

    @abstractmethod
    def is_hosted(self, url: str) -> bool:
        """Whether the URL already points into this storage"""


class S3FileStorage(FileStorage):
    def __init__(self, settings: StorageSettings, client: Any | None = None):
        self.settings = settings
        self._client = client or boto3.client(
            "s3",
            region_name=settings.region,
            endpoint_url=settings.endpoint_url,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key,
        )

    @property
    def public_base_url(self) -> str:
        if self.settings.public_base_url:
            return self.settings.public_base_url.rstrip("/")
        return f"https://{self.settings.bucket}.s3.{self.settings.region}.amazonaws.com"

    def _key(self, filename: str) -> str:
        prefix = self.settings.prefix.strip("/")
        return f"{prefix}/{filename}" if prefix else filename

    @override
    async def upload(self, data: bytes, filename: str, content_type: str) -> str:
        key = self._key(filename)
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.settings.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl="public, max-age=31536000",
            )
        except (BotoCoreError, ClientError) as e:
            raise SourceUnavailable("s3", str(e)) from e

        url = f"{self.public_base_url}/{key}"
        logger.info("Uploaded file to storage", key=key, size=len(data), url=url)
        return url

    @override
    def is_hosted(self, url: str) -> bool:
        return url.startswith(self.public_base_url + "/")
