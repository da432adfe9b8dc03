"""S3-compatible audio storage (AWS S3, Cloudflare R2, MinIO) via boto3."""

import asyncio
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.models.story import PublicUrlAudio, StorageKeyAudio
from app.services.storage.base import AUDIO_CONTENT_TYPE, AudioStorage, StoredAudio
from app.utils.exceptions import StorageError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class S3AudioStorage(AudioStorage):
    """
    Uploads audio with put_object.

    With ``public_base_url`` set (a CDN or public bucket domain) the durable
    URL is stored; otherwise only the key is stored and presigned per read.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        endpoint_url: str = "",
        region: str = "us-east-1",
        access_key_id: str = "",
        secret_access_key: str = "",
        public_base_url: str = "",
        client: Optional[Any] = None,
    ):
        if not bucket:
            raise ValueError("S3 bucket name cannot be empty")

        if client is None:
            kwargs = {"region_name": region}
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            if access_key_id and secret_access_key:
                kwargs["aws_access_key_id"] = access_key_id
                kwargs["aws_secret_access_key"] = secret_access_key
            client = boto3.client("s3", **kwargs)

        self.client = client
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "s3"

    def _object_key(self, filename: str) -> str:
        return f"{self.prefix}/{filename}" if self.prefix else filename

    async def upload(self, data: bytes, filename: str) -> StoredAudio:
        key = self._object_key(filename)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=AUDIO_CONTENT_TYPE,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload error for %s: %s", key, e)
            raise StorageError(details={"backend": self.name, "key": key}) from e

        if self.public_base_url:
            return PublicUrlAudio(url=f"{self.public_base_url}/{key}")
        return StorageKeyAudio(key=key)

    def signed_url(self, key: str, expires_in: int) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 presign error for %s: %s", key, e)
            raise StorageError("Failed to sign audio URL", details={"backend": self.name, "key": key}) from e
