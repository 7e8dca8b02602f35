"""S3-compatible object storage for uploaded media."""

import logging

import aioboto3
from botocore.config import Config
from botocore.exceptions import ClientError

from app.config import get_settings

logger = logging.getLogger(__name__)


class MediaStorageClient:
    """Async S3 client for article images."""

    def __init__(self):
        self.settings = get_settings()
        self.bucket = self.settings.media_bucket
        self.session = aioboto3.Session(
            aws_access_key_id=self.settings.aws_access_key_id or None,
            aws_secret_access_key=self.settings.aws_secret_access_key or None,
            region_name=self.settings.aws_region,
        )
        self.config = Config(retries={"max_attempts": 3, "mode": "adaptive"})

    def get_client(self):
        """Get S3 client context manager."""
        kwargs = {"config": self.config}
        if self.settings.s3_endpoint_url:
            kwargs["endpoint_url"] = self.settings.s3_endpoint_url
        return self.session.client("s3", **kwargs)

    def public_url(self, key: str) -> str:
        """Public URL of a stored object."""
        base = self.settings.storage_public_url.rstrip("/")
        return f"{base}/{self.bucket}/{key}"

    async def create_bucket_if_not_exists(self) -> None:
        """Create the media bucket if it doesn't exist."""
        async with self.get_client() as client:
            try:
                await client.head_bucket(Bucket=self.bucket)
            except ClientError:
                await client.create_bucket(
                    Bucket=self.bucket,
                    CreateBucketConfiguration={"LocationConstraint": self.settings.aws_region},
                )
                logger.info("Created media bucket %s", self.bucket)

    async def upload(self, key: str, body: bytes, content_type: str) -> str:
        """Store an object and return its public URL."""
        async with self.get_client() as client:
            await client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                CacheControl="public, max-age=31536000",
            )
        return self.public_url(key)

    async def delete(self, key: str) -> None:
        """Remove an object. Missing keys are not an error for S3."""
        async with self.get_client() as client:
            await client.delete_object(Bucket=self.bucket, Key=key)


# Singleton instance
media_storage = MediaStorageClient()


def get_media_storage() -> MediaStorageClient:
    """Dependency returning the shared storage client."""
    return media_storage
