"""
Object Storage Backup.

Keeps an advisory copy of every uploaded file in an S3-compatible bucket
and hands out presigned GET URLs for it. The local file store stays the
authoritative copy, so every failure here is raised as BackupStorageError
and the callers decide to degrade instead of failing.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from config import settings
from domain.exceptions import BackupStorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class BackupStorage(ABC):
    """Interface for the backup bucket."""

    @property
    @abstractmethod
    def configured(self) -> bool:
        pass

    @abstractmethod
    async def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        """
        Store data under key and return a fresh presigned URL for it.

        Raises:
            BackupStorageError: On any network, credential or bucket failure.
        """
        pass

    @abstractmethod
    async def generate_signed_url(self, key: str) -> str:
        pass

    @abstractmethod
    async def delete(self, key: str):
        pass


class S3BackupStorage(BackupStorage):
    """
    S3 implementation using boto3.

    boto3 is blocking, so every call is pushed to the default executor.
    Retries are disabled: each remote call is attempted exactly once.
    """

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        region: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        expires_in: Optional[int] = None,
        client=None,
    ):
        self.bucket_name = bucket_name if bucket_name is not None else settings.S3_BUCKET_NAME
        self.region = region or settings.AWS_REGION
        self.access_key_id = access_key_id or settings.AWS_ACCESS_KEY_ID
        self.secret_access_key = secret_access_key or settings.AWS_SECRET_ACCESS_KEY
        self.endpoint_url = endpoint_url or settings.S3_ENDPOINT_URL
        self.expires_in = expires_in or settings.SIGNED_URL_EXPIRES_SECONDS
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.bucket_name)

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key,
                endpoint_url=self.endpoint_url,
                config=Config(
                    signature_version="s3v4",
                    retries={"max_attempts": 1, "mode": "standard"},
                ),
            )
        return self._client

    async def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        extra_args = {}
        if content_type:
            extra_args["ContentType"] = content_type

        await self._run(
            "put_object",
            Bucket=self.bucket_name,
            Key=key,
            Body=data,
            **extra_args,
        )
        logger.info(f"Uploaded backup object: {key}")
        return await self.generate_signed_url(key)

    async def generate_signed_url(self, key: str) -> str:
        return await self._run(
            "generate_presigned_url",
            "get_object",
            Params={"Bucket": self.bucket_name, "Key": key},
            ExpiresIn=self.expires_in,
        )

    async def delete(self, key: str):
        await self._run("delete_object", Bucket=self.bucket_name, Key=key)
        logger.info(f"Deleted backup object: {key}")

    async def _run(self, operation: str, *args, **kwargs):
        if not self.configured:
            raise BackupStorageError("Backup storage is not configured (S3_BUCKET_NAME is empty)")

        loop = asyncio.get_running_loop()
        try:
            func = getattr(self.client, operation)
            return await loop.run_in_executor(None, lambda: func(*args, **kwargs))
        except (ClientError, BotoCoreError) as e:
            raise BackupStorageError(f"S3 request failed: {e}") from e


_backup_storage: Optional[BackupStorage] = None


def get_backup_storage() -> BackupStorage:
    global _backup_storage
    if _backup_storage is None:
        _backup_storage = S3BackupStorage()
    return _backup_storage
