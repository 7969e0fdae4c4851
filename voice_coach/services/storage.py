"""S3-backed audio store for session recordings."""

from __future__ import annotations

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from voice_coach.application.interfaces import AudioStore
from voice_coach.config.settings import settings
from voice_coach.services.aws import create_boto3_client


class StorageError(RuntimeError):
    """Raised when S3 asset persistence fails."""


class S3AudioStore(AudioStore):
    """Upload recordings to a private bucket and hand out presigned links."""

    def __init__(
        self,
        bucket_name: str | None = None,
        *,
        client: Any | None = None,
        content_type: str = "audio/mp4",
    ) -> None:
        self._bucket = bucket_name or settings.s3.bucket_name
        self._client = client or create_boto3_client("s3", region_name=settings.s3.region)
        self._content_type = content_type

    async def upload(self, data: bytes, path: str) -> None:
        if not data:
            raise StorageError("Audio payload for upload was empty.")
        if not self._bucket:
            raise StorageError("S3 bucket name is not configured.")

        try:
            await run_in_threadpool(
                self._client.put_object,
                Bucket=self._bucket,
                Key=path,
                Body=data,
                ContentType=self._content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload recording: {exc}") from exc

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        try:
            url = await run_in_threadpool(
                self._client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self._bucket, "Key": path},
                ExpiresIn=ttl_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to sign recording URL: {exc}") from exc

        if not url:
            raise StorageError("S3 returned an empty presigned URL.")
        return url


__all__ = ["S3AudioStore", "StorageError"]
