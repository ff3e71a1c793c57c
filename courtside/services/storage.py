"""
Object storage on Cloudflare R2 (S3 API via boto3).

Receipts, court/equipment/coach images and generated QR codes are stored
under a category prefix and referenced by a durable public URL.
"""

import logging
import os
import uuid
from typing import Optional

import boto3
from botocore.config import Config
from fastapi import UploadFile

from .. import config
from ..shared.exceptions import DependencyException, ValidationException

logger = logging.getLogger(__name__)

RECEIPT_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "application/pdf": "pdf",
}

IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=config.R2_ACCESS_KEY_ID,
        aws_secret_access_key=config.R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def public_base_url() -> str:
    if config.R2_PUBLIC_URL:
        return config.R2_PUBLIC_URL
    return f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com/{config.R2_BUCKET_NAME}"


class ObjectStorage:
    def __init__(self, client=None, bucket: Optional[str] = None, base_url: Optional[str] = None):
        self._client = client
        self.bucket = bucket or config.R2_BUCKET_NAME
        self.base_url = (base_url or public_base_url()).rstrip("/")

    @property
    def client(self):
        if self._client is None:
            self._client = get_r2_client()
        return self._client

    def key_for(self, url_or_key: str) -> str:
        prefix = f"{self.base_url}/"
        if url_or_key.startswith(prefix):
            return url_or_key[len(prefix) :]
        return url_or_key

    def store(self, data: bytes, category: str, filename: str, content_type: str) -> str:
        """Upload bytes under ``category/`` and return the object's public URL"""
        ext = os.path.splitext(filename)[1].lstrip(".").lower() or "bin"
        key = f"{category}/{uuid.uuid4()}.{ext}"

        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl="public, max-age=31536000",
            )
        except Exception as e:
            logger.error(f"❌ Upload to {key} failed: {e}")
            raise DependencyException(
                "File upload failed", code="StorageFailed", details={"category": category}
            ) from e

        logger.info(f"✅ Stored {len(data)} bytes at {key}")
        return f"{self.base_url}/{key}"

    def delete(self, url_or_key: str) -> None:
        key = self.key_for(url_or_key)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except Exception as e:
            logger.error(f"❌ Failed to delete {key}: {e}")
            raise DependencyException("File delete failed", code="StorageFailed") from e
        logger.info(f"🗑️ Deleted {key}")


async def read_upload(
    file: Optional[UploadFile],
    allowed_types: dict[str, str],
    missing_code: str = "InvalidFile",
    missing_message: str = "File is required",
) -> tuple[bytes, str, str]:
    """
    Validate and read an uploaded file.

    Returns (contents, filename, content_type). A missing file raises with
    ``missing_code`` so callers can report e.g. ``MissingReceipt``.
    """
    if file is None or not file.filename:
        raise ValidationException(missing_message, code=missing_code)

    if file.content_type not in allowed_types:
        allowed = ", ".join(sorted(set(allowed_types.values())))
        raise ValidationException(
            f"Invalid file type. Allowed: {allowed}", code="InvalidFile", details={"contentType": file.content_type}
        )

    for char in DANGEROUS_FILENAME_CHARS:
        if char in file.filename:
            logger.warning(f"❌ Dangerous character '{char}' in filename: '{file.filename}'")
            raise ValidationException("Invalid filename", code="InvalidFile")

    contents = await file.read()
    if len(contents) > config.MAX_UPLOAD_SIZE:
        raise ValidationException(
            f"File size exceeds {config.MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit",
            code="InvalidFile",
            details={"size": len(contents)},
        )

    ext = allowed_types[file.content_type]
    stem = os.path.splitext(file.filename)[0] or "upload"
    return contents, f"{stem}.{ext}", file.content_type


def get_object_storage() -> ObjectStorage:
    """Dependency injection for ObjectStorage"""
    return ObjectStorage()
