"""S3-compatible object store client (AWS S3, Cloudflare R2, MinIO).

Note attachments are uploaded here; the public URL and the object key are kept
in the note's `attachments` list.
"""
from __future__ import annotations

from typing import BinaryIO, Optional

import boto3
from botocore.config import Config
from urllib.parse import quote

from notiq.core.config import settings
from notiq.core.exceptions import ServiceUnavailable


def get_s3_client():
    cfg = Config(signature_version="s3v4", s3={"addressing_style": "path"})
    return boto3.client(
        "s3",
        aws_access_key_id=settings.storage_access_key,
        aws_secret_access_key=settings.storage_secret_key,
        endpoint_url=settings.storage_endpoint,
        region_name=settings.storage_region or "auto",
        config=cfg,
    )


def public_base_url() -> Optional[str]:
    # Preferred: public domain (r2.dev, CDN or custom)
    if settings.storage_public_base_url:
        return settings.storage_public_base_url.rstrip("/")
    # Fallback: endpoint + bucket
    bucket = settings.storage_bucket
    if bucket and settings.storage_endpoint:
        return f"{settings.storage_endpoint.rstrip('/')}/{bucket}"
    if bucket:
        return f"https://{bucket}.s3.amazonaws.com"
    return None


def public_url(key: str) -> str:
    base = public_base_url()
    if not base:
        raise ServiceUnavailable("Object storage is not configured")
    return f"{base}/{quote(key)}"


def upload_fileobj(fileobj: BinaryIO, *, key: str, content_type: str) -> str:
    """Stream a file object to the bucket and return its public URL.

    Blocks until the store acknowledges the upload (multipart for big files).
    """
    bucket = settings.storage_bucket
    if not bucket:
        raise ServiceUnavailable("Object storage is not configured")
    s3 = get_s3_client()
    s3.upload_fileobj(fileobj, bucket, key, ExtraArgs={"ContentType": content_type})
    return public_url(key)
