"""
Image Links Domain

Maps durable opaque ids to private stored images and mints
time-limited access URLs.
"""

from .entities import ImageRecord
from .repositories import IImageRecordRepository
from .services import LinkRegistry
from .signed_url_service import SignedUrl, SignedUrlService
from .storage_repository import IObjectStorageRepository
from .value_objects import (
    MAX_UPLOAD_BYTES,
    SIGNED_URL_TTL_SECONDS,
    ShareLink,
    StoragePath,
    UploadPolicy,
    link_for,
)

__all__ = [
    "ImageRecord",
    "IImageRecordRepository",
    "IObjectStorageRepository",
    "LinkRegistry",
    "SignedUrl",
    "SignedUrlService",
    "ShareLink",
    "StoragePath",
    "UploadPolicy",
    "link_for",
    "MAX_UPLOAD_BYTES",
    "SIGNED_URL_TTL_SECONDS",
]
