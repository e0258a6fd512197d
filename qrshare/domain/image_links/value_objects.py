"""
Image Link Value Objects

Immutable value objects for type safety and validation.
"""

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Dict, FrozenSet, Optional

from ..errors import ValidationError, ValidationReason

MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB
SIGNED_URL_TTL_SECONDS = 600
QR_ERROR_CORRECTION = "H"

# Raster image types accepted for upload, mapped to their canonical extension
MIME_EXTENSIONS: Dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

_KNOWN_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}


def link_for(base_address: str, image_id: str) -> str:
    """
    Build the public short link for an image id.

    This string is the exact text encoded into the QR symbol.

    Args:
        base_address: Public site address, e.g. 'https://share.example'
        image_id: Opaque image identifier

    Returns:
        '{base_address}/i/{image_id}' with any trailing slash on the base removed
    """
    return f"{base_address.rstrip('/')}/i/{image_id}"


@dataclass(frozen=True)
class ShareLink:
    """
    Value object holding the shareable link and QR payload for an image.

    Both are pure functions of the image id and the configured base
    address, so nothing here is ever persisted.
    """
    image_id: str
    url: str
    error_correction: str = QR_ERROR_CORRECTION

    @classmethod
    def build(cls, base_address: str, image_id: str) -> 'ShareLink':
        """Create the share link for an image id under a base address."""
        return cls(image_id=image_id, url=link_for(base_address, image_id))

    @property
    def qr_payload(self) -> str:
        """Text to encode into the QR symbol (identical to the link)."""
        return self.url

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.image_id,
            "link": self.url,
            "qr_payload": self.qr_payload,
            "qr_error_correction": self.error_correction,
        }


@dataclass(frozen=True)
class UploadPolicy:
    """
    Value object describing what an upload must satisfy before any store I/O.

    Attributes:
        allowed_mime_types: Accepted declared MIME types
        max_bytes: Inclusive upper bound on the declared size
    """
    allowed_mime_types: FrozenSet[str] = field(
        default_factory=lambda: frozenset(MIME_EXTENSIONS)
    )
    max_bytes: int = MAX_UPLOAD_BYTES

    def __post_init__(self):
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if not self.allowed_mime_types:
            raise ValueError("allowed_mime_types cannot be empty")

    def validate(self, declared_mime: Optional[str], declared_size: int) -> str:
        """
        Check a declared MIME type and size against the policy.

        Args:
            declared_mime: MIME type reported by the client
            declared_size: Size in bytes reported by the client

        Returns:
            The normalized MIME type

        Raises:
            ValidationError: UNSUPPORTED_TYPE or TOO_LARGE
        """
        mime = (declared_mime or "").split(";", 1)[0].strip().lower()
        if mime not in self.allowed_mime_types:
            raise ValidationError(
                ValidationReason.UNSUPPORTED_TYPE,
                f"Unsupported content type: {declared_mime!r}",
            )
        if declared_size > self.max_bytes:
            raise ValidationError(
                ValidationReason.TOO_LARGE,
                f"Declared size {declared_size} exceeds limit of {self.max_bytes} bytes",
            )
        return mime


@dataclass(frozen=True)
class StoragePath:
    """
    Value object representing an object store key inside an owner namespace.

    Format: '{owner_id}/{timestamp_ms}-{suffix}.{ext}'. The owner segment is a
    path prefix, so keys from different owners can never collide; the
    millisecond timestamp plus random suffix keeps keys unique within one owner.
    """
    owner_id: str
    filename: str

    def __post_init__(self):
        if (
            not self.owner_id
            or "/" in self.owner_id
            or self.owner_id in (".", "..")
            or not self.owner_id.isprintable()
        ):
            raise ValueError(f"Invalid owner id for storage path: {self.owner_id!r}")
        if not self.filename or "/" in self.filename or not self.filename.isprintable():
            raise ValueError(f"Invalid filename for storage path: {self.filename!r}")

    @classmethod
    def generate(
        cls,
        owner_id: str,
        mime_type: str,
        original_filename: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> 'StoragePath':
        """
        Generate a fresh storage path for an upload.

        The extension comes from the original filename when it is a known
        image extension, otherwise from the MIME type.

        Args:
            owner_id: Owner namespace
            mime_type: Validated MIME type
            original_filename: Client-side filename, if any
            now: Timestamp source (defaults to current UTC time)

        Returns:
            New StoragePath instance
        """
        now = now or datetime.now(timezone.utc)
        timestamp_ms = int(now.timestamp() * 1000)
        suffix = secrets.token_hex(4)
        ext = cls._extension_for(mime_type, original_filename)
        return cls(owner_id=owner_id, filename=f"{timestamp_ms}-{suffix}.{ext}")

    @staticmethod
    def _extension_for(mime_type: str, original_filename: Optional[str]) -> str:
        if original_filename:
            ext = PurePosixPath(original_filename).suffix.lstrip(".").lower()
            if ext in _KNOWN_EXTENSIONS:
                return ext
        return MIME_EXTENSIONS.get(mime_type, "bin")

    @property
    def value(self) -> str:
        return f"{self.owner_id}/{self.filename}"

    def __str__(self) -> str:
        return self.value
