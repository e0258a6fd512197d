"""
Signed URL Service

Service for generating and verifying time-limited signed URLs for blob access.
Used by object stores that cannot sign URLs themselves (the local filesystem
store); cloud stores mint their own signed URLs but return the same SignedUrl
value object.
"""

import hashlib
import hmac
import os
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Union
from urllib.parse import quote

from ..errors import InvalidSignatureError, SignatureExpiredError

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SignedUrl:
    """
    Represents a signed URL with expiration.
    """

    url: str
    storage_path: str
    expires_at: datetime
    signature: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if the signed URL has expired."""
        return (now or utc_now()) >= self.expires_at

    def get_remaining_seconds(self, now: Optional[datetime] = None) -> int:
        """Get remaining seconds until expiration."""
        remaining = self.expires_at - (now or utc_now())
        return max(0, int(remaining.total_seconds()))

    def to_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "url": self.url,
            "expires_at": self.expires_at.isoformat(),
            "expires_in": self.get_remaining_seconds(now),
        }


class SignedUrlService:
    """
    Service for generating and validating HMAC-signed blob URLs.

    A URL has the form '{base_url}/{storage_path}?expires={epoch}&signature={hex}'
    where the signature is HMAC-SHA256 over '{storage_path}:{epoch}'.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize SignedUrlService.

        Args:
            secret_key: Secret key for HMAC signing (optional, uses SECRET_KEY env var or generates if not provided)
            base_url: Base URL of the blob endpoint. If not provided, uses
                PUBLIC_BASE_URL + '/api/v1/blobs', or the relative path
                '/api/v1/blobs' when PUBLIC_BASE_URL is unset.
            clock: Callable returning the current UTC time (injectable for tests)
        """
        self.secret_key = (
            secret_key or os.getenv("SECRET_KEY") or self._generate_secret_key()
        )
        if base_url:
            self.base_url = base_url.rstrip("/")
        else:
            public_base = os.getenv("PUBLIC_BASE_URL")
            api_version = os.getenv("API_VERSION", "v1")
            if public_base:
                self.base_url = f"{public_base.rstrip('/')}/api/{api_version}/blobs"
            else:
                self.base_url = f"/api/{api_version}/blobs"
        self.clock = clock or utc_now

    @staticmethod
    def _generate_secret_key(length: int = 32) -> str:
        """Generate a cryptographically secure secret key."""
        return secrets.token_hex(length)

    def generate_signed_url(self, storage_path: str, ttl_seconds: int) -> SignedUrl:
        """
        Generate a signed URL for blob access.

        Args:
            storage_path: Object key to grant access to
            ttl_seconds: Time to live in seconds from now

        Returns:
            SignedUrl object with URL and expiration information
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        # Whole seconds so the expiry round-trips through the query string
        now = self.clock().replace(microsecond=0)
        expires_at = now + timedelta(seconds=ttl_seconds)
        expires = int(expires_at.timestamp())

        signature = self._generate_signature(storage_path, expires)
        url = (
            f"{self.base_url}/{quote(storage_path)}"
            f"?expires={expires}&signature={signature}"
        )

        return SignedUrl(
            url=url,
            storage_path=storage_path,
            expires_at=expires_at,
            signature=signature,
        )

    def _generate_signature(self, storage_path: str, expires: int) -> str:
        """
        Generate HMAC signature for a path and expiry.

        Args:
            storage_path: Object key
            expires: Expiry as a Unix timestamp

        Returns:
            HMAC signature as hex string
        """
        message = f"{storage_path}:{expires}"

        # Generate HMAC-SHA256 signature
        return hmac.new(
            self.secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def validate_signature(
        self, storage_path: str, signature: str, expires: int
    ) -> bool:
        """
        Validate HMAC signature for a path and expiry.

        Returns:
            True if signature is valid, False otherwise
        """
        expected_signature = self._generate_signature(storage_path, expires)

        # Use constant-time comparison to prevent timing attacks
        try:
            return hmac.compare_digest(signature, expected_signature)
        except TypeError:
            # Non-ASCII input cannot be a hex digest
            return False

    def verify(
        self,
        storage_path: str,
        signature: Optional[str],
        expires: Union[int, str, None],
    ) -> None:
        """
        Verify a dereferenced signed URL.

        Args:
            storage_path: Object key from the URL path
            signature: 'signature' query parameter
            expires: 'expires' query parameter

        Raises:
            InvalidSignatureError: If parameters are missing, malformed or forged
            SignatureExpiredError: If the URL is past its expiry
        """
        if not signature or expires is None:
            raise InvalidSignatureError("Missing signature or expiry")

        try:
            expires_int = int(expires)
        except (TypeError, ValueError) as e:
            raise InvalidSignatureError(f"Malformed expiry: {expires!r}", e) from e

        if not self.validate_signature(storage_path, signature, expires_int):
            raise InvalidSignatureError(f"Invalid signature for {storage_path}")

        if self.clock() >= datetime.fromtimestamp(expires_int, tz=timezone.utc):
            raise SignatureExpiredError(f"Signed URL for {storage_path} has expired")
