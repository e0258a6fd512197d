"""
Object Storage Repository Interface

Abstract interface for private blob storage operations.
This abstraction allows the domain layer to remain infrastructure-agnostic
by defining contracts for blob operations without depending on specific
storage implementations (local filesystem, Google Cloud Storage, etc.).
"""

from abc import ABC, abstractmethod
from typing import Optional

from .signed_url_service import SignedUrl


class IObjectStorageRepository(ABC):
    """
    Unified interface for private object storage.

    Blobs are never publicly readable; the only way to hand a blob to a
    client is a short-lived URL minted by sign_url().

    Contract Guarantees:
    - put() overwrites an existing blob at the same path
    - remove() is idempotent: removing a missing path is not an error
    - sign_url() raises BlobNotFoundError for a missing path
    - Connectivity or permission failures raise StoreUnavailableError
    - Paths are relative keys such as '{owner_id}/{filename}'
    """

    @abstractmethod
    def put(self, storage_path: str, data: bytes, content_type: Optional[str] = None) -> None:
        """
        Store a blob.

        Args:
            storage_path: Object key (e.g., 'u1/1700000000000-1a2b3c4d.jpg')
            data: Raw blob bytes
            content_type: Optional MIME type recorded with the blob

        Raises:
            ValueError: If storage_path is empty or escapes the store root
            StoreUnavailableError: If the write fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def remove(self, storage_path: str) -> None:
        """
        Remove a blob.

        Idempotent: removing a path that does not exist succeeds silently.

        Args:
            storage_path: Object key

        Raises:
            StoreUnavailableError: If the removal fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def sign_url(self, storage_path: str, ttl_seconds: int) -> SignedUrl:
        """
        Mint a time-limited URL granting read access to one blob.

        Args:
            storage_path: Object key
            ttl_seconds: Lifetime of the URL from mint time

        Returns:
            SignedUrl with the URL and its expiry

        Raises:
            BlobNotFoundError: If no blob exists at storage_path
            StoreUnavailableError: If signing fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, storage_path: str) -> bool:
        """
        Check if a blob exists.

        Never raises; invalid paths return False.
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, storage_path: str) -> Optional[bytes]:
        """
        Read a blob's bytes.

        Returns:
            Blob content, or None if it does not exist
        """
        pass  # pragma: no cover

    def health_check(self) -> bool:
        """
        Check store availability for health reporting.

        Returns:
            True if the store is usable, False otherwise
        """
        return True
