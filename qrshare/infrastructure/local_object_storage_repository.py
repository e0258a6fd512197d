"""
Local Object Storage Repository Implementation

Concrete implementation of IObjectStorageRepository for the local filesystem.
Blobs live under a private base directory; access is granted through
HMAC-signed URLs that the application's blob endpoint verifies before
serving the bytes.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from qrshare.domain.errors import BlobNotFoundError, StoreUnavailableError
from qrshare.domain.image_links.signed_url_service import SignedUrl, SignedUrlService
from qrshare.domain.image_links.storage_repository import IObjectStorageRepository


class LocalObjectStorageRepository(IObjectStorageRepository):
    """
    Local filesystem implementation of IObjectStorageRepository.

    Thread Safety:
        Writes go to a temporary file in the target directory and are moved
        into place atomically, so concurrent readers never see partial blobs.

    Attributes:
        base_path: Base directory for blob storage
        signer: SignedUrlService used to mint and verify blob URLs
    """

    def __init__(self, base_path: str, signer: SignedUrlService):
        """
        Initialize the local object storage repository.

        Args:
            base_path: Base directory for blob storage
            signer: SignedUrlService bound to the application's blob endpoint
        """
        self.base_path = Path(base_path).resolve()
        self.signer = signer
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        """
        Ensure the base storage directory exists.

        Raises:
            StoreUnavailableError: If the directory cannot be created
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(
                f"Failed to create storage directory: {self.base_path}", e
            ) from e

    def _full_path(self, storage_path: str) -> Path:
        """
        Map a storage path to a file under base_path.

        Raises:
            ValueError: If the path is empty or escapes the base directory
        """
        if not storage_path or not storage_path.strip():
            raise ValueError("storage_path cannot be empty")

        full_path = (self.base_path / storage_path).resolve()
        if self.base_path not in full_path.parents:
            raise ValueError(f"storage_path escapes storage root: {storage_path!r}")
        return full_path

    # IObjectStorageRepository interface methods

    def put(self, storage_path: str, data: bytes, content_type: Optional[str] = None) -> None:
        """
        Store a blob on disk, replacing any existing blob at the same path.

        The content type is not recorded locally; the blob endpoint derives
        it from the file extension.
        """
        full_path = self._full_path(storage_path)

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=full_path.parent, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, full_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreUnavailableError(f"Failed to save blob {storage_path}: {e}", e) from e

    def remove(self, storage_path: str) -> None:
        """Remove a blob. Missing paths are not an error."""
        try:
            full_path = self._full_path(storage_path)
        except ValueError:
            return  # Idempotent - invalid path has nothing to remove

        try:
            full_path.unlink(missing_ok=True)
        except IsADirectoryError:
            return
        except OSError as e:
            raise StoreUnavailableError(f"Failed to remove blob {storage_path}: {e}", e) from e

    def sign_url(self, storage_path: str, ttl_seconds: int) -> SignedUrl:
        """Mint an HMAC-signed URL for the application's blob endpoint."""
        if not self.exists(storage_path):
            raise BlobNotFoundError(storage_path)
        return self.signer.generate_signed_url(storage_path, ttl_seconds)

    def exists(self, storage_path: str) -> bool:
        """Check if a blob exists. Never raises."""
        try:
            return self._full_path(storage_path).is_file()
        except (OSError, ValueError):
            return False

    def get(self, storage_path: str) -> Optional[bytes]:
        """Read a blob's bytes, or None if it does not exist."""
        try:
            full_path = self._full_path(storage_path)
            if not full_path.is_file():
                return None
            return full_path.read_bytes()
        except ValueError:
            return None
        except OSError as e:
            raise StoreUnavailableError(f"Failed to read blob {storage_path}: {e}", e) from e

    def open_signed(self, storage_path: str, signature: Optional[str], expires) -> bytes:
        """
        Verify a dereferenced signed URL and return the blob's bytes.

        Args:
            storage_path: Object key from the URL path
            signature: 'signature' query parameter
            expires: 'expires' query parameter

        Returns:
            Blob content

        Raises:
            InvalidSignatureError: If the signature does not verify
            SignatureExpiredError: If the URL has expired
            BlobNotFoundError: If the blob no longer exists
        """
        self.signer.verify(storage_path, signature, expires)
        data = self.get(storage_path)
        if data is None:
            raise BlobNotFoundError(storage_path)
        return data

    def health_check(self) -> bool:
        """Check that the base directory is present and writable."""
        return self.base_path.is_dir() and os.access(self.base_path, os.W_OK)
