"""
Google Cloud Storage Repository Implementation

Concrete implementation of IObjectStorageRepository for Google Cloud Storage.
The bucket stays private; clients only ever receive V4 signed URLs.
"""

from datetime import timedelta
from typing import Optional

from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound

from qrshare.domain.errors import BlobNotFoundError, StoreUnavailableError
from qrshare.domain.image_links.signed_url_service import Clock, SignedUrl, utc_now
from qrshare.domain.image_links.storage_repository import IObjectStorageRepository


class GCSObjectStorageRepository(IObjectStorageRepository):
    """
    Google Cloud Storage implementation of IObjectStorageRepository.

    Thread Safety:
        The GCS client handles concurrent operations safely.

    Attributes:
        bucket_name: Name of the GCS bucket for blob storage
        client: Google Cloud Storage client instance
        bucket: GCS bucket object
    """

    def __init__(
        self,
        bucket_name: str,
        client: Optional[storage.Client] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the GCS object storage repository.

        Args:
            bucket_name: Name of the GCS bucket to use for storage
            client: Pre-configured client (default: storage.Client() with
                application default credentials)
            clock: Timestamp source used to report URL expiry

        Raises:
            ValueError: If bucket_name is empty
        """
        if not bucket_name or not bucket_name.strip():
            raise ValueError("bucket_name cannot be empty")

        self.bucket_name = bucket_name
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)
        self.clock = clock or utc_now

    def put(self, storage_path: str, data: bytes, content_type: Optional[str] = None) -> None:
        """Upload a blob, replacing any existing blob at the same path."""
        if not storage_path or not storage_path.strip():
            raise ValueError("storage_path cannot be empty")

        try:
            blob = self.bucket.blob(storage_path)
            blob.upload_from_string(data, content_type=content_type)
        except GoogleCloudError as e:
            raise StoreUnavailableError(f"Failed to save blob to GCS: {e}", e) from e
        except Exception as e:
            # Transport, auth and credential failures
            raise StoreUnavailableError(f"Failed to save blob to GCS: {e}", e) from e

    def remove(self, storage_path: str) -> None:
        """Delete a blob. Missing blobs are not an error."""
        if not storage_path or not storage_path.strip():
            return

        try:
            self.bucket.blob(storage_path).delete()
        except NotFound:
            return  # Idempotent - already gone
        except GoogleCloudError as e:
            raise StoreUnavailableError(f"Failed to delete blob from GCS: {e}", e) from e
        except Exception as e:
            raise StoreUnavailableError(f"Failed to delete blob from GCS: {e}", e) from e

    def sign_url(self, storage_path: str, ttl_seconds: int) -> SignedUrl:
        """
        Generate a V4 signed GET URL for a blob.

        Requires credentials able to sign (a service account key, or
        IAM signBlob permission).
        """
        try:
            blob = self.bucket.blob(storage_path)
            if not blob.exists():
                raise BlobNotFoundError(storage_path)

            expires_at = self.clock().replace(microsecond=0) + timedelta(seconds=ttl_seconds)
            url = blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=ttl_seconds),
                method="GET",
            )
        except BlobNotFoundError:
            raise
        except NotFound as e:
            raise BlobNotFoundError(storage_path) from e
        except GoogleCloudError as e:
            raise StoreUnavailableError(f"Failed to generate signed URL: {e}", e) from e
        except Exception as e:
            # Includes AttributeError from credentials that cannot sign
            raise StoreUnavailableError(f"Failed to generate signed URL: {e}", e) from e

        return SignedUrl(url=url, storage_path=storage_path, expires_at=expires_at)

    def exists(self, storage_path: str) -> bool:
        """Check if a blob exists. Never raises."""
        try:
            if not storage_path or not storage_path.strip():
                return False
            return self.bucket.blob(storage_path).exists()
        except Exception:
            return False

    def get(self, storage_path: str) -> Optional[bytes]:
        """Download a blob's bytes, or None if it does not exist."""
        if not storage_path or not storage_path.strip():
            return None

        try:
            return self.bucket.blob(storage_path).download_as_bytes()
        except NotFound:
            return None
        except GoogleCloudError as e:
            raise StoreUnavailableError(f"Failed to read blob from GCS: {e}", e) from e
        except Exception as e:
            raise StoreUnavailableError(f"Failed to read blob from GCS: {e}", e) from e

    def health_check(self) -> bool:
        """Check that the bucket is reachable."""
        try:
            return self.bucket.exists()
        except Exception:
            return False
