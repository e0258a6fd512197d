"""
Google Cloud Storage Configuration

Manages GCS client initialization and configuration.
"""

import logging
import os
from typing import Optional

from google.cloud import storage
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

# Global GCS client instance
_gcs_client: Optional[storage.Client] = None


def init_gcs(bucket_name: Optional[str] = None) -> bool:
    """
    Initialize Google Cloud Storage client.

    Args:
        bucket_name: Bucket to use (default: GCS_BUCKET_NAME)

    Returns:
        True if initialization successful, False otherwise
    """
    global _gcs_client

    bucket_name = bucket_name or os.getenv("GCS_BUCKET_NAME")
    credentials_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

    if not bucket_name:
        logger.warning("GCS_BUCKET_NAME not set, GCS integration disabled")
        return False

    try:
        # Service account key file can sign URLs without IAM round trips
        if credentials_path and os.path.exists(credentials_path):
            credentials = service_account.Credentials.from_service_account_file(
                credentials_path
            )
            _gcs_client = storage.Client(credentials=credentials)
            logger.info(f"GCS client initialized with service account: {credentials_path}")
        else:
            _gcs_client = storage.Client()
            logger.info("GCS client initialized with default credentials")
    except Exception as e:
        logger.warning(f"Could not initialize GCS client: {e}")
        _gcs_client = None
        return False

    try:
        if not _gcs_client.bucket(bucket_name).exists():
            logger.warning(f"GCS bucket '{bucket_name}' does not exist")
    except Exception as e:
        logger.warning(f"Could not verify GCS bucket '{bucket_name}': {e}")

    return True


def get_gcs_client() -> storage.Client:
    """
    Get GCS client instance.

    Raises:
        RuntimeError: If GCS is not initialized
    """
    if _gcs_client is None:
        raise RuntimeError("GCS not initialized. Call init_gcs() first.")

    return _gcs_client

