"""
Storage Factory

Factory for creating the object storage repository implementation.

The backend is chosen by STORAGE_BACKEND: 'local' keeps blobs on disk and
serves them through the application's signed blob endpoint, 'gcs' keeps
them in a private Google Cloud Storage bucket. The application layer only
sees the `IObjectStorageRepository` interface.
"""

import logging
from os import getenv
from typing import Optional

from qrshare.domain.image_links.signed_url_service import SignedUrlService
from qrshare.domain.image_links.storage_repository import IObjectStorageRepository
from qrshare.infrastructure.gcs_object_storage_repository import GCSObjectStorageRepository
from qrshare.infrastructure.local_object_storage_repository import LocalObjectStorageRepository

logger = logging.getLogger(__name__)


class StorageFactory:
    """Factory that returns the configured object storage repository."""

    @staticmethod
    def create_storage(
        signer: SignedUrlService,
        backend: Optional[str] = None,
        storage_dir: Optional[str] = None,
        bucket_name: Optional[str] = None,
    ) -> IObjectStorageRepository:
        """
        Create the object storage repository.

        Args:
            signer: Signer for local blob URLs
            backend: 'local' or 'gcs' (default: STORAGE_BACKEND, then 'local')
            storage_dir: Local blob directory (default: STORAGE_DIR)
            bucket_name: GCS bucket (default: GCS_BUCKET_NAME)

        Raises:
            ValueError: If the backend name is unknown
            RuntimeError: If the backend cannot be initialized
        """
        backend = (backend or getenv("STORAGE_BACKEND", "local")).strip().lower()

        if backend == "local":
            return StorageFactory._create_local_storage(signer, storage_dir)
        if backend == "gcs":
            return StorageFactory._create_gcs_storage(bucket_name)

        raise ValueError(f"Unknown storage backend: {backend!r} (expected 'local' or 'gcs')")

    @staticmethod
    def _create_local_storage(
        signer: SignedUrlService, storage_dir: Optional[str]
    ) -> IObjectStorageRepository:
        storage_dir = storage_dir or getenv("STORAGE_DIR", "/tmp/qrshare_blobs")
        try:
            storage = LocalObjectStorageRepository(storage_dir, signer)
        except Exception as e:
            raise RuntimeError(f"Failed to initialize local storage: {e}") from e

        logger.info(f"Storage factory: Using local filesystem storage at {storage_dir}")
        return storage

    @staticmethod
    def _create_gcs_storage(bucket_name: Optional[str]) -> IObjectStorageRepository:
        from qrshare.config.gcs_config import get_gcs_client, init_gcs

        bucket_name = bucket_name or getenv("GCS_BUCKET_NAME")
        if not init_gcs(bucket_name):
            raise RuntimeError("Failed to initialize GCS storage; check GCS_BUCKET_NAME and credentials")

        logger.info(f"Storage factory: Using GCS bucket {bucket_name}")
        return GCSObjectStorageRepository(bucket_name, client=get_gcs_client())
