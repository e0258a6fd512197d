"""Infrastructure layer for the record store, object storage and event handlers."""

from .gcs_object_storage_repository import GCSObjectStorageRepository
from .local_object_storage_repository import LocalObjectStorageRepository
from .sql_image_record_repository import SqlImageRecordRepository
from .storage_factory import StorageFactory

__all__ = [
    "GCSObjectStorageRepository",
    "LocalObjectStorageRepository",
    "SqlImageRecordRepository",
    "StorageFactory",
]
