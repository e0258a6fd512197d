"""
Upload Service

Application service that orchestrates the image upload workflow:
validate, write the blob, register the record, hand back the share link.
"""

import logging
from typing import Optional, Tuple

from qrshare.domain.errors import (
    StoreUnavailableError,
    ValidationError,
    ValidationReason,
)
from qrshare.domain.events import ImageUploadedEvent, OrphanedBlobEvent
from qrshare.domain.image_links.services import LinkRegistry
from qrshare.domain.image_links.signed_url_service import Clock, utc_now
from qrshare.domain.image_links.storage_repository import IObjectStorageRepository
from qrshare.domain.image_links.value_objects import ShareLink, StoragePath, UploadPolicy

from .event_publisher import EventPublisher
from .results import UploadResult

logger = logging.getLogger(__name__)


class UploadService:
    """
    Application service for validating and persisting new images.

    Workflow:
    1. Validate owner, declared MIME type and declared size (no I/O yet)
    2. Write the blob under the owner's namespace
    3. Register the record through LinkRegistry
    4. On registration failure: best-effort compensating delete of the blob,
       then surface StoreUnavailableError
    5. Derive the share link and QR payload from the new id

    The two stores are not transactional together; the compensating delete
    narrows the window in which a blob can exist without a record. When the
    compensating delete itself fails, an OrphanedBlobEvent is published so
    the blob can be reconciled offline. That secondary failure never
    replaces the primary error.
    """

    def __init__(
        self,
        link_registry: LinkRegistry,
        storage_repository: IObjectStorageRepository,
        public_base_url: str,
        policy: Optional[UploadPolicy] = None,
        event_publisher: Optional[EventPublisher] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize Upload Service with dependencies.

        Args:
            link_registry: Domain service owning the id -> blob mapping
            storage_repository: Object store for image blobs
            public_base_url: Base address used to build '/i/{id}' links
            policy: Upload validation policy (default: raster images up to 5 MiB)
            event_publisher: Optional publisher for lifecycle events
            clock: Timestamp source for storage paths and events
        """
        self.link_registry = link_registry
        self.storage_repository = storage_repository
        self.public_base_url = public_base_url
        self.policy = policy or UploadPolicy()
        self.event_publisher = event_publisher
        self.clock = clock or utc_now

    def upload(
        self,
        owner_id: str,
        data: bytes,
        declared_mime: Optional[str],
        declared_size: Optional[int] = None,
        filename: Optional[str] = None,
    ) -> UploadResult:
        """
        Validate and persist a new image.

        Args:
            owner_id: Authenticated principal uploading the image
            data: Raw image bytes
            declared_mime: MIME type reported by the client
            declared_size: Size reported by the client (defaults to len(data))
            filename: Original client filename, used for the extension

        Returns:
            UploadResult with the new id, storage path and share link

        Raises:
            ValidationError: UNSUPPORTED_TYPE, TOO_LARGE or INVALID_REQUEST;
                nothing has been written
            StoreUnavailableError: If the blob write or the record insert failed
        """
        if declared_size is None:
            declared_size = len(data)

        storage_path, mime = self._validate(
            owner_id, data, declared_mime, declared_size, filename
        )

        self.storage_repository.put(storage_path, data, mime)

        try:
            image_id = self.link_registry.create(owner_id, storage_path)
        except Exception as e:
            self._compensate(owner_id, storage_path)
            raise StoreUnavailableError(
                f"Failed to register image at {storage_path}: {e}", e
            ) from e

        self._publish(
            ImageUploadedEvent(
                image_id,
                self.clock(),
                owner_id=owner_id,
                storage_path=storage_path,
                size_bytes=len(data),
            )
        )

        return UploadResult(
            image_id=image_id,
            storage_path=storage_path,
            share_link=ShareLink.build(self.public_base_url, image_id),
        )

    def _validate(
        self,
        owner_id: str,
        data: bytes,
        declared_mime: Optional[str],
        declared_size: int,
        filename: Optional[str],
    ) -> Tuple[str, str]:
        """Run every pre-I/O check; return the storage path and normalized MIME type."""
        if not owner_id or not owner_id.strip():
            raise ValidationError(ValidationReason.INVALID_REQUEST, "owner_id is required")

        mime = self.policy.validate(declared_mime, declared_size)

        if not data:
            raise ValidationError(ValidationReason.INVALID_REQUEST, "Image data is empty")
        if len(data) != declared_size:
            raise ValidationError(
                ValidationReason.INVALID_REQUEST,
                f"Declared size {declared_size} does not match {len(data)} received bytes",
            )

        try:
            storage_path = StoragePath.generate(owner_id, mime, filename, now=self.clock())
        except ValueError as e:
            raise ValidationError(ValidationReason.INVALID_REQUEST, str(e)) from e
        return storage_path.value, mime

    def _compensate(self, owner_id: str, storage_path: str) -> None:
        """Best-effort removal of a blob whose record could not be created."""
        try:
            self.storage_repository.remove(storage_path)
            logger.warning(f"Removed blob {storage_path} after failed record insert")
        except Exception as cleanup_error:
            logger.error(
                f"Compensating delete failed for {storage_path}: {cleanup_error}"
            )
            self._publish(
                OrphanedBlobEvent(
                    storage_path,
                    self.clock(),
                    owner_id=owner_id,
                    error_message=str(cleanup_error),
                )
            )

    def _publish(self, event) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
