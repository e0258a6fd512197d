"""
Resolution Service

Application service behind the public short-link redirect. Turns an image id
into a freshly minted, time-limited access URL.
"""

import logging
from typing import Optional

from qrshare.domain.errors import BlobNotFoundError, ImageNotFoundError
from qrshare.domain.events import AccessUrlMintedEvent, ResolutionMissedEvent
from qrshare.domain.image_links.services import LinkRegistry
from qrshare.domain.image_links.signed_url_service import Clock, SignedUrl, utc_now
from qrshare.domain.image_links.storage_repository import IObjectStorageRepository
from qrshare.domain.image_links.value_objects import SIGNED_URL_TTL_SECONDS

from .event_publisher import EventPublisher
from .results import ResolutionResult

logger = logging.getLogger(__name__)


class ResolutionService:
    """
    Application service for resolving short links to signed URLs.

    Every call mints a new URL; minted URLs are never cached or reused,
    so each one carries the full TTL and exposure stays bounded by it.
    Unknown ids, deleted ids and records whose blob has gone missing all
    produce the same not-found outcome.
    """

    def __init__(
        self,
        link_registry: LinkRegistry,
        storage_repository: IObjectStorageRepository,
        ttl_seconds: int = SIGNED_URL_TTL_SECONDS,
        event_publisher: Optional[EventPublisher] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize Resolution Service with dependencies.

        Args:
            link_registry: Domain service owning the id -> blob mapping
            storage_repository: Object store used to sign URLs
            ttl_seconds: Lifetime of minted URLs (default: 600)
            event_publisher: Optional publisher for lifecycle events
            clock: Timestamp source for events
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.link_registry = link_registry
        self.storage_repository = storage_repository
        self.ttl_seconds = ttl_seconds
        self.event_publisher = event_publisher
        self.clock = clock or utc_now

    def get_access_url(self, image_id: str) -> ResolutionResult:
        """
        Resolve an image id to a time-limited access URL.

        Args:
            image_id: Opaque image identifier taken from the short link

        Returns:
            ResolutionResult.found with a fresh SignedUrl, or
            ResolutionResult.not_found

        Raises:
            StoreUnavailableError: If either store cannot be reached
        """
        try:
            storage_path = self.link_registry.resolve(image_id)
        except ImageNotFoundError:
            self._publish(ResolutionMissedEvent(image_id, self.clock()))
            return ResolutionResult.not_found(image_id)

        try:
            signed_url = self._mint(image_id, storage_path)
        except BlobNotFoundError:
            logger.warning(f"Record {image_id} points at missing blob {storage_path}")
            self._publish(
                ResolutionMissedEvent(image_id, self.clock(), dangling_record=True)
            )
            return ResolutionResult.not_found(image_id)

        return ResolutionResult.found(image_id, signed_url)

    def get_owner_access_url(self, image_id: str, owner_id: str) -> SignedUrl:
        """
        Mint a preview URL for the owner's management view.

        Unlike get_access_url this is owner-only and raises instead of
        returning a not-found outcome.

        Args:
            image_id: Opaque image identifier
            owner_id: Requesting principal

        Returns:
            Freshly minted SignedUrl

        Raises:
            ImageNotFoundError: If no live record exists
            ForbiddenError: If owner_id does not own the image
            BlobNotFoundError: If the record's blob is missing
            StoreUnavailableError: If either store cannot be reached
        """
        record = self.link_registry.authorize(image_id, owner_id)
        return self._mint(record.id, record.storage_path)

    def _mint(self, image_id: str, storage_path: str) -> SignedUrl:
        signed_url = self.storage_repository.sign_url(storage_path, self.ttl_seconds)
        self._publish(
            AccessUrlMintedEvent(image_id, self.clock(), expires_at=signed_url.expires_at)
        )
        return signed_url

    def _publish(self, event) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
