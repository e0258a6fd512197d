"""
Image Service

Application service for the owner's management view: listing and deleting
their images. Delegates authorization and the delete ordering to LinkRegistry.
"""

import logging
from typing import Any, Dict, List, Optional

from qrshare.domain.errors import ValidationError, ValidationReason
from qrshare.domain.events import ImageDeletedEvent
from qrshare.domain.image_links.entities import ImageRecord
from qrshare.domain.image_links.services import LinkRegistry
from qrshare.domain.image_links.signed_url_service import Clock, utc_now
from qrshare.domain.image_links.value_objects import ShareLink

from .event_publisher import EventPublisher

logger = logging.getLogger(__name__)


class ImageService:
    """
    Application service for owner-scoped image operations.

    Both operations take the owner id explicitly; no session state is
    held here.
    """

    def __init__(
        self,
        link_registry: LinkRegistry,
        public_base_url: str,
        event_publisher: Optional[EventPublisher] = None,
        clock: Optional[Clock] = None,
    ):
        self.link_registry = link_registry
        self.public_base_url = public_base_url
        self.event_publisher = event_publisher
        self.clock = clock or utc_now

    def list_images(self, owner_id: str) -> List[Dict[str, Any]]:
        """
        List an owner's images newest first, each with its share link.

        Args:
            owner_id: Owner whose images to list

        Returns:
            List of dicts with record fields plus 'link' and 'qr_payload'

        Raises:
            ValidationError: If owner_id is empty
        """
        self._require_owner(owner_id)
        return [self._present(record) for record in self.link_registry.list_for_owner(owner_id)]

    def delete_image(self, image_id: str, owner_id: str) -> None:
        """
        Delete an image's blob and record.

        Raises:
            ValidationError: If owner_id is empty
            ImageNotFoundError: If the image does not exist
            ForbiddenError: If owner_id does not own the image
            StoreUnavailableError: If either store fails
        """
        self._require_owner(owner_id)
        record = self.link_registry.delete(image_id, owner_id)
        if self.event_publisher is not None:
            self.event_publisher.publish(
                ImageDeletedEvent(
                    record.id,
                    self.clock(),
                    owner_id=record.owner_id,
                    storage_path=record.storage_path,
                )
            )

    def _present(self, record: ImageRecord) -> Dict[str, Any]:
        share_link = ShareLink.build(self.public_base_url, record.id)
        result = record.to_dict()
        result["link"] = share_link.url
        result["qr_payload"] = share_link.qr_payload
        return result

    @staticmethod
    def _require_owner(owner_id: str) -> None:
        if not owner_id or not owner_id.strip():
            raise ValidationError(ValidationReason.INVALID_REQUEST, "owner_id is required")
