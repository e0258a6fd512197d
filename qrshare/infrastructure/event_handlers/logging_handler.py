"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Subscribes to domain events and logs them appropriately.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from qrshare.domain.events import (
    AccessUrlMintedEvent,
    DomainEvent,
    ImageDeletedEvent,
    ImageUploadedEvent,
    OrphanedBlobEvent,
    ResolutionMissedEvent,
)


class LoggingEventHandler:
    """
    Infrastructure event handler for logging domain events.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            if isinstance(event, ImageUploadedEvent):
                self._handle_uploaded(event)
            elif isinstance(event, ImageDeletedEvent):
                self._handle_deleted(event)
            elif isinstance(event, AccessUrlMintedEvent):
                self._handle_access_minted(event)
            elif isinstance(event, ResolutionMissedEvent):
                self._handle_resolution_missed(event)
            elif isinstance(event, OrphanedBlobEvent):
                self._handle_orphaned_blob(event)
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )

    def _handle_uploaded(self, event: ImageUploadedEvent) -> None:
        self.logger.info(
            f"Image uploaded: id={event.aggregate_id}, owner={event.owner_id}, "
            f"path={event.storage_path}, size={event.size_bytes}"
        )

    def _handle_deleted(self, event: ImageDeletedEvent) -> None:
        self.logger.info(
            f"Image deleted: id={event.aggregate_id}, owner={event.owner_id}, "
            f"path={event.storage_path}"
        )

    def _handle_access_minted(self, event: AccessUrlMintedEvent) -> None:
        self.logger.debug(
            f"Access URL minted: id={event.aggregate_id}, "
            f"expires_at={event.expires_at.isoformat()}"
        )

    def _handle_resolution_missed(self, event: ResolutionMissedEvent) -> None:
        if event.dangling_record:
            # Record without blob: invariant broken, needs reconciliation
            self.logger.error(
                f"Record {event.aggregate_id} has no blob in the object store"
            )
        else:
            self.logger.info(f"Short link not found: id={event.aggregate_id}")

    def _handle_orphaned_blob(self, event: OrphanedBlobEvent) -> None:
        self.logger.error(
            f"Orphaned blob requires reconciliation: path={event.aggregate_id}, "
            f"owner={event.owner_id}, cleanup_error={event.error_message}"
        )
