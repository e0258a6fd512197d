"""
Domain Events

Immutable records of significant state changes in the domain.
Events decouple side effects (logging, reconciliation) from core business logic.
"""

from abc import ABC
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: ID of the aggregate that generated the event (the image id,
            or the storage path when no record exists)
        occurred_at: Timestamp when the event occurred
    """
    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event
        """
        return {
            "event_type": self.__class__.__name__,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class ImageUploadedEvent(DomainEvent):
    """
    Event emitted when an image blob and its record were both created.

    Attributes:
        owner_id: Owner of the new image
        storage_path: Object store key
        size_bytes: Uploaded size
    """
    owner_id: str
    storage_path: str
    size_bytes: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "storage_path": self.storage_path,
            "size_bytes": self.size_bytes,
        })
        return base_dict


@dataclass(frozen=True)
class ImageDeletedEvent(DomainEvent):
    """
    Event emitted when an owner deleted an image (blob and record).
    """
    owner_id: str
    storage_path: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "storage_path": self.storage_path,
        })
        return base_dict


@dataclass(frozen=True)
class AccessUrlMintedEvent(DomainEvent):
    """
    Event emitted each time a short link is resolved to a fresh signed URL.
    """
    expires_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict["expires_at"] = self.expires_at.isoformat()
        return base_dict


@dataclass(frozen=True)
class ResolutionMissedEvent(DomainEvent):
    """
    Event emitted when a short link resolves to nothing.

    Attributes:
        dangling_record: True when a record exists but its blob is gone
    """
    dangling_record: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict["dangling_record"] = self.dangling_record
        return base_dict


@dataclass(frozen=True)
class OrphanedBlobEvent(DomainEvent):
    """
    Event emitted when a blob was written but neither a record nor the
    compensating delete succeeded. The blob needs offline reconciliation.

    Attributes:
        aggregate_id: Storage path of the orphaned blob
        owner_id: Owner namespace of the blob
        error_message: Error from the failed compensating delete
    """
    owner_id: str
    error_message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "error_message": self.error_message,
        })
        return base_dict
