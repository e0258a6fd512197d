"""
Image Link Entities

Domain entity for the durable id -> stored image mapping.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class ImageRecord:
    """
    Entity representing one shared image.

    Records are immutable once created; the only lifecycle transition
    after insert is deletion by the owner.

    Attributes:
        id: Opaque identifier generated by the record store, the sole public handle
        owner_id: Principal that uploaded the image
        storage_path: Object store key, always prefixed by the owner namespace
        created_at: Insert timestamp set by the record store (UTC)
    """
    id: str
    owner_id: str
    storage_path: str
    created_at: datetime

    def is_owned_by(self, requester_id: str) -> bool:
        """
        Check whether a requester owns this record.

        Args:
            requester_id: Authenticated principal making the request

        Returns:
            True if the requester is the owner, False otherwise
        """
        return bool(requester_id) and requester_id == self.owner_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "storage_path": self.storage_path,
            "created_at": self.created_at.isoformat(),
        }
