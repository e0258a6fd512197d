"""
Image Record Repositories

Repository interface for the durable id -> storage path mapping.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import ImageRecord


class IImageRecordRepository(ABC):
    """
    Abstract repository interface for image record persistence.

    Contract Guarantees:
    - insert() generates the id; callers never supply one
    - Store connectivity failures raise StoreUnavailableError
    - Id collisions on insert raise DuplicateViolationError
    - Lookups of unknown ids return None / False rather than raising
    """

    @abstractmethod
    def insert(self, owner_id: str, storage_path: str) -> ImageRecord:
        """
        Insert a new record.

        Args:
            owner_id: Owner of the image
            storage_path: Object store key of the already-written blob

        Returns:
            The created ImageRecord with its generated id and created_at

        Raises:
            StoreUnavailableError: If the store cannot be reached
            DuplicateViolationError: If the generated id already exists
        """
        pass  # pragma: no cover

    @abstractmethod
    def select_by_owner(self, owner_id: str) -> List[ImageRecord]:
        """
        List an owner's records, newest first (created_at descending).

        Args:
            owner_id: Owner to list records for

        Returns:
            List of ImageRecord (empty if the owner has none)
        """
        pass  # pragma: no cover

    @abstractmethod
    def select_by_id(self, image_id: str) -> Optional[ImageRecord]:
        """
        Retrieve a record by id.

        Args:
            image_id: Opaque image identifier

        Returns:
            ImageRecord if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete_by_id(self, image_id: str) -> bool:
        """
        Delete a record by id.

        Args:
            image_id: Opaque image identifier

        Returns:
            True if a record was deleted, False if none existed
        """
        pass  # pragma: no cover

    def ping(self) -> bool:
        """
        Check store connectivity for health reporting.

        Returns:
            True if the store answered, False otherwise
        """
        return True
