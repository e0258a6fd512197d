"""
Image Link Services

Domain service owning the create/resolve/delete lifecycle of the
id -> blob mapping.
"""

from typing import List

from ..errors import (
    DuplicateViolationError,
    ForbiddenError,
    ImageNotFoundError,
)
from .entities import ImageRecord
from .repositories import IImageRecordRepository
from .storage_repository import IObjectStorageRepository


class LinkRegistry:
    """
    Sole authority over the id -> blob mapping.

    Keeps a record present iff its blob is present: records are only
    created for blobs that were already written, and deletion removes the
    blob before the record so a failed delete never leaves a dangling record
    behind. Authorization is explicit: every owner-only operation receives
    the requester id as a parameter.
    """

    def __init__(
        self,
        record_repository: IImageRecordRepository,
        storage_repository: IObjectStorageRepository,
    ):
        """
        Initialize LinkRegistry with its two stores.

        Args:
            record_repository: Durable id -> (owner, path) mapping
            storage_repository: Private blob store
        """
        self.record_repo = record_repository
        self.storage_repo = storage_repository

    def create(self, owner_id: str, storage_path: str) -> str:
        """
        Register an already-written blob and return its new id.

        An id collision is retried once; the store generates a fresh id
        on every insert.

        Args:
            owner_id: Owner of the blob
            storage_path: Object store key of the blob

        Returns:
            The new opaque image id

        Raises:
            StoreUnavailableError: If the record store cannot be reached
            DuplicateViolationError: If the regenerated id collides again
        """
        try:
            record = self.record_repo.insert(owner_id, storage_path)
        except DuplicateViolationError:
            record = self.record_repo.insert(owner_id, storage_path)
        return record.id

    def get(self, image_id: str) -> ImageRecord:
        """
        Retrieve the record for an id.

        Raises:
            ImageNotFoundError: If no live record exists
        """
        record = self.record_repo.select_by_id(image_id) if image_id else None
        if record is None:
            raise ImageNotFoundError(image_id)
        return record

    def resolve(self, image_id: str) -> str:
        """
        Look up the storage path behind a short link.

        No ownership check: holding the id is the capability.

        Args:
            image_id: Opaque image identifier

        Returns:
            Storage path of the image blob

        Raises:
            ImageNotFoundError: If the id never existed or was deleted
        """
        return self.get(image_id).storage_path

    def list_for_owner(self, owner_id: str) -> List[ImageRecord]:
        """
        List an owner's records, newest first.

        Args:
            owner_id: Owner whose records to list

        Returns:
            List of ImageRecord ordered by created_at descending
        """
        return self.record_repo.select_by_owner(owner_id)

    def authorize(self, image_id: str, requester_id: str) -> ImageRecord:
        """
        Fetch a record and verify the requester owns it.

        Raises:
            ImageNotFoundError: If no live record exists
            ForbiddenError: If the requester is not the owner
        """
        record = self.get(image_id)
        if not record.is_owned_by(requester_id):
            raise ForbiddenError(image_id, requester_id)
        return record

    def delete(self, image_id: str, requester_id: str) -> ImageRecord:
        """
        Delete an image's blob and record as one logical operation.

        The blob goes first. If its removal fails the record stays, the
        error propagates and the delete can simply be retried. A record
        that vanished after the blob removal (a concurrent delete of the
        same id) still counts as success.

        Args:
            image_id: Opaque image identifier
            requester_id: Principal requesting the delete

        Returns:
            The deleted ImageRecord

        Raises:
            ImageNotFoundError: If no live record exists
            ForbiddenError: If the requester is not the owner; nothing is removed
            StoreUnavailableError: If either store fails
        """
        record = self.authorize(image_id, requester_id)
        self.storage_repo.remove(record.storage_path)
        self.record_repo.delete_by_id(record.id)
        return record
