"""
SQL Image Record Repository Implementation

Concrete implementation of IImageRecordRepository on SQLAlchemy.
One row per image in the 'images' table.
"""

import uuid
from datetime import timezone
from typing import Callable, List, Optional

from sqlalchemy import Column, DateTime, String, delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from qrshare.domain.errors import DuplicateViolationError, StoreUnavailableError
from qrshare.domain.image_links.entities import ImageRecord
from qrshare.domain.image_links.repositories import IImageRecordRepository
from qrshare.domain.image_links.signed_url_service import Clock, utc_now

Base = declarative_base()


class ImageRow(Base):
    __tablename__ = "images"

    id = Column(String(36), primary_key=True)
    owner_id = Column(String(255), nullable=False, index=True)
    storage_path = Column(String(1024), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def to_entity(self) -> ImageRecord:
        created_at = self.created_at
        # SQLite drops tzinfo on the way back
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return ImageRecord(
            id=self.id,
            owner_id=self.owner_id,
            storage_path=self.storage_path,
            created_at=created_at,
        )


def generate_image_id() -> str:
    """Generate an opaque image id (UUID4, 122 random bits)."""
    return str(uuid.uuid4())


class SqlImageRecordRepository(IImageRecordRepository):
    """
    SQLAlchemy implementation of IImageRecordRepository.

    Each operation runs in its own short transaction; no session outlives
    a call. Driver and connection errors surface as StoreUnavailableError,
    primary key violations as DuplicateViolationError.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        id_factory: Callable[[], str] = generate_image_id,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the repository.

        Args:
            session_factory: sessionmaker bound to the database engine
            id_factory: Generator for new ids (injectable for tests)
            clock: Source of created_at timestamps
        """
        self.session_factory = session_factory
        self.id_factory = id_factory
        self.clock = clock or utc_now

    def insert(self, owner_id: str, storage_path: str) -> ImageRecord:
        row = ImageRow(
            id=self.id_factory(),
            owner_id=owner_id,
            storage_path=storage_path,
            created_at=self.clock(),
        )
        record = row.to_entity()

        try:
            with self.session_factory.begin() as session:
                session.add(row)
        except IntegrityError as e:
            raise DuplicateViolationError(f"Image id collision: {record.id}", e) from e
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to insert image record: {e}", e) from e

        return record

    def select_by_owner(self, owner_id: str) -> List[ImageRecord]:
        stmt = (
            select(ImageRow)
            .where(ImageRow.owner_id == owner_id)
            .order_by(ImageRow.created_at.desc(), ImageRow.id.desc())
        )
        try:
            with self.session_factory() as session:
                return [row.to_entity() for row in session.scalars(stmt)]
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to list image records: {e}", e) from e

    def select_by_id(self, image_id: str) -> Optional[ImageRecord]:
        try:
            with self.session_factory() as session:
                row = session.get(ImageRow, image_id)
                return row.to_entity() if row is not None else None
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to load image record: {e}", e) from e

    def delete_by_id(self, image_id: str) -> bool:
        try:
            with self.session_factory.begin() as session:
                result = session.execute(delete(ImageRow).where(ImageRow.id == image_id))
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to delete image record: {e}", e) from e

    def ping(self) -> bool:
        try:
            with self.session_factory() as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
