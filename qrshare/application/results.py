"""
Application Result Value Objects

Value objects representing the outcome of resolution and upload operations.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from qrshare.domain.image_links.signed_url_service import SignedUrl
from qrshare.domain.image_links.value_objects import ShareLink


@dataclass(frozen=True)
class ResolutionResult:
    """
    Outcome of resolving a short link.

    A missing image is a normal outcome, not an error, so callers can render
    a stable "image not found" page.

    Attributes:
        image_id: The id that was resolved
        signed_url: Freshly minted access URL (None when not found)
    """
    image_id: str
    signed_url: Optional[SignedUrl] = None

    @classmethod
    def found(cls, image_id: str, signed_url: SignedUrl) -> 'ResolutionResult':
        return cls(image_id=image_id, signed_url=signed_url)

    @classmethod
    def not_found(cls, image_id: str) -> 'ResolutionResult':
        return cls(image_id=image_id)

    @property
    def is_found(self) -> bool:
        return self.signed_url is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        if self.signed_url is None:
            return {"id": self.image_id, "found": False}
        result = {"id": self.image_id, "found": True}
        result.update(self.signed_url.to_dict())
        return result


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of a successful upload.

    Attributes:
        image_id: Id of the new record
        storage_path: Object store key of the new blob
        share_link: Link and QR payload derived from the id
    """
    image_id: str
    storage_path: str
    share_link: ShareLink

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = self.share_link.to_dict()
        result["storage_path"] = self.storage_path
        return result
