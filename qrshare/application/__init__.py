"""
Application Services Layer

Orchestrates domain services and coordinates use cases.
"""

from .event_publisher import EventPublisher
from .image_service import ImageService
from .resolution_service import ResolutionService
from .results import ResolutionResult, UploadResult
from .upload_service import UploadService

__all__ = [
    'EventPublisher',
    'ImageService',
    'ResolutionService',
    'ResolutionResult',
    'UploadResult',
    'UploadService',
]
