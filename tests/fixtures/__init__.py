"""
Test fixtures package.

Provides factory functions, in-memory store implementations, and assertion helpers for testing.
"""

from .assertion_helpers import assert_error_response, assert_repository_called
from .domain_fixtures import JPEG_BYTES, PNG_BYTES, create_image_bytes, create_image_record
from .mock_repositories import (
    FakeClock,
    InMemoryImageRecordRepository,
    InMemoryObjectStorageRepository,
)

__all__ = [
    # Domain fixtures
    "JPEG_BYTES",
    "PNG_BYTES",
    "create_image_bytes",
    "create_image_record",
    # In-memory stores
    "FakeClock",
    "InMemoryImageRecordRepository",
    "InMemoryObjectStorageRepository",
    # Assertion helpers
    "assert_error_response",
    "assert_repository_called",
]
