"""
Shared pytest fixtures and configuration for the qrshare test suite.

This module provides:
- Hypothesis configuration for property-based testing
- In-memory record and object stores
- A controllable clock for expiry and ordering tests
"""

import logging

import pytest

# Hypothesis configuration
from hypothesis import settings, HealthCheck, Phase

from qrshare.application.event_publisher import EventPublisher
from qrshare.domain.events import DomainEvent
from qrshare.domain.image_links.services import LinkRegistry
from qrshare.domain.image_links.signed_url_service import SignedUrlService

from tests.fixtures.mock_repositories import (
    FakeClock,
    InMemoryImageRecordRepository,
    InMemoryObjectStorageRepository,
)

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("default")


BASE_URL = "https://share.example"


# =============================================================================
# Time Fixtures
# =============================================================================

@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a clock frozen at 2025-01-01T12:00:00Z that tests can advance."""
    return FakeClock()


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def record_repository(fake_clock) -> InMemoryImageRecordRepository:
    """Provide an in-memory record store."""
    return InMemoryImageRecordRepository(clock=fake_clock)


@pytest.fixture
def storage_repository(fake_clock) -> InMemoryObjectStorageRepository:
    """Provide an in-memory object store that signs URLs against fake_clock."""
    return InMemoryObjectStorageRepository(clock=fake_clock)


@pytest.fixture
def signer(fake_clock) -> SignedUrlService:
    """Provide a signer for the local blob endpoint."""
    return SignedUrlService(
        secret_key="test-secret",
        base_url="http://localhost/api/v1/blobs",
        clock=fake_clock,
    )


@pytest.fixture
def link_registry(record_repository, storage_repository) -> LinkRegistry:
    """Provide a LinkRegistry over the in-memory stores."""
    return LinkRegistry(record_repository, storage_repository)


# =============================================================================
# Event Fixtures
# =============================================================================

@pytest.fixture
def event_publisher() -> EventPublisher:
    return EventPublisher()


@pytest.fixture
def published_events(event_publisher):
    """Collect every event published through event_publisher."""
    events = []
    event_publisher.subscribe(DomainEvent, events.append)
    return events


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture(autouse=True)
def _reset_qrshare_log_level():
    """Keep log level changes made by create_app from leaking between tests."""
    logger = logging.getLogger("qrshare")
    level = logger.level
    yield
    logger.setLevel(level)


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (real SQLite database, filesystem, Flask app)"
    )
    config.addinivalue_line(
        "markers", "contract: Contract tests (verify interface compliance)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/contracts/* -> @pytest.mark.contract
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        # Get the test file path relative to tests directory
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/contracts/" in test_path or "\\contracts\\" in test_path:
            item.add_marker(pytest.mark.contract)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
