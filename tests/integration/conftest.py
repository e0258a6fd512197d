"""
Fixtures for integration tests: a fully wired Flask app over an in-memory
SQLite record store and a local blob directory, driven by a fake clock.
"""

import pytest

from app_factory import AppConfig, create_app


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    config = AppConfig()
    config.flask_env = "testing"
    config.public_base_url = "http://localhost"
    config.secret_key = "integration-secret"
    config.storage_backend = "local"
    config.storage_dir = str(tmp_path / "blobs")
    config.database_url = "sqlite://"
    config.log_level = "WARNING"
    return config


@pytest.fixture
def app(app_config, fake_clock):
    app = create_app(app_config, clock=fake_clock)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
