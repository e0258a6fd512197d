"""
Application Factory

Creates and configures Flask application with all dependencies.
This factory pattern improves testability by allowing dependency injection
and configuration overrides.
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from qrshare.application.dependency_container import DependencyContainer
from qrshare.application.event_publisher import EventPublisher
from qrshare.application.image_service import ImageService
from qrshare.application.resolution_service import ResolutionService
from qrshare.application.upload_service import UploadService
from qrshare.config.database_config import DatabaseConfig, get_session_factory, init_database
from qrshare.domain.errors import ErrorCategory, create_error_response
from qrshare.domain.image_links import (
    MAX_UPLOAD_BYTES,
    SIGNED_URL_TTL_SECONDS,
    IImageRecordRepository,
    IObjectStorageRepository,
    LinkRegistry,
    SignedUrlService,
    UploadPolicy,
)
from qrshare.domain.image_links.signed_url_service import Clock
from qrshare.domain.image_links.value_objects import MIME_EXTENSIONS
from qrshare.infrastructure.sql_image_record_repository import SqlImageRecordRepository
from qrshare.infrastructure.storage_factory import StorageFactory

logger = logging.getLogger(__name__)

# Room for multipart boundaries and form fields on top of the image itself
MULTIPART_OVERHEAD_BYTES = 64 * 1024


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Share links and signed URLs
        self.public_base_url = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
        self.secret_key = os.getenv("SECRET_KEY")
        self.signed_url_ttl_seconds = int(
            os.getenv("SIGNED_URL_TTL_SECONDS", SIGNED_URL_TTL_SECONDS)
        )

        # Upload policy
        self.max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES))
        allowed = os.getenv("ALLOWED_MIME_TYPES")
        self.allowed_mime_types = (
            frozenset(m.strip().lower() for m in allowed.split(",") if m.strip())
            if allowed
            else frozenset(MIME_EXTENSIONS)
        )

        # Storage backends
        self.storage_backend = os.getenv("STORAGE_BACKEND", "local").lower()
        self.storage_dir = os.getenv("STORAGE_DIR", "/tmp/qrshare_blobs")
        self.gcs_bucket_name = os.getenv("GCS_BUCKET_NAME")
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///qrshare.db")

    @property
    def blob_base_url(self) -> str:
        """Base address of the local signed blob endpoint."""
        return f"{self.public_base_url}/api/{self.api_version}/blobs"


def create_app(
    config: Optional[AppConfig] = None,
    record_repository: Optional[IImageRecordRepository] = None,
    storage_repository: Optional[IObjectStorageRepository] = None,
    clock: Optional[Clock] = None,
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None
        record_repository: Record store to use instead of the SQL one
        storage_repository: Object store to use instead of the configured backend
        clock: Timestamp source shared by every service (injectable for tests)

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    _configure_logging(config)

    # Create Flask app
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_upload_bytes + MULTIPART_OVERHEAD_BYTES
    app.config["ENV_NAME"] = config.flask_env

    # Configure CORS
    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "POST", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "expose_headers": ["Content-Type", "Location"],
                "max_age": 3600,
            }
        },
    )

    # Initialize services
    _initialize_services(app, config, record_repository, storage_repository, clock)

    # Register blueprints
    _register_blueprints(app, config)

    # Register error handlers and health check endpoint
    _register_error_handlers(app)
    _register_health_endpoint(app)

    return app


def _configure_logging(config: AppConfig) -> None:
    """
    Configure the 'qrshare' logger hierarchy.

    Args:
        config: Application configuration
    """
    logging.basicConfig(format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("qrshare").setLevel(config.log_level)


def _initialize_services(
    app: Flask,
    config: AppConfig,
    record_repository: Optional[IImageRecordRepository],
    storage_repository: Optional[IObjectStorageRepository],
    clock: Optional[Clock],
) -> None:
    """
    Initialize application services and attach to app context using DependencyContainer.

    All services are registered here as singletons and resolved via
    container.resolve() in the API layer.

    PATTERN:
    --------
    1. Create DependencyContainer instance
    2. Register infrastructure adapters (record store, object store)
    3. Register domain services (LinkRegistry, SignedUrlService)
    4. Register application services (upload, resolution, management)
    5. Attach container to Flask app context for global access

    Storage misconfiguration is fatal: an app that cannot reach its stores
    cannot serve a single request.

    Args:
        app: Flask application
        config: Application configuration
        record_repository: Optional record store override
        storage_repository: Optional object store override
        clock: Optional timestamp source
    """
    container = DependencyContainer()

    # Events
    event_publisher = EventPublisher()
    container.setup_event_handlers(event_publisher)
    container.register_singleton(EventPublisher, event_publisher)

    # Signer for the local blob endpoint
    signed_url_service = SignedUrlService(
        secret_key=config.secret_key,
        base_url=config.blob_base_url,
        clock=clock,
    )
    container.register_singleton(SignedUrlService, signed_url_service)

    # Register infrastructure adapters
    if record_repository is None:
        init_database(DatabaseConfig(config.database_url))
        record_repository = SqlImageRecordRepository(get_session_factory(), clock=clock)
    if storage_repository is None:
        storage_repository = StorageFactory.create_storage(
            signed_url_service,
            backend=config.storage_backend,
            storage_dir=config.storage_dir,
            bucket_name=config.gcs_bucket_name,
        )

    container.register_singleton(IImageRecordRepository, record_repository)
    container.register_singleton(IObjectStorageRepository, storage_repository)

    # Register domain services
    link_registry = LinkRegistry(record_repository, storage_repository)
    container.register_singleton(LinkRegistry, link_registry)

    # Register application services
    policy = UploadPolicy(config.allowed_mime_types, config.max_upload_bytes)
    container.register_singleton(
        UploadService,
        UploadService(
            link_registry,
            storage_repository,
            config.public_base_url,
            policy=policy,
            event_publisher=event_publisher,
            clock=clock,
        ),
    )
    container.register_singleton(
        ResolutionService,
        ResolutionService(
            link_registry,
            storage_repository,
            ttl_seconds=config.signed_url_ttl_seconds,
            event_publisher=event_publisher,
            clock=clock,
        ),
    )
    container.register_singleton(
        ImageService,
        ImageService(
            link_registry,
            config.public_base_url,
            event_publisher=event_publisher,
            clock=clock,
        ),
    )

    # Attach container to Flask app context
    app.container = container

    logger.info(
        f"Application services initialized: storage={type(storage_repository).__name__}, "
        f"records={type(record_repository).__name__}, "
        f"registered={', '.join(container.registered_types())}"
    )


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    """
    Register API blueprints.

    Args:
        app: Flask application
        config: Application configuration
    """
    from qrshare.api.short_links import short_links_bp
    from qrshare.api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp)
    app.register_blueprint(short_links_bp)

    logger.info(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _register_error_handlers(app: Flask) -> None:
    """
    Register structured handlers for errors raised outside the API resources.

    Args:
        app: Flask application
    """

    @app.errorhandler(413)
    def request_entity_too_large(error):
        body, status_code = create_error_response(
            ErrorCategory.FILE_TOO_LARGE, str(error)
        )
        return jsonify(body), status_code


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of the record store and object store.

    Args:
        app: Flask application instance

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "message": "backend ready",
        "record_store": "unknown",
        "object_store": "unknown",
    }

    container = app.container

    try:
        if container.resolve(IImageRecordRepository).ping():
            health_status["record_store"] = "connected"
        else:
            health_status["record_store"] = "disconnected"
            health_status["status"] = "degraded"
    except Exception as e:
        health_status["record_store"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    try:
        if container.resolve(IObjectStorageRepository).health_check():
            health_status["object_store"] = "available"
        else:
            health_status["object_store"] = "unavailable"
            health_status["status"] = "degraded"
    except Exception as e:
        health_status["object_store"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.

    Args:
        app: Flask application
    """

    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns overall health status of the application and its stores.
        """
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
