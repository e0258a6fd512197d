"""
API v1 - qrshare REST API

This module contains the versioned API endpoints with OpenAPI/Swagger documentation.
"""

import os

from flask import Blueprint
from flask_restx import Api

# Get API version from environment
API_VERSION = os.getenv("API_VERSION", "v1")

# Create blueprint for API v1
api_v1_bp = Blueprint("api_v1", __name__, url_prefix=f"/api/{API_VERSION}")

# Initialize Flask-RESTX API with Swagger documentation
api = Api(
    api_v1_bp,
    version="1.0",
    title="qrshare API",
    description="Upload images, share them through QR-encodable links, resolve links to short-lived signed URLs",
    doc="/docs",  # Swagger UI will be available at /api/v1/docs
    contact="qrshare Team",
    license="MIT",
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import blobs_ns, images_ns, resolve_ns

# Register namespaces
api.add_namespace(images_ns, path="/images")
api.add_namespace(resolve_ns, path="/resolve")
api.add_namespace(blobs_ns, path="/blobs")
