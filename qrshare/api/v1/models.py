"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields, reqparse
from werkzeug.datastructures import FileStorage

from qrshare.api.v1 import api

# =============================================================================
# Request Parsers
# =============================================================================

upload_parser = reqparse.RequestParser()
upload_parser.add_argument(
    "file",
    location="files",
    type=FileStorage,
    required=True,
    help="Image file (JPEG, PNG, GIF or WebP, at most 5 MiB)",
)
upload_parser.add_argument(
    "owner_id",
    location="form",
    type=str,
    required=True,
    help="Identifier of the uploading user",
)

owner_parser = reqparse.RequestParser()
owner_parser.add_argument(
    "owner_id",
    location="args",
    type=str,
    required=True,
    help="Identifier of the requesting user",
)

# =============================================================================
# Response Models
# =============================================================================

upload_response = api.model(
    "UploadResponse",
    {
        "id": fields.String(
            description="Opaque image id",
            example="3f2b8c1e-9a4d-4c61-8f0e-2d7b5a6c9e10",
        ),
        "storage_path": fields.String(
            description="Object key of the stored blob",
            example="u1/1735689600000-1a2b3c4d.jpg",
        ),
        "link": fields.String(
            description="Durable share link",
            example="https://share.example.com/i/3f2b8c1e-9a4d-4c61-8f0e-2d7b5a6c9e10",
        ),
        "qr_payload": fields.String(description="Exact text to encode as a QR code"),
        "qr_error_correction": fields.String(
            description="QR error correction level", enum=["L", "M", "Q", "H"]
        ),
    },
)

image_record = api.model(
    "ImageRecord",
    {
        "id": fields.String(description="Opaque image id"),
        "owner_id": fields.String(description="Uploading user"),
        "storage_path": fields.String(description="Object key of the stored blob"),
        "created_at": fields.DateTime(description="Upload time (UTC)"),
        "link": fields.String(description="Durable share link"),
        "qr_payload": fields.String(description="Exact text to encode as a QR code"),
    },
)

access_url_response = api.model(
    "AccessUrlResponse",
    {
        "url": fields.String(description="Time-limited signed URL"),
        "expires_at": fields.DateTime(description="Expiry time (UTC)"),
        "expires_in": fields.Integer(description="Seconds until expiry", min=0),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Short user-facing title"),
        "message": fields.String(description="User-facing error message"),
        "action": fields.String(description="Suggested user action"),
        "details": fields.Raw(description="Additional error details", allow_null=True),
    },
)
