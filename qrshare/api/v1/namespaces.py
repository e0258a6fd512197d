"""
API Namespaces - Organized endpoint groups
"""

import mimetypes

from flask import Response, current_app, redirect, request
from flask_restx import Namespace, Resource
from werkzeug.exceptions import RequestEntityTooLarge

from qrshare.api.v1.models import (
    access_url_response,
    error_response,
    image_record,
    owner_parser,
    upload_parser,
    upload_response,
)
from qrshare.application.image_service import ImageService
from qrshare.application.resolution_service import ResolutionService
from qrshare.application.upload_service import UploadService
from qrshare.domain.errors import (
    ApplicationError,
    DomainError,
    ErrorCategory,
    create_error_response,
)
from qrshare.domain.image_links.storage_repository import IObjectStorageRepository
from qrshare.infrastructure.local_object_storage_repository import LocalObjectStorageRepository

NO_STORE = {"Cache-Control": "no-store"}


def _domain_error_response(error: DomainError, operation: str):
    """Log a domain error and convert it to a structured error response."""
    app_error = ApplicationError.from_domain_error(error)
    if app_error.status_code >= 500:
        current_app.logger.error(f"[API_V1] {operation} failed: {error}")
    else:
        current_app.logger.info(
            f"[API_V1] {operation} rejected ({app_error.category.value}): {error}"
        )
    return app_error.to_dict(), app_error.status_code


def _unexpected_error_response(error: Exception, operation: str):
    current_app.logger.exception(f"[API_V1] Unexpected error in {operation}: {error}")
    return create_error_response(
        ErrorCategory.SYSTEM_ERROR,
        f"Unexpected error: {error}",
    )


def _owner_from_args():
    owner_id = request.args.get("owner_id", "").strip()
    if not owner_id:
        return None, create_error_response(
            ErrorCategory.INVALID_REQUEST,
            "Missing 'owner_id' query parameter",
        )
    return owner_id, None


def resolve_redirect(image_id: str):
    """
    Resolve an image id and redirect to a freshly minted signed URL.

    Shared by the versioned resolve endpoint and the public short-link
    route. Every response carries Cache-Control: no-store so a cached
    redirect can never outlive its signed URL.
    """
    try:
        resolution_service = current_app.container.resolve(ResolutionService)
        result = resolution_service.get_access_url(image_id)
    except DomainError as e:
        body, status_code = _domain_error_response(e, "resolve")
        return body, status_code, NO_STORE
    except Exception as e:
        body, status_code = _unexpected_error_response(e, "resolve")
        return body, status_code, NO_STORE

    if not result.is_found:
        body, status_code = create_error_response(
            ErrorCategory.IMAGE_NOT_FOUND,
            f"Image {image_id} not found",
        )
        return body, status_code, NO_STORE

    response = redirect(result.signed_url.url, code=302)
    response.headers.update(NO_STORE)
    return response


# =============================================================================
# Images Namespace - Upload and owner management
# =============================================================================

images_ns = Namespace("images", description="Image upload and management operations")


@images_ns.route("/")
class ImageCollection(Resource):
    """Upload images and list an owner's images"""

    @images_ns.doc("upload_image")
    @images_ns.expect(upload_parser)
    @images_ns.response(201, "Created", upload_response)
    @images_ns.response(400, "Bad Request", error_response)
    @images_ns.response(413, "File Too Large", error_response)
    @images_ns.response(415, "Unsupported Type", error_response)
    @images_ns.response(503, "Service Unavailable", error_response)
    def post(self):
        """
        Upload an image

        Stores the image privately and returns its durable share link together
        with the QR payload that encodes it.
        """
        try:
            image_file = request.files.get("file")
            owner_id = request.form.get("owner_id", "").strip()
        except RequestEntityTooLarge:
            return create_error_response(
                ErrorCategory.FILE_TOO_LARGE,
                "Request body exceeds the upload limit",
            )

        if image_file is None:
            return create_error_response(
                ErrorCategory.INVALID_REQUEST,
                "Missing 'file' in multipart body",
            )

        try:
            data = image_file.read()
            upload_service = current_app.container.resolve(UploadService)
            result = upload_service.upload(
                owner_id,
                data,
                image_file.mimetype,
                declared_size=len(data),
                filename=image_file.filename,
            )

            current_app.logger.info(
                f"[API_V1] Uploaded image {result.image_id} for owner {owner_id}"
            )
            return result.to_dict(), 201

        except DomainError as e:
            return _domain_error_response(e, "upload")
        except Exception as e:
            return _unexpected_error_response(e, "upload")

    @images_ns.doc("list_images")
    @images_ns.expect(owner_parser)
    @images_ns.response(200, "Success", [image_record])
    @images_ns.response(400, "Bad Request", error_response)
    @images_ns.response(503, "Service Unavailable", error_response)
    def get(self):
        """
        List an owner's images

        Returns the owner's images newest first, each with its share link.
        """
        owner_id, error = _owner_from_args()
        if error:
            return error

        try:
            image_service = current_app.container.resolve(ImageService)
            return image_service.list_images(owner_id), 200
        except DomainError as e:
            return _domain_error_response(e, "list")
        except Exception as e:
            return _unexpected_error_response(e, "list")


@images_ns.route("/<string:image_id>")
@images_ns.param("image_id", "The image identifier")
class Image(Resource):
    """Single image operations"""

    @images_ns.doc("delete_image")
    @images_ns.expect(owner_parser)
    @images_ns.response(204, "Image deleted")
    @images_ns.response(403, "Forbidden", error_response)
    @images_ns.response(404, "Image Not Found", error_response)
    @images_ns.response(503, "Service Unavailable", error_response)
    def delete(self, image_id):
        """
        Delete an image

        Removes the stored blob, then the record. Afterwards the share link
        resolves as not found.
        """
        owner_id, error = _owner_from_args()
        if error:
            return error

        try:
            image_service = current_app.container.resolve(ImageService)
            image_service.delete_image(image_id, owner_id)
            current_app.logger.info(f"[API_V1] Deleted image {image_id}")
            return "", 204
        except DomainError as e:
            return _domain_error_response(e, "delete")
        except Exception as e:
            return _unexpected_error_response(e, "delete")


@images_ns.route("/<string:image_id>/access")
@images_ns.param("image_id", "The image identifier")
class ImageAccess(Resource):
    """Owner preview URL"""

    @images_ns.doc("get_image_access_url")
    @images_ns.expect(owner_parser)
    @images_ns.response(200, "Success", access_url_response)
    @images_ns.response(403, "Forbidden", error_response)
    @images_ns.response(404, "Image Not Found", error_response)
    @images_ns.response(503, "Service Unavailable", error_response)
    def get(self, image_id):
        """
        Get a signed preview URL for one of the owner's images
        """
        owner_id, error = _owner_from_args()
        if error:
            return error

        try:
            resolution_service = current_app.container.resolve(ResolutionService)
            signed_url = resolution_service.get_owner_access_url(image_id, owner_id)
            return signed_url.to_dict(resolution_service.clock()), 200, NO_STORE
        except DomainError as e:
            return _domain_error_response(e, "owner access")
        except Exception as e:
            return _unexpected_error_response(e, "owner access")


# =============================================================================
# Resolve Namespace - Link resolution
# =============================================================================

resolve_ns = Namespace("resolve", description="Share link resolution")


@resolve_ns.route("/<string:image_id>")
@resolve_ns.param("image_id", "The image identifier")
class Resolve(Resource):
    """Resolve a share link"""

    @resolve_ns.doc("resolve_image")
    @resolve_ns.response(302, "Redirect to a signed URL")
    @resolve_ns.response(404, "Image Not Found", error_response)
    @resolve_ns.response(503, "Service Unavailable", error_response)
    def get(self, image_id):
        """
        Resolve an image id to a short-lived signed URL

        A new URL is minted on every call; nothing is cached.
        """
        return resolve_redirect(image_id)


# =============================================================================
# Blobs Namespace - Signed blob access for the local storage backend
# =============================================================================

blobs_ns = Namespace("blobs", description="Signed blob access (local storage backend)")


@blobs_ns.route("/<path:storage_path>")
@blobs_ns.param("storage_path", "Object key of the blob")
class Blob(Resource):
    """Serve a blob through a signed URL"""

    @blobs_ns.doc(
        "get_blob",
        params={"expires": "Expiry (Unix seconds)", "signature": "HMAC signature"},
    )
    @blobs_ns.response(200, "Image content")
    @blobs_ns.response(403, "Invalid Signature", error_response)
    @blobs_ns.response(404, "Blob Not Found", error_response)
    @blobs_ns.response(410, "Link Expired", error_response)
    def get(self, storage_path):
        """
        Fetch blob content using a signed URL

        Only available with the local storage backend; GCS signed URLs point
        at the bucket directly.
        """
        storage = current_app.container.resolve(IObjectStorageRepository)
        if not isinstance(storage, LocalObjectStorageRepository):
            body, status_code = create_error_response(
                ErrorCategory.IMAGE_NOT_FOUND,
                "Blob endpoint is disabled for this storage backend",
            )
            return body, status_code, NO_STORE

        try:
            data = storage.open_signed(
                storage_path,
                request.args.get("signature"),
                request.args.get("expires"),
            )
        except DomainError as e:
            body, status_code = _domain_error_response(e, "blob fetch")
            return body, status_code, NO_STORE
        except Exception as e:
            body, status_code = _unexpected_error_response(e, "blob fetch")
            return body, status_code, NO_STORE

        mimetype = mimetypes.guess_type(storage_path)[0] or "application/octet-stream"
        return Response(data, status=200, mimetype=mimetype, headers=NO_STORE)
