"""
Unit tests for API error mapping.

Tests that domain errors raised by application services map to the right
HTTP status codes and that error responses have the correct JSON structure.
Services are mocked through the app's dependency container.
"""

import io
from unittest.mock import Mock

import pytest
from flask import Flask

from qrshare.api.short_links import short_links_bp
from qrshare.api.v1 import api_v1_bp
from qrshare.application.image_service import ImageService
from qrshare.application.resolution_service import ResolutionService
from qrshare.application.results import ResolutionResult
from qrshare.application.upload_service import UploadService
from qrshare.domain.errors import (
    BlobNotFoundError,
    ForbiddenError,
    ImageNotFoundError,
    StoreUnavailableError,
    ValidationError,
    ValidationReason,
)
from qrshare.domain.image_links.signed_url_service import SignedUrl
from qrshare.domain.image_links.storage_repository import IObjectStorageRepository

from tests.fixtures.assertion_helpers import assert_error_response
from tests.fixtures.mock_repositories import FakeClock


@pytest.fixture
def services():
    """Mocked application services keyed by type."""
    resolution_service = Mock(spec=ResolutionService)
    resolution_service.clock = FakeClock()
    return {
        UploadService: Mock(spec=UploadService),
        ImageService: Mock(spec=ImageService),
        ResolutionService: resolution_service,
        IObjectStorageRepository: Mock(spec=IObjectStorageRepository),
    }


@pytest.fixture
def flask_app(services):
    """Create Flask app with the API blueprints and a mocked container."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.register_blueprint(api_v1_bp)
    app.register_blueprint(short_links_bp)

    container = Mock()
    container.resolve.side_effect = lambda cls: services[cls]
    app.container = container
    return app


@pytest.fixture
def client(flask_app):
    """Create test client."""
    return flask_app.test_client()


def _upload(client, owner_id="u1", content_type="image/jpeg"):
    return client.post(
        "/api/v1/images/",
        data={"owner_id": owner_id, "file": (io.BytesIO(b"\xff\xd8\xff\xe0data"), "a.jpg", content_type)},
        content_type="multipart/form-data",
    )


class TestUploadErrorMapping:
    @pytest.mark.parametrize(
        "reason,status,category",
        [
            (ValidationReason.UNSUPPORTED_TYPE, 415, "unsupported_type"),
            (ValidationReason.TOO_LARGE, 413, "file_too_large"),
            (ValidationReason.INVALID_REQUEST, 400, "invalid_request"),
        ],
    )
    def test_validation_errors(self, client, services, reason, status, category):
        services[UploadService].upload.side_effect = ValidationError(reason)

        response = _upload(client)

        assert response.status_code == status
        assert_error_response(response.get_json(), category)

    def test_store_unavailable_is_503(self, client, services):
        services[UploadService].upload.side_effect = StoreUnavailableError("down")

        response = _upload(client)

        assert response.status_code == 503
        assert_error_response(response.get_json(), "store_unavailable")

    def test_unexpected_error_is_500(self, client, services):
        services[UploadService].upload.side_effect = RuntimeError("bug")

        response = _upload(client)

        assert response.status_code == 500
        assert_error_response(response.get_json(), "system_error")

    def test_missing_file_is_400(self, client, services):
        response = client.post(
            "/api/v1/images/", data={"owner_id": "u1"}, content_type="multipart/form-data"
        )

        assert response.status_code == 400
        assert_error_response(response.get_json(), "invalid_request")
        services[UploadService].upload.assert_not_called()

    def test_passes_part_content_type_and_size(self, client, services):
        services[UploadService].upload.side_effect = StoreUnavailableError("down")

        _upload(client, content_type="image/png")

        args, kwargs = services[UploadService].upload.call_args
        assert args[0] == "u1"
        assert args[2] == "image/png"
        assert kwargs["declared_size"] == len(args[1])
        assert kwargs["filename"] == "a.jpg"


class TestOwnerEndpointsErrorMapping:
    def test_list_requires_owner(self, client):
        response = client.get("/api/v1/images/")

        assert response.status_code == 400
        assert_error_response(response.get_json(), "invalid_request")

    def test_delete_forbidden(self, client, services):
        services[ImageService].delete_image.side_effect = ForbiddenError("img1", "u2")

        response = client.delete("/api/v1/images/img1?owner_id=u2")

        assert response.status_code == 403
        assert_error_response(response.get_json(), "forbidden")

    def test_delete_not_found(self, client, services):
        services[ImageService].delete_image.side_effect = ImageNotFoundError("img1")

        response = client.delete("/api/v1/images/img1?owner_id=u1")

        assert response.status_code == 404
        assert_error_response(response.get_json(), "image_not_found")

    def test_delete_success_is_204(self, client, services):
        response = client.delete("/api/v1/images/img1?owner_id=u1")

        assert response.status_code == 204
        services[ImageService].delete_image.assert_called_once_with("img1", "u1")

    def test_owner_access_missing_blob_is_404(self, client, services):
        services[ResolutionService].get_owner_access_url.side_effect = BlobNotFoundError("u1/a.jpg")

        response = client.get("/api/v1/images/img1/access?owner_id=u1")

        assert response.status_code == 404


class TestResolveMapping:
    @pytest.mark.parametrize("path", ["/i/img1", "/api/v1/resolve/img1"])
    def test_found_redirects_without_caching(self, client, services, path):
        signed = SignedUrl(
            url="https://storage.test/u1/a.jpg?sig=1",
            storage_path="u1/a.jpg",
            expires_at=FakeClock()(),
        )
        services[ResolutionService].get_access_url.return_value = ResolutionResult.found("img1", signed)

        response = client.get(path)

        assert response.status_code == 302
        assert response.headers["Location"] == signed.url
        assert response.headers["Cache-Control"] == "no-store"

    @pytest.mark.parametrize("path", ["/i/img1", "/api/v1/resolve/img1"])
    def test_not_found_is_404_json(self, client, services, path):
        services[ResolutionService].get_access_url.return_value = ResolutionResult.not_found("img1")

        response = client.get(path)

        assert response.status_code == 404
        assert response.headers["Cache-Control"] == "no-store"
        assert_error_response(response.get_json(), "image_not_found")

    def test_store_unavailable_is_503(self, client, services):
        services[ResolutionService].get_access_url.side_effect = StoreUnavailableError("down")

        response = client.get("/i/img1")

        assert response.status_code == 503
        assert_error_response(response.get_json(), "store_unavailable")


class TestBlobEndpoint:
    def test_disabled_for_non_local_storage(self, client):
        response = client.get("/api/v1/blobs/u1/a.jpg?expires=1&signature=abc")

        assert response.status_code == 404
        assert_error_response(response.get_json(), "image_not_found")
