"""
Public short-link route

Serves GET /i/<id>, the path encoded in every QR payload. It sits outside
the versioned API so printed links survive API version changes.
"""

from flask import Blueprint

from qrshare.api.v1.namespaces import resolve_redirect

short_links_bp = Blueprint("short_links", __name__)


@short_links_bp.route("/i/<string:image_id>", methods=["GET"])
def follow_short_link(image_id):
    return resolve_redirect(image_id)
