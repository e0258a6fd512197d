"""
main.py

Flask backend for qrshare: upload images, share them through QR-encodable
links, and resolve links to short-lived signed URLs.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, SQLAlchemy,
    google-cloud-storage
  - Infrastructure: a SQL database (SQLite by default) and either a local
    blob directory or a GCS bucket

Notes:
  - API v1 endpoints available at /api/v1/ with Swagger docs at /api/v1/docs
  - Share links are served at /i/<id>
  - Uses application factory pattern for better testability
"""

import os

from app_factory import create_app

app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", 8000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    app.run(host=host, port=port, debug=debug)
