"""Configuration for external services (database, Google Cloud Storage)."""
