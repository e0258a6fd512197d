"""HTTP layer: versioned REST API and the public short-link route."""
