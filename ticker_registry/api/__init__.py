"""HTTP API for the ticker registry."""
