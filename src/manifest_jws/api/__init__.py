"""HTTP API for manifest verification."""
