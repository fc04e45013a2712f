"""HTTP API for the gateway."""
