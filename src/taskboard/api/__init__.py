"""HTTP API for the task service."""
