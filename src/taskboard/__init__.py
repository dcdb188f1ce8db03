"""Task management service: task store, REST API, and client view state."""

__version__ = "0.1.0"
