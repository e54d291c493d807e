"""HTTP API for healthtrack."""

from healthtrack.api.server import APIServer, create_app

__all__ = ["APIServer", "create_app"]
