"""HTTP API for the dashboard frontend."""

from netdash.api.app import create_app

__all__ = ["create_app"]
