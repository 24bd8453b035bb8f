"""HTTP route layer."""

from bside.ui.app import create_app

__all__ = ["create_app"]
