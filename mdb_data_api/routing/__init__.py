"""
HTTP routing for the Data API.
"""

from .app import create_app
from .routes import dispatch_action, router, validate_envelope

__all__ = ["create_app", "dispatch_action", "router", "validate_envelope"]
