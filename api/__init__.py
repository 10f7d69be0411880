"""HTTP transport for the money spender."""

from .app import create_app

__all__ = ["create_app"]
