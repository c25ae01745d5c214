"""
Web application front-end for pocket-calc.

Provides the calculator page and its JSON API.
"""

from .server import create_app

__all__ = ["create_app"]
