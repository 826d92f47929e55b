"""Command-line interface for HomeSphere.

Provides commands for signing in, browsing listings, managing favorites
and reviews, and contacting support.
"""

from .main import cli, main

__all__ = ["cli", "main"]
