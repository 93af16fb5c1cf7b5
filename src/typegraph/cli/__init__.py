"""
typegraph CLI - Command line tools for serving and querying registries.
"""

from __future__ import annotations

from .main import app, load_registry, main

__all__ = ["main", "app", "load_registry"]
