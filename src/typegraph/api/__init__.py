"""
API module - FastAPI endpoints.
"""

from __future__ import annotations

from .router import GraphRequestError, create_graph_router, decode_body, method_not_allowed

__all__ = [
    "create_graph_router",
    "decode_body",
    "method_not_allowed",
    "GraphRequestError",
]
