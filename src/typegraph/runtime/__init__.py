"""
Runtime module - call-tree execution.
"""

from __future__ import annotations

from .context import NodePath, RequestContext, ResolveInfo
from .executor import PROCESSING_ERROR, GraphExecutor, handle_graph

__all__ = [
    "NodePath",
    "RequestContext",
    "ResolveInfo",
    "GraphExecutor",
    "handle_graph",
    "PROCESSING_ERROR",
]
