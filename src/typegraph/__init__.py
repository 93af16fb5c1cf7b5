"""
typegraph - typed call-tree query engine.

Clients send nested call trees; the engine validates them against declared
types, runs host resolvers concurrently, validates their output, and
returns partial results when individual resolvers fail.

Usage:
    from typegraph import SpecRegistry, handle_graph

    types = {
        "Person": {
            "id": {"type": "String", "resolve": lambda info: info.data["id"]},
        },
    }
    queries = {
        "viewer": {"type": "Person!", "resolve": load_viewer},
    }
    registry = SpecRegistry.from_dicts(types, queries)

    await handle_graph(["viewer", "id"], registry)
    # {"data": {"viewer": {"id": "123"}}}

Serving over HTTP:
    from typegraph import GraphApp
    app = GraphApp(registry).app
"""

from __future__ import annotations

from .api import create_graph_router
from .app import GraphApp, create_app
from .config import Settings, load_settings
from .core import (
    COMPOSE,
    NATIVE_TYPES,
    ROOT,
    WHEN,
    ArgumentError,
    CallNode,
    CallShapeError,
    ConditionError,
    FieldDef,
    RequestParser,
    RequestTimeoutError,
    ResolverError,
    ResultEnvelope,
    ResultError,
    SpecBuilder,
    SpecError,
    SpecRegistry,
    StructuralError,
    TypeDescriptor,
    TypegraphError,
    build_type_descriptor,
    conditions_pass,
    parse_request,
)
from .runtime import GraphExecutor, RequestContext, ResolveInfo, handle_graph

__version__ = "0.1.0"

__all__ = [
    # Definitions
    "NATIVE_TYPES",
    "TypeDescriptor",
    "FieldDef",
    "build_type_descriptor",
    # Registry
    "ROOT",
    "SpecRegistry",
    "SpecBuilder",
    # Call trees
    "COMPOSE",
    "WHEN",
    "CallNode",
    "RequestParser",
    "parse_request",
    "ResultEnvelope",
    "conditions_pass",
    # Errors
    "TypegraphError",
    "SpecError",
    "StructuralError",
    "CallShapeError",
    "ArgumentError",
    "ResultError",
    "ConditionError",
    "RequestTimeoutError",
    "ResolverError",
    # Runtime
    "GraphExecutor",
    "RequestContext",
    "ResolveInfo",
    "handle_graph",
    # Server
    "Settings",
    "load_settings",
    "create_graph_router",
    "GraphApp",
    "create_app",
]
