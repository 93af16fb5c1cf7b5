"""
Core module - definitions, call trees, registry, and validation.
"""

from __future__ import annotations

from .conditions import COMPARISONS, conditions_pass, validate_conditions
from .defs import (
    NATIVE_TYPES,
    FieldDef,
    TypeDescriptor,
    build_type_descriptor,
    is_valid_type_token,
)
from .errors import (
    ArgumentError,
    CallShapeError,
    ConditionError,
    RequestTimeoutError,
    ResolverError,
    ResultError,
    SpecError,
    StructuralError,
    TypegraphError,
)
from .query_types import COMPOSE, META_OPERATORS, WHEN, CallNode, ResultEnvelope
from .registry import ROOT, SpecBuilder, SpecRegistry
from .request_parser import RequestParser, decode_graph, parse_request
from .validator import (
    matches_native_type,
    validate_args,
    validate_custom_result,
    validate_custom_type,
    validate_native_result,
)

__all__ = [
    # Definitions
    "NATIVE_TYPES",
    "TypeDescriptor",
    "FieldDef",
    "build_type_descriptor",
    "is_valid_type_token",
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
    # Call trees
    "COMPOSE",
    "WHEN",
    "META_OPERATORS",
    "CallNode",
    "ResultEnvelope",
    "RequestParser",
    "decode_graph",
    "parse_request",
    # Registry
    "ROOT",
    "SpecRegistry",
    "SpecBuilder",
    # Validation
    "matches_native_type",
    "validate_args",
    "validate_native_result",
    "validate_custom_type",
    "validate_custom_result",
    # Conditions
    "COMPARISONS",
    "conditions_pass",
    "validate_conditions",
]
