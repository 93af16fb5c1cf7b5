"""
Custom exceptions for the typegraph engine.

Two tiers:
- StructuralError and its subclasses abort the whole request.
- ResolverError describes a single field whose resolver failed; the
  request continues and the field resolves to null.
"""

from __future__ import annotations

from typing import Optional


class TypegraphError(Exception):
    """Base exception for all typegraph errors."""
    pass


class SpecError(TypegraphError):
    """Raised when a spec registry is built from invalid definitions."""
    pass


class StructuralError(TypegraphError):
    """Raised when a request cannot be resolved at all."""

    tag = "processingError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CallShapeError(StructuralError):
    """Raised when a call tree is malformed or names an unknown call."""
    pass


class ArgumentError(StructuralError):
    """Raised when call arguments do not match the field's contract."""

    def __init__(self, call_name: str, message: str, arg_name: Optional[str] = None):
        self.call_name = call_name
        self.arg_name = arg_name
        super().__init__(message)


class ResultError(StructuralError):
    """Raised when resolver output does not match the declared type."""

    def __init__(self, call_name: str, message: str):
        self.call_name = call_name
        super().__init__(message)


class ConditionError(StructuralError):
    """Raised when a ::when block carries a malformed condition set."""
    pass


class RequestTimeoutError(StructuralError):
    """Raised when the host-imposed request timeout fires."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Request timed out after {timeout:g}s.")


class ResolverError(TypegraphError):
    """A resolver raised; recorded in the error log instead of propagating."""

    def __init__(self, call_name: str, original: BaseException):
        self.call_name = call_name
        self.original = original
        super().__init__(error_message(original))


def error_message(exc: BaseException) -> str:
    """Message reported to clients for a failed resolver."""
    message = str(exc)
    return message if message else exc.__class__.__name__
