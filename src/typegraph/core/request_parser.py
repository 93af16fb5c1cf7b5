"""
Request parser for the call-tree DSL.

Turns the JSON wire encoding into CallNode trees:

1. Leaf call:
   "id"                      -> CallNode(name="id")
   ["id"]                    -> CallNode(name="id")

2. Call with arguments:
   ["user", {"id": "1"}, "name"]

3. Nested children:
   ["viewer", "id", ["friends", "name"]]

4. Meta-operators:
   ["::compose", ["viewer", "id"], "fauxCall"]
   ["::when", {"eql": ["isAdmin", true]}, "adminId"]

Only shape is checked here. Whether a name exists in a type chunk is
decided by the executor, which knows the current chunk.
"""

from __future__ import annotations

import json
from typing import Any, Union
from urllib.parse import unquote

from .errors import CallShapeError
from .query_types import COMPOSE, WHEN, CallNode

RawCall = Union[str, list, tuple]


def describe_value(value: Any) -> str:
    """Short rendering of a value for error messages."""
    try:
        text = json.dumps(value)
    except (TypeError, ValueError):
        text = repr(value)
    return text if len(text) <= 60 else f"{text[:57]}..."


class RequestParser:
    """
    Parser for call trees in their JSON form.

    Usage:
        parser = RequestParser()
        node = parser.parse(["viewer", "id"])
    """

    def parse(self, raw: Any) -> CallNode:
        """
        Parse a raw call tree (already JSON-decoded).

        Raises:
            CallShapeError: If the tree is not a well-formed call
        """
        if not isinstance(raw, (list, tuple)):
            raise CallShapeError(f"The value {describe_value(raw)} must be an array.")
        return self._parse_call(raw)

    def parse_child(self, raw: Any) -> CallNode:
        """Parse a child entry, which may also be a bare field name."""
        if isinstance(raw, str):
            self._check_call_name(raw)
            if raw == WHEN:
                raise CallShapeError(f"A {WHEN} block requires a conditions object.")
            return CallNode(name=raw)
        if isinstance(raw, (list, tuple)):
            return self._parse_call(raw)
        raise CallShapeError("Children in a graph must be strings or arrays.")

    def _parse_call(self, raw: list | tuple) -> CallNode:
        if not raw:
            raise CallShapeError("A call must not be empty.")

        name = raw[0]
        self._check_call_name(name)

        has_args = len(raw) > 1 and isinstance(raw[1], dict)
        args = raw[1] if has_args else None
        rest = raw[2:] if has_args else raw[1:]

        if name == WHEN and args is None:
            raise CallShapeError(f"A {WHEN} block requires a conditions object.")
        if name == COMPOSE and args is not None:
            raise CallShapeError(f"{COMPOSE} does not accept arguments.")

        children = [self.parse_child(child) for child in rest]
        return CallNode(name=name, args=args, children=children)

    def _check_call_name(self, name: Any) -> None:
        if not isinstance(name, str) or not name:
            raise CallShapeError(f"The value {describe_value(name)} must be a call name.")


def decode_graph(raw: Any) -> Any:
    """
    Decode a transport value into a raw call tree.

    Strings are JSON-decoded (after percent-decoding when they start with
    "%"); anything else is assumed to be decoded already.

    Raises:
        ValueError: If a string is not valid JSON
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        text = raw.strip()
        if text.startswith("%"):
            text = unquote(text)
        return json.loads(text)
    return raw


def parse_request(raw: Any) -> CallNode:
    """
    Convenience function to decode and parse a request.

    Args:
        raw: JSON text, bytes, or an already-decoded call tree

    Returns:
        CallNode
    """
    return RequestParser().parse(decode_graph(raw))
