"""
Core dataclass definitions for typegraph.

These describe declared return types and fields of a spec registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

# Primitive type names understood without a registry entry
NATIVE_TYPES = frozenset({"Object", "String", "Number", "Boolean"})

# Suffix marking a non-nullable type
REQUIRED_MARKER = "!"

# Raw type token as written by hosts: "Person", "String!", ["Person!"]
RawType = Union[str, list, tuple]

Resolver = Callable[..., Any]


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Normalized shape of a declared type.

    Input: ["Person!"]
    Normalized: TypeDescriptor(name="Person", is_array=True, is_required=True, is_native=False)
    """
    name: str
    is_array: bool = False
    is_required: bool = False
    is_native: bool = False

    @property
    def token(self) -> RawType:
        """Raw token this descriptor was built from."""
        name = f"{self.name}{REQUIRED_MARKER}" if self.is_required else self.name
        return [name] if self.is_array else name

    def __str__(self) -> str:
        token = self.token
        return f"[{token[0]}]" if isinstance(token, list) else token


def build_type_descriptor(raw: RawType) -> TypeDescriptor:
    """
    Normalize a raw type token into a TypeDescriptor.

    "String!"   -> name="String", is_required=True, is_native=True
    ["Person"]  -> name="Person", is_array=True
    """
    is_array = isinstance(raw, (list, tuple))
    type_name = raw[0] if is_array else raw
    is_required = type_name.endswith(REQUIRED_MARKER)
    if is_required:
        type_name = type_name[: -len(REQUIRED_MARKER)]

    return TypeDescriptor(
        name=type_name,
        is_array=is_array,
        is_required=is_required,
        is_native=type_name in NATIVE_TYPES,
    )


def is_valid_type_token(raw: Any) -> bool:
    """True for a non-empty name string or a one-element list of one."""
    if isinstance(raw, (list, tuple)):
        return len(raw) == 1 and isinstance(raw[0], str) and is_valid_type_token(raw[0])
    if not isinstance(raw, str):
        return False
    name = raw[: -len(REQUIRED_MARKER)] if raw.endswith(REQUIRED_MARKER) else raw
    return bool(name) and REQUIRED_MARKER not in name


@dataclass(frozen=True)
class FieldDef:
    """Definition of a single field (or root query) in a type chunk."""
    name: str
    type: TypeDescriptor
    resolve: Resolver
    expect: Mapping[str, TypeDescriptor] = field(default_factory=dict)
    description: Optional[str] = None

    @property
    def has_contract(self) -> bool:
        return bool(self.expect)

    def describe(self) -> dict[str, Any]:
        """JSON-friendly description used by the schema endpoint."""
        out: dict[str, Any] = {"type": self.type.token}
        if self.expect:
            out["expect"] = {name: desc.token for name, desc in self.expect.items()}
        if self.description:
            out["description"] = self.description
        return out
