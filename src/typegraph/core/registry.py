"""
Spec registry - the declared types and root queries of a graph.

Hosts describe their graph with two tables of the same per-field shape:

    types = {
        "Person": {
            "id": {"type": "String!", "resolve": lambda info: info.data["id"]},
            "friends": {"type": ["Person!"], "resolve": load_friends},
        },
    }
    queries = {
        "viewer": {
            "type": "Person!",
            "expect": {"token": "String!"},
            "resolve": load_viewer,
        },
    }

    registry = SpecRegistry.from_dicts(types, queries)

Or incrementally:

    builder = SpecBuilder()
    builder.add_field("Person", "id", "String!", resolve_id)
    builder.add_query("viewer", "Person!", load_viewer, expect={"token": "String!"})
    registry = builder.build()

A built registry is read-only and safe to share across requests.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from .defs import (
    FieldDef,
    RawType,
    Resolver,
    TypeDescriptor,
    build_type_descriptor,
    is_valid_type_token,
)
from .errors import SpecError

logger = logging.getLogger(__name__)

# Name of the type chunk holding the entry points
ROOT = "Root"

TypeChunk = Mapping[str, FieldDef]


class SpecRegistry:
    """
    Immutable mapping of type name -> field name -> FieldDef.

    The root queries live under ROOT and are also available as `root`.
    """

    def __init__(self, types: Mapping[str, TypeChunk], root: TypeChunk):
        self._types = MappingProxyType({
            name: MappingProxyType(dict(chunk)) for name, chunk in types.items()
        })
        self._root = MappingProxyType(dict(root))

    @classmethod
    def from_dicts(
        cls,
        types: Optional[Mapping[str, Mapping[str, Any]]],
        queries: Mapping[str, Any],
        *,
        check_references: bool = True,
    ) -> SpecRegistry:
        """
        Build a registry from host tables.

        Args:
            types: Custom type name -> field name -> field dict
            queries: Root field name -> field dict
            check_references: Fail when a field names an undefined custom type

        Raises:
            SpecError: If any definition is malformed
        """
        if types is None:
            raise SpecError("A spec requires a custom types table")
        if queries is None:
            raise SpecError("A spec requires a queries table")

        builder = SpecBuilder()
        for type_name, fields in types.items():
            builder.add_type(type_name)
            for field_name, definition in fields.items():
                builder.add_field_def(type_name, field_name, definition)
        for field_name, definition in queries.items():
            builder.add_field_def(ROOT, field_name, definition)
        return builder.build(check_references=check_references)

    @property
    def root(self) -> TypeChunk:
        return self._root

    @property
    def types(self) -> Mapping[str, TypeChunk]:
        return self._types

    def has_type(self, name: str) -> bool:
        return name in self._types

    def get_type(self, name: str) -> TypeChunk:
        """Return the chunk for a type name (ROOT included)."""
        if name == ROOT:
            return self._root
        try:
            return self._types[name]
        except KeyError:
            raise SpecError(f'Type name "{name}" is not defined.') from None

    def __contains__(self, name: object) -> bool:
        return name == ROOT or name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def describe(self) -> dict[str, Any]:
        """
        JSON description of the registry.

        Example:
        {
            "types": {"Person": {"id": {"type": "String!"}}},
            "queries": {"viewer": {"type": "Person!", "expect": {"token": "String!"}}}
        }
        """
        return {
            "types": {
                type_name: {name: field.describe() for name, field in chunk.items()}
                for type_name, chunk in self._types.items()
            },
            "queries": {name: field.describe() for name, field in self._root.items()},
        }


class SpecBuilder:
    """
    Collects field definitions and builds a SpecRegistry.

    Two-phase:
    1. Register types and fields (syntax checked immediately)
    2. build() checks cross references and freezes everything
    """

    def __init__(self):
        self._types: dict[str, dict[str, FieldDef]] = {}
        self._root: dict[str, FieldDef] = {}

    def add_type(self, name: str) -> SpecBuilder:
        """Declare a custom type (fields can be added later)."""
        if not isinstance(name, str) or not name:
            raise SpecError(f"Invalid type name: {name!r}")
        if name == ROOT:
            raise SpecError(f'"{ROOT}" is reserved for the queries table')
        if build_type_descriptor(name).is_native:
            raise SpecError(f'"{name}" is a native type and cannot be redefined')
        self._types.setdefault(name, {})
        return self

    def add_field(
        self,
        type_name: str,
        field_name: str,
        type: RawType,
        resolve: Resolver,
        *,
        expect: Optional[Mapping[str, RawType]] = None,
        description: Optional[str] = None,
    ) -> SpecBuilder:
        """Add a field to a custom type (or to ROOT)."""
        chunk = self._chunk(type_name)
        if field_name in chunk:
            raise SpecError(f'Field "{field_name}" is already defined on "{type_name}"')
        chunk[field_name] = self._build_field(type_name, field_name, type, resolve, expect, description)
        return self

    def add_query(
        self,
        field_name: str,
        type: RawType,
        resolve: Resolver,
        *,
        expect: Optional[Mapping[str, RawType]] = None,
        description: Optional[str] = None,
    ) -> SpecBuilder:
        """Add a root query."""
        return self.add_field(ROOT, field_name, type, resolve, expect=expect, description=description)

    def add_field_def(self, type_name: str, field_name: str, definition: Any) -> SpecBuilder:
        """Add a field from a host dict ({"type", "expect"?, "resolve"}) or a FieldDef."""
        if isinstance(definition, FieldDef):
            chunk = self._chunk(type_name)
            chunk[field_name] = definition
            return self

        if not isinstance(definition, Mapping):
            raise SpecError(f'Definition of "{type_name}.{field_name}" must be a mapping')
        if "type" not in definition:
            raise SpecError(f'Field "{type_name}.{field_name}" is missing a type')

        return self.add_field(
            type_name,
            field_name,
            definition["type"],
            definition.get("resolve"),
            expect=definition.get("expect"),
            description=definition.get("description"),
        )

    def build(self, *, check_references: bool = True) -> SpecRegistry:
        """
        Build the immutable registry.

        Raises:
            SpecError: If check_references is set and a field names an undefined type
        """
        if check_references:
            for type_name, chunk in [(ROOT, self._root), *self._types.items()]:
                for field_name, field in chunk.items():
                    if not field.type.is_native and field.type.name not in self._types:
                        raise SpecError(
                            f'Field "{type_name}.{field_name}" references undefined type "{field.type.name}"'
                        )

        registry = SpecRegistry(self._types, self._root)
        logger.debug(
            f"Built spec registry: {len(self._types)} types, {len(self._root)} queries"
        )
        return registry

    def _chunk(self, type_name: str) -> dict[str, FieldDef]:
        if type_name == ROOT:
            return self._root
        if type_name not in self._types:
            self.add_type(type_name)
        return self._types[type_name]

    def _build_field(
        self,
        type_name: str,
        field_name: str,
        type: RawType,
        resolve: Resolver,
        expect: Optional[Mapping[str, RawType]],
        description: Optional[str],
    ) -> FieldDef:
        path = f"{type_name}.{field_name}"

        if not isinstance(field_name, str) or not field_name or field_name.startswith("::"):
            raise SpecError(f"Invalid field name: {field_name!r}")
        if not is_valid_type_token(type):
            raise SpecError(f'Field "{path}" has an invalid type token: {type!r}')
        if not callable(resolve):
            raise SpecError(f'Field "{path}" requires a callable resolve function')

        contract: dict[str, TypeDescriptor] = {}
        if expect is not None:
            if not isinstance(expect, Mapping):
                raise SpecError(f'Arguments of "{path}" must be declared as a mapping')
            for arg_name, arg_type in expect.items():
                if not is_valid_type_token(arg_type):
                    raise SpecError(f'Argument "{arg_name}" of "{path}" has an invalid type token: {arg_type!r}')
                descriptor = build_type_descriptor(arg_type)
                if not descriptor.is_native:
                    raise SpecError(
                        f'Argument "{arg_name}" of "{path}" must use a native type, got "{descriptor.name}"'
                    )
                contract[arg_name] = descriptor

        return FieldDef(
            name=field_name,
            type=build_type_descriptor(type),
            resolve=resolve,
            expect=MappingProxyType(contract),
            description=description,
        )
