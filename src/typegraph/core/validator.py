"""
Argument and result validation.

Checks call arguments against a field's argument contract and resolver
output against the field's declared type. Every failure raises a
StructuralError subclass; nothing here is recoverable per field.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .defs import TypeDescriptor
from .errors import ArgumentError, ResultError
from .registry import SpecRegistry


def matches_native_type(value: Any, type_name: str) -> bool:
    """
    Exact runtime type test for a native type name.

    bool is a subclass of int in Python, so it is excluded from Number.
    """
    if type_name == "String":
        return isinstance(value, str)
    if type_name == "Boolean":
        return isinstance(value, bool)
    if type_name == "Number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_name == "Object":
        return isinstance(value, dict)
    return False


def python_type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def validate_args(
    call_name: str,
    args: Optional[Mapping[str, Any]],
    contract: Optional[Mapping[str, TypeDescriptor]],
) -> None:
    """
    Check supplied arguments against a field's contract.

    Raises:
        ArgumentError: On the first mismatch found
    """
    if not contract:
        if args:
            raise ArgumentError(call_name, f'Unexpected arguments provided for field "{call_name}".')
        return

    if not isinstance(args, dict):
        raise ArgumentError(
            call_name,
            f'Arguments for field "{call_name}" are missing or were not provided as an object.',
        )

    for arg_name in args:
        if arg_name not in contract:
            raise ArgumentError(
                call_name, f'Unexpected argument "{arg_name}" for field "{call_name}".', arg_name
            )

    for arg_name, descriptor in contract.items():
        if arg_name not in args:
            raise ArgumentError(
                call_name, f'Missing expected argument "{arg_name}" for field "{call_name}".', arg_name
            )

        value = args[arg_name]
        if value is None:
            if descriptor.is_required:
                raise ArgumentError(
                    call_name, f'Argument "{arg_name}" for field "{call_name}" can not be null.', arg_name
                )
            continue

        if descriptor.is_array:
            if not isinstance(value, list):
                raise ArgumentError(
                    call_name, f'Argument "{arg_name}" for field "{call_name}" must be an array.', arg_name
                )
            for item in value:
                if item is None and not descriptor.is_required:
                    continue
                if not matches_native_type(item, descriptor.name):
                    raise ArgumentError(
                        call_name,
                        f'An item of argument "{arg_name}" for field "{call_name}" '
                        f'does not match type "{descriptor.name}".',
                        arg_name,
                    )
            continue

        if not matches_native_type(value, descriptor.name):
            raise ArgumentError(
                call_name,
                f'Argument "{arg_name}" for field "{call_name}" does not match expected type '
                f'"{descriptor.name}" (got {python_type_name(value)}).',
                arg_name,
            )


def validate_native_result(
    call_name: str,
    data: Any,
    descriptor: TypeDescriptor,
    children_requested: bool,
) -> None:
    """
    Check resolver output for a native-typed field.

    Raises:
        ResultError: If children were requested or the data does not match
    """
    if children_requested:
        raise ResultError(call_name, f'You can not request child data on native type field "{call_name}".')

    if data is None:
        if descriptor.is_required:
            raise ResultError(call_name, f'Field "{call_name}" can not return null for required type "{descriptor}".')
        return

    if descriptor.is_array:
        if not isinstance(data, list):
            raise ResultError(
                call_name,
                f'Field "{call_name}" expected data in the form of an array '
                f'but got "{python_type_name(data)}" instead.',
            )
        for item in data:
            if item is None and not descriptor.is_required:
                continue
            if not matches_native_type(item, descriptor.name):
                raise ResultError(
                    call_name,
                    f'An item in the data array of field "{call_name}" '
                    f'did not match native type "{descriptor.name}".',
                )
        return

    if not matches_native_type(data, descriptor.name):
        raise ResultError(
            call_name,
            f'Data type "{python_type_name(data)}" of field "{call_name}" '
            f'does not match expected type "{descriptor.name}".',
        )


def validate_custom_type(call_name: str, descriptor: TypeDescriptor, registry: SpecRegistry) -> None:
    """
    Check that a custom type named by a field exists.

    Raises:
        ResultError: If the type is not defined
    """
    if not registry.has_type(descriptor.name):
        raise ResultError(call_name, f'Type name "{descriptor.name}" is not defined.')


def validate_custom_result(
    call_name: str,
    data: Any,
    descriptor: TypeDescriptor,
    children_requested: bool,
) -> None:
    """
    Check resolver output for a custom-typed field.

    Raises:
        ResultError: If no children were requested or the data has the wrong shape
    """
    if not children_requested:
        raise ResultError(
            call_name, f'Queries on custom type field "{call_name}" require identifying children.'
        )

    if data is None:
        if descriptor.is_required:
            raise ResultError(call_name, f'Field "{call_name}" can not return null for required type "{descriptor}".')
        return

    if descriptor.is_array:
        if not isinstance(data, list):
            raise ResultError(
                call_name,
                f'Field "{call_name}" expected data in the form of an array '
                f'but got "{python_type_name(data)}" instead.',
            )
        if descriptor.is_required and any(item is None for item in data):
            raise ResultError(call_name, f'An item in the data array of field "{call_name}" is null.')
