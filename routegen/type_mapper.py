"""Map resolved schema nodes to target type descriptors.

The mapper is pure: structurally equal nodes (and equal hints) always give
equal descriptors. Constraints are carried forward, never enforced; a
combination the target cannot express raises UnsupportedSchemaError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterator, Union

from .errors import UnsupportedSchemaError
from .model import Array, Indirect, Literal, Object, Reference, Scalar, SchemaNode
from .naming import enum_case_name, pascal_case, python_name, type_name

PYTHON_TYPES: dict[str, str] = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
}

_NUMERIC_KINDS = {"integer", "number"}


@dataclass(frozen=True)
class PrimitiveType:
    kind: str
    default: Literal | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    multiple_of: int | float | None = None

    def constraints(self) -> dict[str, int | float]:
        found = {
            "minimum": self.minimum,
            "maximum": self.maximum,
            "multiple_of": self.multiple_of,
        }
        return {k: v for k, v in found.items() if v is not None}


@dataclass(frozen=True)
class EnumCase:
    name: str
    value: Literal


@dataclass(frozen=True)
class EnumType:
    name: str
    kind: str
    cases: tuple[EnumCase, ...]
    default: Literal | None = None

    def case_for(self, value: Literal) -> EnumCase:
        for case in self.cases:
            if case.value == value:
                return case
        raise KeyError(value)


@dataclass(frozen=True)
class ArrayType:
    item: TypeDescriptor
    min_items: int | None = None
    unique_items: bool | None = None


@dataclass(frozen=True)
class FieldType:
    name: str
    python_name: str
    type: TypeDescriptor
    required: bool


@dataclass(frozen=True)
class RecordType:
    name: str
    fields: tuple[FieldType, ...] = ()


@dataclass(frozen=True)
class OptionalType:
    inner: TypeDescriptor


@dataclass(frozen=True)
class BoxedType:
    """Indirect member pointing at a named record (list recursion)."""

    name: str


TypeDescriptor = Union[PrimitiveType, EnumType, ArrayType, RecordType, OptionalType, BoxedType]


def _check_scalar(node: Scalar, where: str | None) -> None:
    if node.unique_items is not None:
        raise UnsupportedSchemaError(f"uniqueItems on a {node.kind} scalar", "uniqueItems", where)
    if node.kind not in _NUMERIC_KINDS:
        for key, value in (
            ("minimum", node.minimum),
            ("maximum", node.maximum),
            ("multipleOf", node.multiple_of),
        ):
            if value is not None:
                raise UnsupportedSchemaError(f"{key} on a {node.kind} scalar", key, where)
        return
    if node.multiple_of is not None and node.multiple_of <= 0:
        raise UnsupportedSchemaError(f"multipleOf {node.multiple_of} is not positive", "multipleOf", where)
    if node.minimum is not None and node.maximum is not None and node.minimum > node.maximum:
        raise UnsupportedSchemaError(
            f"minimum {node.minimum} exceeds maximum {node.maximum}", "minimum", where,
        )


def _map_enum(node: Scalar, hint: str | None) -> EnumType:
    if node.name:
        name = type_name(node.name)
    elif hint:
        name = f"{pascal_case(hint)}Enum"
    else:
        raise UnsupportedSchemaError("anonymous enumeration without a name", None, None)

    cases: list[EnumCase] = []
    seen: set[str] = set()
    for value in node.enum:
        case_name = enum_case_name(value)
        if case_name in seen:
            raise UnsupportedSchemaError(f"enum case {case_name!r} is ambiguous", case_name, name)
        seen.add(case_name)
        cases.append(EnumCase(case_name, value))

    if node.default is not None and node.default not in node.enum:
        raise UnsupportedSchemaError(f"default {node.default!r} is not an enum value", str(node.default), name)
    if node.minimum is not None or node.maximum is not None or node.multiple_of is not None:
        raise UnsupportedSchemaError("bounds on an enumeration", None, name)

    return EnumType(name=name, kind=node.kind, cases=tuple(cases), default=node.default)


def _map_object(node: Object, hint: str | None) -> RecordType:
    if node.name:
        name = type_name(node.name)
    elif hint:
        name = type_name(hint)
    else:
        raise UnsupportedSchemaError("anonymous object without a name", None, None)

    fields: list[FieldType] = []
    seen: set[str] = set()
    for prop_name, prop in node.properties:
        attr = python_name(prop_name)
        if attr in seen:
            raise UnsupportedSchemaError(f"properties collide on attribute {attr!r}", prop_name, name)
        seen.add(attr)

        field_type = map_type(prop, f"{name} {prop_name}")
        required = prop_name in node.required
        if not required:
            field_type = OptionalType(field_type)
        fields.append(FieldType(prop_name, attr, field_type, required))
    return RecordType(name=name, fields=tuple(fields))


def map_type(node: SchemaNode, hint: str | None = None) -> TypeDescriptor:
    """Map a resolved schema node to its type descriptor.

    ``hint`` names anonymous enumerations and records (parameter name, or
    enclosing record + field name).
    """
    if isinstance(node, Scalar):
        _check_scalar(node, node.name or hint)
        if node.enum:
            return _map_enum(node, hint)
        return PrimitiveType(
            kind=node.kind,
            default=node.default,
            minimum=node.minimum,
            maximum=node.maximum,
            multiple_of=node.multiple_of,
        )
    if isinstance(node, Array):
        if node.min_items is not None and node.min_items < 0:
            raise UnsupportedSchemaError(f"minItems {node.min_items} is negative", "minItems", node.name or hint)
        return ArrayType(
            item=map_type(node.items, hint),
            min_items=node.min_items,
            unique_items=node.unique_items,
        )
    if isinstance(node, Object):
        return _map_object(node, hint)
    if isinstance(node, Indirect):
        return BoxedType(type_name(node.target))
    if isinstance(node, Reference):
        raise UnsupportedSchemaError(f"unresolved reference {node.target!r} reached the type mapper", node.target, hint)
    raise UnsupportedSchemaError(f"schema node {node!r}", None, hint)


def python_annotation(descriptor: TypeDescriptor) -> str:
    """Render a descriptor as a Python type annotation."""
    if isinstance(descriptor, PrimitiveType):
        return PYTHON_TYPES[descriptor.kind]
    if isinstance(descriptor, (EnumType, RecordType)):
        return descriptor.name
    if isinstance(descriptor, ArrayType):
        return f"list[{python_annotation(descriptor.item)}]"
    if isinstance(descriptor, OptionalType):
        return f"Optional[{python_annotation(descriptor.inner)}]"
    if isinstance(descriptor, BoxedType):
        return f'"{descriptor.name}"'
    raise TypeError(descriptor)


def named_types(descriptor: TypeDescriptor) -> Iterator[EnumType | RecordType]:
    """Yield the named types a descriptor uses directly (not through BoxedType)."""
    if isinstance(descriptor, (EnumType, RecordType)):
        yield descriptor
    elif isinstance(descriptor, ArrayType):
        yield from named_types(descriptor.item)
    elif isinstance(descriptor, OptionalType):
        yield from named_types(descriptor.inner)


def python_literal(value: Literal) -> str:
    """Render a schema literal as Python source (double-quoted strings)."""
    if isinstance(value, str):
        return json.dumps(value)
    return repr(value)
