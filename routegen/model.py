"""Normalized document model.

Frozen dataclasses over tuples: the graph is immutable once built and
structurally comparable, so equal schemas compare (and hash) equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Closed set of HTTP methods, in emission order
HTTP_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch", "options", "head")

SCALAR_KINDS: tuple[str, ...] = ("integer", "number", "boolean", "string")

PARAMETER_LOCATIONS: tuple[str, ...] = ("path", "query", "header", "cookie")

Literal = Union[int, float, bool, str]


@dataclass(frozen=True)
class Scalar:
    kind: str
    enum: tuple[Literal, ...] = ()
    default: Literal | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    multiple_of: int | float | None = None
    unique_items: bool | None = None
    name: str | None = None


@dataclass(frozen=True)
class Array:
    items: SchemaNode
    min_items: int | None = None
    unique_items: bool | None = None
    name: str | None = None


@dataclass(frozen=True)
class Object:
    properties: tuple[tuple[str, SchemaNode], ...] = ()
    required: frozenset[str] = frozenset()
    name: str | None = None


@dataclass(frozen=True)
class Reference:
    """Unresolved pointer into components.schemas."""

    target: str


@dataclass(frozen=True)
class Indirect:
    """Resolved pointer into the schema arena (list recursion only)."""

    target: str


SchemaNode = Union[Scalar, Array, Object, Reference, Indirect]


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool
    schema: SchemaNode
    explode: bool = False


@dataclass(frozen=True)
class Operation:
    operation_id: str
    method: str
    path: str
    parameters: tuple[Parameter, ...] = ()
    summary: str = ""
    schema_refs: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return f"{self.method.upper()} {self.path}"


@dataclass(frozen=True)
class PathItem:
    path: str
    operations: tuple[Operation, ...] = ()


@dataclass(frozen=True)
class Document:
    title: str = ""
    version: str = ""
    paths: tuple[PathItem, ...] = ()
    schemas: tuple[tuple[str, SchemaNode], ...] = ()

    def operations(self) -> list[Operation]:
        return [op for item in self.paths for op in item.operations]


@dataclass(frozen=True)
class ResolvedGraph:
    """Reference-free view of a Document.

    ``schemas`` is the arena every ``Indirect`` points into;
    ``referenced`` lists the component schemas reachable from operations.
    """

    title: str
    version: str
    paths: tuple[PathItem, ...]
    schemas: tuple[tuple[str, SchemaNode], ...]
    referenced: tuple[str, ...] = field(default=())

    def operations(self) -> list[Operation]:
        return [op for item in self.paths for op in item.operations]
