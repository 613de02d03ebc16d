"""Per-run generation context shared by both emitters.

A GenerationRun maps every component schema and every parameter once,
assigns type names, and orders declarations so each type is declared
before the first declaration that uses it. The emitters only read it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .errors import UnsupportedSchemaError
from .model import Operation, Parameter, ResolvedGraph, SchemaNode
from .naming import type_name
from .type_mapper import EnumType, RecordType, TypeDescriptor, map_type, named_types

logger = logging.getLogger(__name__)

# Module the generated bindings import declared types from
DEFAULT_TYPES_MODULE = "models"


@dataclass(frozen=True)
class AliasDeclaration:
    """A named schema that is not itself an enum or record (``Ids = list[str]``)."""

    name: str
    target: TypeDescriptor


Declaration = Union[EnumType, RecordType, AliasDeclaration]


class GenerationRun:
    """Everything one generator run accumulates, scoped to that run."""

    def __init__(
        self,
        graph: ResolvedGraph,
        types_module: str = DEFAULT_TYPES_MODULE,
        only_referenced: bool = False,
    ) -> None:
        self.graph = graph
        self.types_module = types_module
        self.declarations: list[Declaration] = []
        self._names: dict[str, Declaration] = {}
        self._parameter_types: dict[tuple[str, str, str, str], TypeDescriptor] = {}

        _check_type_names(graph)
        for name, node in graph.schemas:
            if only_referenced and name not in graph.referenced:
                continue
            self._declare_schema(name, node)

        for operation in graph.operations():
            for param in operation.parameters:
                key = _parameter_key(operation, param)
                self._parameter_types[key] = self._map_parameter(operation, param)

        logger.debug("Run declares %d types", len(self.declarations))

    def parameter_type(self, operation: Operation, param: Parameter) -> TypeDescriptor:
        return self._parameter_types[_parameter_key(operation, param)]

    def _declare_schema(self, name: str, node: SchemaNode) -> None:
        declared = type_name(name)
        descriptor = map_type(node, name)
        if isinstance(descriptor, (EnumType, RecordType)) and descriptor.name == declared:
            self._declare(descriptor)
            return
        for dependency in named_types(descriptor):
            self._declare(dependency)
        self._register(AliasDeclaration(declared, descriptor))

    def _declare(self, descriptor: EnumType | RecordType) -> None:
        if self._names.get(descriptor.name) == descriptor:
            return
        if isinstance(descriptor, RecordType):
            for field in descriptor.fields:
                for dependency in named_types(field.type):
                    self._declare(dependency)
        self._register(descriptor)

    def _register(self, declaration: Declaration) -> None:
        existing = self._names.get(declaration.name)
        if existing is not None and existing != declaration:
            raise UnsupportedSchemaError(
                f"type name {declaration.name!r} is claimed by two different schemas",
                declaration.name,
            )
        self._names[declaration.name] = declaration
        self.declarations.append(declaration)

    def _clashes(self, descriptor: TypeDescriptor) -> bool:
        return any(
            t.name in self._names and self._names[t.name] != t
            for t in named_types(descriptor)
        )

    def _map_parameter(self, operation: Operation, param: Parameter) -> TypeDescriptor:
        descriptor = map_type(param.schema, param.name)
        if self._clashes(descriptor):
            descriptor = map_type(param.schema, f"{operation.operation_id} {param.name}")
        for dependency in named_types(descriptor):
            self._declare(dependency)
        return descriptor


def _check_type_names(graph: ResolvedGraph) -> None:
    """Two schema keys must not sanitize to one type name."""
    claimed: dict[str, str] = {}
    for name, _ in graph.schemas:
        declared = type_name(name)
        if declared in claimed:
            raise UnsupportedSchemaError(
                f"schemas {claimed[declared]!r} and {name!r} both map to type name {declared!r}",
                name,
            )
        claimed[declared] = name


def _parameter_key(operation: Operation, param: Parameter) -> tuple[str, str, str, str]:
    return (operation.method, operation.path, param.location, param.name)
