"""Resolve schema references into a reference-free graph.

Every Reference is substituted by its target, depth first, while the
chain of schema names being expanded is tracked. List recursion is the
one permitted cycle: a Reference under an Array's ``items`` whose target
can reach back to the schema holding it becomes an Indirect pointer into
the arena of named schemas. That covers direct self reference
(``Node.children: [Node]``), named lists (``Node -> NodeList -> [Node]``)
and mutual recursion through lists. Any cycle left without such an edge,
through object properties or aliases only, is a CyclicSchemaError.

The decision depends only on the schema holding the Reference, so a
schema resolves to the same node from every entry point.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterator

from .errors import CyclicSchemaError, UnresolvedReferenceError
from .loader import SCHEMA_REF_PREFIX
from .model import (
    Array,
    Document,
    Indirect,
    Object,
    Operation,
    PathItem,
    Reference,
    ResolvedGraph,
    SchemaNode,
)

logger = logging.getLogger(__name__)


class _Resolver:
    def __init__(self, schemas: dict[str, SchemaNode]) -> None:
        self._schemas = schemas
        self._reachable: dict[str, frozenset[str]] = {}

    def expand(
        self,
        node: SchemaNode,
        chain: tuple[str, ...],
        location: str,
        in_items: bool = False,
    ) -> SchemaNode:
        if isinstance(node, Reference):
            return self._expand_reference(node.target, chain, location, in_items)
        if isinstance(node, Array):
            items = self.expand(node.items, chain, f"{location}/items", in_items=True)
            return dataclasses.replace(node, items=items)
        if isinstance(node, Object):
            properties = tuple(
                (name, self.expand(prop, chain, f"{location}/{name}", in_items))
                for name, prop in node.properties
            )
            return dataclasses.replace(node, properties=properties)
        return node

    def reachable(self, name: str) -> frozenset[str]:
        """Schema names reachable from ``name`` through any Reference."""
        if name not in self._reachable:
            seen: set[str] = set()
            pending = list(_references(self._schemas[name]))
            while pending:
                target = pending.pop()
                if target in seen or target not in self._schemas:
                    continue
                seen.add(target)
                pending.extend(_references(self._schemas[target]))
            self._reachable[name] = frozenset(seen)
        return self._reachable[name]

    def _expand_reference(
        self,
        target: str,
        chain: tuple[str, ...],
        location: str,
        in_items: bool,
    ) -> SchemaNode:
        if target not in self._schemas:
            raise UnresolvedReferenceError(target, location)
        if in_items and chain and chain[-1] in self.reachable(target):
            return Indirect(target)
        if target in chain:
            cycle = list(chain[chain.index(target):]) + [target]
            raise CyclicSchemaError(cycle, location)

        resolved = self.expand(
            self._schemas[target],
            chain + (target,),
            f"{SCHEMA_REF_PREFIX}{target}",
        )
        if isinstance(resolved, Indirect) or resolved.name is not None:
            # Alias of another named schema keeps the innermost name
            return resolved
        return dataclasses.replace(resolved, name=target)


def _references(node: SchemaNode) -> Iterator[str]:
    """Yield Reference targets under an unresolved node, in order."""
    if isinstance(node, Reference):
        yield node.target
    elif isinstance(node, Array):
        yield from _references(node.items)
    elif isinstance(node, Object):
        for _, prop in node.properties:
            yield from _references(prop)


def _referenced_closure(document: Document, schemas: dict[str, SchemaNode]) -> tuple[str, ...]:
    """Component schemas reachable from any operation, in discovery order."""
    pending: list[str] = []
    for operation in document.operations():
        pending.extend(operation.schema_refs)
        for param in operation.parameters:
            pending.extend(_references(param.schema))

    seen: list[str] = []
    while pending:
        name = pending.pop(0)
        if name in seen:
            continue
        if name not in schemas:
            raise UnresolvedReferenceError(name)
        seen.append(name)
        pending.extend(_references(schemas[name]))
    return tuple(seen)


def _resolve_operation(resolver: _Resolver, operation: Operation) -> Operation:
    parameters = tuple(
        dataclasses.replace(
            param,
            schema=resolver.expand(param.schema, (), f"{operation.label} parameter {param.name}"),
        )
        for param in operation.parameters
    )
    for name in operation.schema_refs:
        resolver.expand(Reference(name), (), operation.label)
    return dataclasses.replace(operation, parameters=parameters)


def resolve(document: Document) -> ResolvedGraph:
    """Resolve every reference in the document.

    The input Document is not modified; a new graph is returned.
    """
    lookup = dict(document.schemas)
    resolver = _Resolver(lookup)

    schemas: list[tuple[str, SchemaNode]] = []
    for name, _ in document.schemas:
        schemas.append((name, resolver.expand(Reference(name), (), f"{SCHEMA_REF_PREFIX}{name}")))
        logger.debug("Resolved schema %s", name)

    paths = tuple(
        PathItem(
            path=item.path,
            operations=tuple(_resolve_operation(resolver, op) for op in item.operations),
        )
        for item in document.paths
    )

    graph = ResolvedGraph(
        title=document.title,
        version=document.version,
        paths=paths,
        schemas=tuple(schemas),
        referenced=_referenced_closure(document, lookup),
    )
    logger.debug("Resolved %d schemas, %d referenced by operations", len(schemas), len(graph.referenced))
    return graph

