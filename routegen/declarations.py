"""Type declaration emitter.

Renders the run's declarations (already in definition-before-use order)
as a Python module of enums, dataclasses and aliases.
"""

from __future__ import annotations

import logging
from typing import Any

from .context_builder import AliasDeclaration, Declaration, GenerationRun
from .model import Literal, ResolvedGraph
from .rendering import render
from .type_mapper import (
    ArrayType,
    EnumType,
    FieldType,
    OptionalType,
    PrimitiveType,
    RecordType,
    TypeDescriptor,
    python_annotation,
    python_literal,
)

logger = logging.getLogger(__name__)


def _unwrap(descriptor: TypeDescriptor) -> TypeDescriptor:
    if isinstance(descriptor, OptionalType):
        return descriptor.inner
    return descriptor


def default_expression(descriptor: TypeDescriptor) -> str | None:
    """Python expression for a schema default, or None when there is none."""
    inner = _unwrap(descriptor)
    if isinstance(inner, PrimitiveType) and inner.default is not None:
        return python_literal(inner.default)
    if isinstance(inner, EnumType) and inner.default is not None:
        return f"{inner.name}.{inner.case_for(inner.default).name}"
    return None


def _metadata(field: FieldType) -> dict[str, Any]:
    metadata: dict[str, Any] = {}
    if field.python_name != field.name:
        metadata["name"] = field.name
    inner = _unwrap(field.type)
    if isinstance(inner, PrimitiveType):
        metadata.update(inner.constraints())
    elif isinstance(inner, ArrayType):
        if inner.min_items is not None:
            metadata["min_items"] = inner.min_items
        if inner.unique_items is not None:
            metadata["unique_items"] = inner.unique_items
    return metadata


def _field_context(field: FieldType) -> dict[str, str]:
    default = default_expression(field.type)
    if default is None and not field.required:
        default = "None"

    metadata = _metadata(field)
    if metadata:
        args = [f"default={default}"] if default is not None else []
        pairs = ", ".join(f"{python_literal(k)}: {python_literal(v)}" for k, v in metadata.items())
        args.append(f"metadata={{{pairs}}}")
        assignment = f" = field({', '.join(args)})"
    elif default is not None:
        assignment = f" = {default}"
    else:
        assignment = ""

    return {
        "attr": field.python_name,
        "annotation": python_annotation(field.type),
        "assignment": assignment,
    }


def _case_literal(declaration: EnumType, value: Literal) -> str:
    # number enums hold float values
    if declaration.kind == "number":
        return python_literal(float(value))
    return python_literal(value)


def _declaration_context(declaration: Declaration) -> dict[str, Any]:
    if isinstance(declaration, EnumType):
        return {
            "kind": "enum",
            "name": declaration.name,
            "cases": [
                {"name": case.name, "value": _case_literal(declaration, case.value)}
                for case in declaration.cases
            ],
        }
    if isinstance(declaration, RecordType):
        return {
            "kind": "record",
            "name": declaration.name,
            "fields": [_field_context(f) for f in declaration.fields],
        }
    if isinstance(declaration, AliasDeclaration):
        return {
            "kind": "alias",
            "name": declaration.name,
            "annotation": python_annotation(declaration.target),
        }
    raise TypeError(declaration)


def build_types_context(run: GenerationRun) -> dict[str, Any]:
    """Template context for types.py.j2."""
    declarations = [_declaration_context(d) for d in run.declarations]
    fields = [f for d in declarations if d["kind"] == "record" for f in d["fields"]]
    annotations = [f["annotation"] for f in fields] + [
        d["annotation"] for d in declarations if d["kind"] == "alias"
    ]
    return {
        "title": run.graph.title,
        "version": run.graph.version,
        "declarations": declarations,
        "uses_enum": any(d["kind"] == "enum" for d in declarations),
        "uses_dataclass": any(d["kind"] == "record" for d in declarations),
        "uses_field": any(f["assignment"].startswith(" = field(") for f in fields),
        "uses_optional": any("Optional[" in a for a in annotations),
    }


def emit_types(graph: ResolvedGraph, run: GenerationRun | None = None) -> str:
    """Emit the type declarations module for a resolved graph."""
    if run is None:
        run = GenerationRun(graph)
    context = build_types_context(run)
    logger.info("Emitting %d type declarations", len(context["declarations"]))
    return render("types.py.j2", **context)
