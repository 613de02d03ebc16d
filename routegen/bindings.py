"""Route binding emitter.

One registration per operation. The handler passes path parameters in
template order, then query parameters in declared order, each wrapped in
a conversion call typed from the parameter's schema:

  def handle_get_item(ctx):
      return service.get_item(parse(int, ctx.get_path_parameter("id")))

  router.register("get", "/items/:id", handle_get_item)
"""

from __future__ import annotations

import keyword
import logging
from typing import Any

from .context_builder import GenerationRun
from .declarations import default_expression
from .errors import DuplicateOperationError, UnsupportedSchemaError
from .model import Operation, Parameter, ResolvedGraph
from .naming import python_name
from .path_template import CompiledPath, compile_path
from .rendering import render
from .type_mapper import (
    ArrayType,
    EnumType,
    PrimitiveType,
    TypeDescriptor,
    named_types,
    python_annotation,
    python_literal,
)

logger = logging.getLogger(__name__)

# Separator of explode=false array values
ARRAY_SEPARATOR = ","

_ACCESSORS = {
    "path": "get_path_parameter",
    "query": "get_query_parameter",
}


def dispatch_name(operation_id: str) -> str:
    """Service method name for an operation id; kept verbatim when it is an identifier."""
    if operation_id.isidentifier() and not keyword.iskeyword(operation_id):
        return operation_id
    return python_name(operation_id)


def _conversion_target(descriptor: TypeDescriptor, param: Parameter, operation: Operation) -> str:
    if isinstance(descriptor, (PrimitiveType, EnumType)):
        return python_annotation(descriptor)
    raise UnsupportedSchemaError(
        f"{param.location} parameter of type {python_annotation(descriptor)} cannot be read from a single string",
        param.name,
        operation.label,
    )


def _argument_expression(descriptor: TypeDescriptor, param: Parameter, operation: Operation) -> str:
    raw = f"ctx.{_ACCESSORS[param.location]}({python_literal(param.name)})"

    if isinstance(descriptor, ArrayType):
        if param.location == "query" and param.explode:
            raise UnsupportedSchemaError(
                "array query parameter must be declared explode: false",
                param.name,
                operation.label,
            )
        target = _conversion_target(descriptor.item, param, operation)
        return f"parse_array({target}, split({raw}, {python_literal(ARRAY_SEPARATOR)}))"

    target = _conversion_target(descriptor, param, operation)
    default = default_expression(descriptor)
    if default is not None:
        return f"parse({target}, {raw}, default={default})"
    return f"parse({target}, {raw})"


def _docstring(summary: str) -> str:
    """Collapse a summary into one line that is safe inside triple quotes."""
    return " ".join(summary.split()).replace("\\", "\\\\").replace('"', "'")


def bound_parameters(operation: Operation, compiled: CompiledPath) -> list[Parameter]:
    """Parameters passed to the service: path in template order, then query in declared order."""
    path_params = {p.name: p for p in operation.parameters if p.location == "path"}
    ordered = [path_params[name] for name in compiled.param_names]
    ordered.extend(p for p in operation.parameters if p.location == "query")
    return ordered


def _arguments(operation: Operation, compiled: CompiledPath, run: GenerationRun) -> list[dict[str, str]]:
    arguments = []
    seen: set[str] = {"self"}
    for param in bound_parameters(operation, compiled):
        argument = python_name(param.name)
        if argument == "self":
            argument = "self_"
        if argument in seen:
            raise UnsupportedSchemaError(
                f"parameters collide on argument {argument!r}", param.name, operation.label,
            )
        seen.add(argument)

        descriptor = run.parameter_type(operation, param)
        annotation = python_annotation(descriptor)
        if not param.required:
            annotation = f"Optional[{annotation}]"
        arguments.append({
            "name": param.name,
            "python_name": argument,
            "annotation": annotation,
            "expression": _argument_expression(descriptor, param, operation),
        })
    return arguments


def emit_binding(operation: Operation, compiled: CompiledPath, run: GenerationRun) -> str:
    """Emit the registration statement (and handler) for one operation."""
    return render(
        "binding.py.j2",
        method=python_literal(operation.method),
        path=python_literal(compiled.path),
        name=dispatch_name(operation.operation_id),
        arguments=_arguments(operation, compiled, run),
    )


def build_bindings_context(graph: ResolvedGraph, run: GenerationRun) -> dict[str, Any]:
    """Template context for bindings.py.j2."""
    claimed: dict[str, Operation] = {}
    operations: list[dict[str, Any]] = []
    imports: list[str] = []

    for operation in graph.operations():
        name = dispatch_name(operation.operation_id)
        if name in claimed:
            raise DuplicateOperationError(operation.operation_id, claimed[name].label, operation.label)
        claimed[name] = operation

        compiled = compile_path(operation.path, operation.parameters)
        for param in bound_parameters(operation, compiled):
            for named in named_types(run.parameter_type(operation, param)):
                if named.name not in imports:
                    imports.append(named.name)

        operations.append({
            "name": name,
            "summary": _docstring(operation.summary),
            "arguments": _arguments(operation, compiled, run),
            "registration": emit_binding(operation, compiled, run).rstrip("\n"),
        })
        logger.debug("Bound %s to %s", operation.label, name)

    return {
        "title": graph.title,
        "version": graph.version,
        "types_module": run.types_module,
        "type_imports": imports,
        "operations": operations,
        "uses_optional": any(
            arg["annotation"].startswith("Optional[")
            for op in operations
            for arg in op["arguments"]
        ),
    }


def emit_bindings(graph: ResolvedGraph, run: GenerationRun | None = None) -> str:
    """Emit the route bindings module: Service protocol plus register_routes()."""
    if run is None:
        run = GenerationRun(graph)
    context = build_bindings_context(graph, run)
    logger.info("Emitting %d route bindings", len(context["operations"]))
    return render("bindings.py.j2", **context)
