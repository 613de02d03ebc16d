"""Generator error taxonomy.

Every error is fatal: components raise, nothing in the pipeline catches,
and the CLI reports the message and exits non-zero.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for all generation failures.

    ``name`` is the offending schema/parameter/operation/method,
    ``location`` where it was found (a path, operation or schema name).
    """

    def __init__(self, message: str, name: str | None = None, location: str | None = None) -> None:
        self.name = name
        self.location = location
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)


class UnresolvedReferenceError(GeneratorError):
    """A $ref names a schema that is not declared in components.schemas."""

    def __init__(self, target: str, location: str | None = None) -> None:
        super().__init__(f"Unresolved schema reference {target!r}", target, location)


class CyclicSchemaError(GeneratorError):
    """A reference cycle other than list recursion through array items."""

    def __init__(self, cycle: list[str], location: str | None = None) -> None:
        self.cycle = list(cycle)
        super().__init__(f"Cyclic schema reference: {' -> '.join(cycle)}", cycle[-1], location)


class UnsupportedSchemaError(GeneratorError):
    """A schema keyword, shape or constraint combination outside the supported set."""

    def __init__(self, reason: str, name: str | None = None, location: str | None = None) -> None:
        super().__init__(f"Unsupported schema: {reason}", name, location)


class ParameterMismatchError(GeneratorError):
    """A path placeholder without a matching path parameter, or vice versa."""

    def __init__(self, parameter: str, reason: str, location: str | None = None) -> None:
        super().__init__(f"Path parameter {parameter!r} {reason}", parameter, location)


class TemplateError(GeneratorError):
    """A malformed path template (unbalanced braces, empty placeholder)."""

    def __init__(self, template: str, reason: str) -> None:
        super().__init__(f"Invalid path template {template!r}: {reason}", template)


class DuplicateOperationError(GeneratorError):
    """Two operations share one operationId."""

    def __init__(self, operation_id: str, first: str, second: str) -> None:
        super().__init__(
            f"Duplicate operationId {operation_id!r} used by {first} and {second}",
            operation_id,
        )


class InvalidMethodError(GeneratorError):
    """A path item key that is neither an HTTP method nor a path item keyword."""

    def __init__(self, method: str, path: str, reason: str = "is not a supported HTTP method") -> None:
        super().__init__(f"Method {method!r} {reason}", method, path)
