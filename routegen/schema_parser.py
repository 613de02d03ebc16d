"""Build the Document model from a raw OpenAPI tree.

Handles:
- Method normalization into the closed HTTP method set
- Path-item level parameters merged into each operation
- Parameter $refs into components.parameters
- Closed schema variants: scalar, array, object, $ref
- Literal kind checks for enum/default
- minItems misplaced on an array's items scalar (hoisted to the array)
- Request body / response $ref collection
- operationId derivation when missing
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import InvalidMethodError, UnsupportedSchemaError
from .loader import SCHEMA_REF_PREFIX, get_paths, get_schemas, ref_name, resolve_ref
from .model import (
    HTTP_METHODS,
    PARAMETER_LOCATIONS,
    SCALAR_KINDS,
    Array,
    Document,
    Object,
    Operation,
    Parameter,
    PathItem,
    Reference,
    Scalar,
    SchemaNode,
)
from .naming import build_operation_id

logger = logging.getLogger(__name__)

# Keywords carrying no type information
_ANNOTATIONS = {
    "description", "title", "format", "example", "examples", "deprecated",
    "readOnly", "writeOnly", "externalDocs", "xml",
}

_SCALAR_KEYWORDS = {"type", "enum", "default", "minimum", "maximum", "multipleOf", "uniqueItems"}
_ARRAY_KEYWORDS = {"type", "items", "minItems", "uniqueItems"}
_OBJECT_KEYWORDS = {"type", "properties", "required"}

# Path item keys that are not methods
_PATH_ITEM_KEYWORDS = {"parameters", "summary", "description", "servers"}

# Locations whose OpenAPI default style is form (explode=true)
_EXPLODED_BY_DEFAULT = {"query", "cookie"}


def _check_keywords(raw: dict[str, Any], allowed: set[str], what: str, location: str) -> None:
    for key in raw:
        if key in allowed or key in _ANNOTATIONS or key.startswith("x-"):
            continue
        raise UnsupportedSchemaError(f"keyword {key!r} on {what} schema", key, location)


def _is_kind(kind: str, value: Any) -> bool:
    """Check a literal against a scalar kind. bool is never a number."""
    if isinstance(value, bool):
        return kind == "boolean"
    if kind == "integer":
        return isinstance(value, int)
    if kind == "number":
        return isinstance(value, (int, float))
    if kind == "string":
        return isinstance(value, str)
    return False


def _number(raw: dict[str, Any], key: str, location: str) -> int | float | None:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise UnsupportedSchemaError(f"{key} must be a number, got {value!r}", key, location)
    return value


def _flag(raw: dict[str, Any], key: str, location: str) -> bool | None:
    value = raw.get(key)
    if value is not None and not isinstance(value, bool):
        raise UnsupportedSchemaError(f"{key} must be a boolean, got {value!r}", key, location)
    return value


def _schema_type(raw: dict[str, Any], location: str) -> str:
    schema_type = raw.get("type")
    if schema_type is None:
        if "properties" in raw:
            return "object"
        if "items" in raw:
            return "array"
        raise UnsupportedSchemaError("schema without a type", None, location)
    if not isinstance(schema_type, str) or schema_type not in SCALAR_KINDS + ("array", "object"):
        raise UnsupportedSchemaError(f"type {schema_type!r}", str(schema_type), location)
    return schema_type


def _parse_scalar(raw: dict[str, Any], kind: str, location: str) -> Scalar:
    _check_keywords(raw, _SCALAR_KEYWORDS, kind, location)

    enum_values: list[Any] = []
    for value in raw.get("enum") or []:
        if not _is_kind(kind, value):
            raise UnsupportedSchemaError(
                f"enum literal {value!r} is not of kind {kind}", str(value), location,
            )
        if value not in enum_values:
            enum_values.append(value)

    default = raw.get("default")
    if default is not None and not _is_kind(kind, default):
        raise UnsupportedSchemaError(
            f"default {default!r} is not of kind {kind}", str(default), location,
        )

    return Scalar(
        kind=kind,
        enum=tuple(enum_values),
        default=default,
        minimum=_number(raw, "minimum", location),
        maximum=_number(raw, "maximum", location),
        multiple_of=_number(raw, "multipleOf", location),
        unique_items=_flag(raw, "uniqueItems", location),
    )


def _parse_array(raw: dict[str, Any], location: str) -> Array:
    _check_keywords(raw, _ARRAY_KEYWORDS, "array", location)
    items = raw.get("items")
    if not isinstance(items, dict):
        raise UnsupportedSchemaError("array without an items schema", None, location)

    min_items = raw.get("minItems")
    if (
        min_items is None
        and "minItems" in items
        and "$ref" not in items
        and items.get("type") in SCALAR_KINDS
    ):
        items = dict(items)
        min_items = items.pop("minItems")
    if min_items is not None and (isinstance(min_items, bool) or not isinstance(min_items, int)):
        raise UnsupportedSchemaError(f"minItems must be an integer, got {min_items!r}", "minItems", location)

    return Array(
        items=parse_schema(items, f"{location}/items"),
        min_items=min_items,
        unique_items=_flag(raw, "uniqueItems", location),
    )


def _parse_object(raw: dict[str, Any], location: str) -> Object:
    _check_keywords(raw, _OBJECT_KEYWORDS, "object", location)
    properties = raw.get("properties") or {}
    required = raw.get("required") or []
    for name in required:
        if name not in properties:
            raise UnsupportedSchemaError(f"required property {name!r} is not declared", name, location)
    return Object(
        properties=tuple(
            (name, parse_schema(prop, f"{location}/{name}"))
            for name, prop in properties.items()
        ),
        required=frozenset(required),
    )


def parse_schema(raw: Any, location: str) -> SchemaNode:
    """Convert a raw schema dict into a SchemaNode variant."""
    if not isinstance(raw, dict):
        raise UnsupportedSchemaError(f"schema must be a mapping, got {raw!r}", None, location)

    if "$ref" in raw:
        _check_keywords(raw, {"$ref"}, "$ref", location)
        return Reference(ref_name(raw["$ref"], location))

    schema_type = _schema_type(raw, location)
    if schema_type == "array":
        return _parse_array(raw, location)
    if schema_type == "object":
        return _parse_object(raw, location)
    if "minItems" in raw:
        raise UnsupportedSchemaError(f"minItems on a {schema_type} schema", "minItems", location)
    return _parse_scalar(raw, schema_type, location)


def _parse_parameter(spec: dict[str, Any], raw: dict[str, Any], location: str) -> Parameter:
    if "$ref" in raw:
        raw = resolve_ref(spec, raw["$ref"], location)

    name = raw.get("name")
    if not name:
        raise UnsupportedSchemaError("parameter without a name", None, location)
    where = raw.get("in", "query")
    if where not in PARAMETER_LOCATIONS:
        raise UnsupportedSchemaError(f"parameter location {where!r}", name, location)
    if "schema" not in raw:
        raise UnsupportedSchemaError("parameter without a schema", name, location)

    return Parameter(
        name=name,
        location=where,
        required=bool(raw.get("required", False)),
        schema=parse_schema(raw["schema"], f"{location}/{name}"),
        explode=bool(raw.get("explode", where in _EXPLODED_BY_DEFAULT)),
    )


def parse_parameters(
    spec: dict[str, Any],
    path_level: list[dict[str, Any]],
    operation_level: list[dict[str, Any]],
    location: str,
) -> tuple[Parameter, ...]:
    """Merge path-item and operation parameters; the operation wins per (name, in)."""
    merged: dict[tuple[str, str], Parameter] = {}
    for raw in list(path_level) + list(operation_level):
        param = _parse_parameter(spec, raw, location)
        merged[(param.name, param.location)] = param
    return tuple(merged.values())


def _collect_schema_refs(spec: dict[str, Any], node: Any, location: str) -> list[str]:
    """Collect component schema names referenced anywhere under a raw node.

    Request bodies and responses are walked, not modeled. Refs to other
    components (responses, requestBodies) are followed once.
    """
    found: list[str] = []
    followed: set[str] = set()

    def walk(value: Any) -> None:
        if isinstance(value, dict):
            ref = value.get("$ref")
            if isinstance(ref, str):
                if ref.startswith(SCHEMA_REF_PREFIX):
                    name = ref_name(ref, location)
                    if name not in found:
                        found.append(name)
                elif ref not in followed:
                    followed.add(ref)
                    walk(resolve_ref(spec, ref, location))
            for key, child in value.items():
                if key != "$ref":
                    walk(child)
        elif isinstance(value, list):
            for child in value:
                walk(child)

    walk(node)
    return found


def _parse_operation(
    spec: dict[str, Any],
    path: str,
    method: str,
    raw: dict[str, Any],
    path_parameters: list[dict[str, Any]],
) -> Operation:
    label = f"{method.upper()} {path}"
    operation_id = raw.get("operationId") or build_operation_id(method, path)
    refs = _collect_schema_refs(spec, raw.get("requestBody"), label)
    for name in _collect_schema_refs(spec, raw.get("responses"), label):
        if name not in refs:
            refs.append(name)

    return Operation(
        operation_id=operation_id,
        method=method,
        path=path,
        parameters=parse_parameters(spec, path_parameters, raw.get("parameters") or [], label),
        summary=raw.get("summary", ""),
        schema_refs=tuple(refs),
    )


def _parse_path_item(spec: dict[str, Any], path: str, raw: dict[str, Any]) -> PathItem:
    operations: list[Operation] = []
    seen: set[str] = set()
    for key, value in raw.items():
        if key in _PATH_ITEM_KEYWORDS or key.startswith("x-"):
            continue
        method = key.lower()
        if method not in HTTP_METHODS:
            raise InvalidMethodError(key, path)
        if method in seen:
            raise InvalidMethodError(key, path, "is declared twice")
        seen.add(method)
        operations.append(_parse_operation(spec, path, method, value or {}, raw.get("parameters") or []))
    return PathItem(path=path, operations=tuple(operations))


def build_document(spec: dict[str, Any]) -> Document:
    """Normalize the raw tree into a Document."""
    info = spec.get("info") or {}
    paths = tuple(
        _parse_path_item(spec, path, item or {})
        for path, item in get_paths(spec).items()
    )
    schemas = tuple(
        (name, parse_schema(raw, f"{SCHEMA_REF_PREFIX}{name}"))
        for name, raw in get_schemas(spec).items()
    )
    document = Document(
        title=str(info.get("title", "")),
        version=str(info.get("version", "")),
        paths=paths,
        schemas=schemas,
    )
    logger.debug(
        "Document %r: %d paths, %d operations, %d schemas",
        document.title, len(paths), len(document.operations()), len(schemas),
    )
    return document
