"""Identifier rules shared by both emitters.

  - JSON property / parameter name -> snake_case attribute:  fromPlace -> from_place
  - hint -> PascalCase type name:                             leg mode -> LegMode
  - schema key -> class name:                                 v1.Trip-Summary -> V1TripSummary
  - enum literal -> case name:     "asc" -> asc, 1 -> VALUE_1, -2.5 -> VALUE_MINUS_2_5
  - method + path -> operation id when operationId is missing:

Examples:
  GET    /api/v1/plan                 -> get_api_v1_plan
  GET    /items/{id}                  -> get_items_by_id
  DELETE /users/{userId}/keys/{keyId} -> delete_users_keys_by_user_id_key_id
"""

from __future__ import annotations

import keyword
import re

# Module-level names of the generated types module
_TYPES_MODULE_NAMES = frozenset({"dataclass", "enum", "field"})

# Module-level names of the generated bindings module
_BINDINGS_MODULE_NAMES = frozenset({"Any", "Optional", "Protocol", "Service"})


def _camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def _sanitize_segment(segment: str) -> str:
    """Sanitize a path segment for use in a Python identifier."""
    name = _camel_to_snake(segment)
    name = re.sub(r"[.\-\s]", "_", name)
    name = re.sub(r"[^a-z0-9_]", "", name)
    name = re.sub(r"_+", "_", name)
    return name.strip("_")


def _escape_identifier(name: str) -> str:
    if not name:
        return "_"
    if name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def python_name(name: str) -> str:
    """Snake-case attribute/argument name for a JSON key."""
    result = _escape_identifier(_sanitize_segment(name))
    if result in _TYPES_MODULE_NAMES:
        result = f"{result}_"
    return result


def pascal_case(name: str) -> str:
    """PascalCase a hint, keeping the casing inside each word."""
    words = re.split(r"[^A-Za-z0-9]+", name)
    result = "".join(w[:1].upper() + w[1:] for w in words if w)
    return _escape_identifier(result)


def type_name(name: str) -> str:
    """Class or alias name for a component schema key: Trip-Summary -> TripSummary."""
    result = pascal_case(name)
    if result in _BINDINGS_MODULE_NAMES:
        result = f"{result}_"
    return result


def enum_case_name(value: object) -> str:
    """Case identifier for an enum literal.

    String literals are used as-is when they are valid identifiers.
    """
    if isinstance(value, str):
        if value.isidentifier() and not keyword.iskeyword(value):
            return value
        name = re.sub(r"\W", "_", value)
        return _escape_identifier(name)
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    text = str(value).replace("-", "MINUS_").replace(".", "_").replace("+", "")
    return f"VALUE_{text}"


def build_operation_id(method: str, path: str) -> str:
    """Derive an operation id from HTTP method and path.

    Literal segments come first, placeholders are appended after ``by``.
    """
    segments = [s for s in path.split("/") if s]
    literals = [_sanitize_segment(s) for s in segments if not s.startswith("{")]
    params = [_sanitize_segment(s.strip("{}")) for s in segments if s.startswith("{")]

    parts = [method.lower()] + [p for p in literals if p]
    if not literals:
        parts.append("root")
    if params:
        parts.append("by")
        parts.extend(p for p in params if p)
    return _escape_identifier("_".join(parts))
