"""Load an OpenAPI document and pick apart its raw tree.

Reads JSON or YAML (YAML is a JSON superset, so one loader serves both)
and extracts paths, component schemas and local $ref targets.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import UnresolvedReferenceError

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"


def load_document(path: Path) -> dict[str, Any]:
    """Load the raw OpenAPI tree from disk."""
    with open(path, encoding="utf-8") as f:
        tree = yaml.safe_load(f)
    if not isinstance(tree, dict):
        raise ValueError(f"{path} does not contain an OpenAPI document")
    logger.debug("Loaded %s (%d paths)", path, len(get_paths(tree)))
    return tree


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths") or {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the spec."""
    return (spec.get("components") or {}).get("schemas") or {}


def ref_name(ref: str, location: str | None = None) -> str:
    """Return the component schema name a $ref pointer names."""
    if not ref.startswith(SCHEMA_REF_PREFIX) or len(ref) == len(SCHEMA_REF_PREFIX):
        raise UnresolvedReferenceError(ref, location)
    return ref[len(SCHEMA_REF_PREFIX):]


def resolve_ref(spec: dict[str, Any], ref: str, location: str | None = None) -> Any:
    """Resolve a local $ref pointer in the spec."""
    if not ref.startswith("#/"):
        raise UnresolvedReferenceError(ref, location)
    node: Any = spec
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            raise UnresolvedReferenceError(ref, location)
        node = node[part]
    return node
