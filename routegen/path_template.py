"""Compile OpenAPI path templates into router patterns.

  /users/{userId}/keys/{keyId}  ->  /users/:userId/keys/:keyId, ["userId", "keyId"]

Literal segments are kept byte for byte; placeholder order is the
left-to-right occurrence order, which is also the argument order of the
generated service call.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .errors import ParameterMismatchError, TemplateError
from .model import Parameter

logger = logging.getLogger(__name__)

# Router placeholder marker
PATH_MARKER = ":"

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")


@dataclass(frozen=True)
class CompiledPath:
    path: str
    param_names: tuple[str, ...]


def _placeholders(template: str) -> list[str]:
    names = _PLACEHOLDER.findall(template)
    leftover = _PLACEHOLDER.sub("", template)
    if "{" in leftover or "}" in leftover:
        raise TemplateError(template, "unbalanced braces")
    for name in names:
        if not name.strip():
            raise TemplateError(template, "empty placeholder")
    return names


def compile_path(template: str, parameters: Iterable[Parameter]) -> CompiledPath:
    """Rewrite ``{name}`` placeholders and check them against path parameters."""
    parameters = list(parameters)
    names = _placeholders(template)

    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ParameterMismatchError(name, "appears more than once in the template", template)
        seen.add(name)

        matches = [p for p in parameters if p.name == name and p.location == "path"]
        if not matches:
            others = sorted({p.location for p in parameters if p.name == name})
            if others:
                reason = f"is declared in {', '.join(others)}, not in path"
            else:
                reason = "has no declared parameter"
            raise ParameterMismatchError(name, reason, template)
        if len(matches) > 1:
            raise ParameterMismatchError(name, "is declared more than once", template)
        if not matches[0].required:
            raise ParameterMismatchError(name, "must be declared required", template)

    for param in parameters:
        if param.location == "path" and param.name not in seen:
            raise ParameterMismatchError(param.name, "is not referenced by the template", template)

    rewritten = _PLACEHOLDER.sub(lambda m: f"{PATH_MARKER}{m.group(1)}", template)
    logger.debug("Compiled %s -> %s %s", template, rewritten, names)
    return CompiledPath(path=rewritten, param_names=tuple(names))
