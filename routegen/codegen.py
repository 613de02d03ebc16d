"""Run the pipeline and write generated output.

Takes a raw OpenAPI tree and produces the types module and the route
bindings module. Both are rendered before anything is written, so a
failing run leaves no output behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .bindings import emit_bindings
from .context_builder import DEFAULT_TYPES_MODULE, GenerationRun
from .declarations import emit_types
from .resolver import resolve
from .schema_parser import build_document

logger = logging.getLogger(__name__)

ROUTES_FILENAME = "routes.py"


@dataclass(frozen=True)
class GeneratedSources:
    types: str
    bindings: str


def generate(
    spec: dict[str, Any],
    types_module: str = DEFAULT_TYPES_MODULE,
    only_referenced: bool = False,
) -> GeneratedSources:
    """Generate both artifacts from a parsed OpenAPI tree."""
    document = build_document(spec)
    graph = resolve(document)
    run = GenerationRun(graph, types_module=types_module, only_referenced=only_referenced)
    sources = GeneratedSources(
        types=emit_types(graph, run),
        bindings=emit_bindings(graph, run),
    )
    logger.info(
        "Generated %d types and %d routes for %s",
        len(run.declarations), len(graph.operations()), graph.title or "document",
    )
    return sources


def write_outputs(
    sources: GeneratedSources,
    output_dir: Path,
    types_module: str = DEFAULT_TYPES_MODULE,
) -> list[Path]:
    """Write both artifacts into ``output_dir``; returns the written paths.

    Both are written to temporary files first and moved into place only
    when both writes succeeded.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    types_path = output_dir / f"{types_module.rsplit('.', 1)[-1]}.py"
    routes_path = output_dir / ROUTES_FILENAME

    staged: list[tuple[Path, Path]] = []
    try:
        for path, text in ((types_path, sources.types), (routes_path, sources.bindings)):
            temp = path.with_name(f".{path.name}.tmp")
            with open(temp, "w", encoding="utf-8") as f:
                staged.append((temp, path))
                f.write(text)
    except OSError:
        for temp, _ in staged:
            temp.unlink(missing_ok=True)
        raise

    written = []
    for temp, path in staged:
        temp.replace(path)
        written.append(path)
        logger.debug("Wrote %s", path)
    return written
