"""Entry point: python -m routegen SPEC -o OUTDIR

Reads an OpenAPI document (JSON or YAML), writes <types-module>.py and
routes.py into OUTDIR.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import yaml

from .codegen import generate, write_outputs
from .context_builder import DEFAULT_TYPES_MODULE
from .errors import GeneratorError
from .loader import load_document

logger = logging.getLogger("routegen")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@click.command()
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for the generated modules.")
@click.option("--types-module", default=DEFAULT_TYPES_MODULE, show_default=True, help="Module the generated routes import types from.")
@click.option("--only-referenced", is_flag=True, help="Declare only schemas reachable from operations.")
@click.option("--log-level", default="WARNING", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]), help="Logging level.")
def main(spec_path: Path, output: Path, types_module: str, only_referenced: bool, log_level: str) -> None:
    """Generate type declarations and route bindings from an OpenAPI document."""
    configure_logging(log_level)

    try:
        spec = load_document(spec_path)
        sources = generate(spec, types_module=types_module, only_referenced=only_referenced)
        written = write_outputs(sources, output, types_module)
    except (GeneratorError, OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Generation failed: %s", exc)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    for path in written:
        click.echo(f"Generated {path}")


if __name__ == "__main__":
    main()
