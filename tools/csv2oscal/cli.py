#!/usr/bin/env python3
"""
csv2oscal CLI - control listing to OSCAL component definition converter

Converts .csv/.xlsx control listings into OSCAL component definitions (YAML or
JSON), stores them by document id and serves them over HTTP.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from .converter import convert_file
from .exceptions import Csv2OscalError
from .serialization import FORMATS
from .storage import FileSystemArtifactStore

console = Console(stderr=True)
logger = logging.getLogger("csv2oscal")

DEFAULT_OUTPUT_DIR = Path('dist/oscal')


def _configure_logging(level: int) -> None:
    root = logging.getLogger()
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        root.addHandler(RichHandler(console=console, show_time=False, show_path=False))
    root.setLevel(level)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """csv2oscal - convert control listings to OSCAL component definitions"""
    ctx.ensure_object(dict)

    if quiet:
        _configure_logging(logging.WARNING)
    elif verbose:
        _configure_logging(logging.DEBUG)
    else:
        _configure_logging(logging.INFO)

    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--output', '-o', type=click.Path(file_okay=False, path_type=Path),
              default=DEFAULT_OUTPUT_DIR, help='Output directory for OSCAL artifacts')
@click.option('--format', 'fmt', type=click.Choice(list(FORMATS)), default='yaml',
              help='Output encoding')
@click.option('--stdout', 'to_stdout', is_flag=True,
              help='Print the component definition instead of storing it')
@click.pass_context
def convert(ctx, input_path: Path, output: Path, fmt: str, to_stdout: bool):
    """Convert a control listing to an OSCAL component definition

    The first row is a header. Each following row must carry control acronym,
    component name and control description in its first three columns.
    """
    try:
        conversion = convert_file(input_path, fmt)
    except Csv2OscalError as e:
        logger.error(f"Failed to convert {input_path}: {e}")
        if ctx.obj['verbose']:
            logger.exception(e)
        sys.exit(1)

    if to_stdout:
        click.echo(conversion.content, nl=False)
        return

    store = FileSystemArtifactStore(output)
    artifact_path = store.save(conversion.document_id, conversion.content, conversion.fmt)

    logger.info(f"Generated {len(conversion.document.components)} components: {artifact_path}")
    click.echo(conversion.document_id)


@cli.command()
@click.argument('document_id', required=False)
@click.option('--output', '-o', type=click.Path(file_okay=False, path_type=Path),
              default=DEFAULT_OUTPUT_DIR, help='Directory holding OSCAL artifacts')
@click.pass_context
def show(ctx, document_id: Optional[str], output: Path):
    """Print a stored component definition (the most recent one by default)"""
    store = FileSystemArtifactStore(output)

    if document_id is None:
        document_id = store.latest()
        if document_id is None:
            logger.error(f"No component definition found in {output}")
            sys.exit(1)

    try:
        content, _ = store.load(document_id)
    except Csv2OscalError as e:
        logger.error(str(e))
        sys.exit(1)

    click.echo(content, nl=False)


@cli.command()
@click.option('--host', default='127.0.0.1', help='Interface to bind')
@click.option('--port', default=8080, type=int, help='Port to listen on')
@click.option('--output', '-o', type=click.Path(file_okay=False, path_type=Path),
              help='Directory for stored artifacts (default: CSV2OSCAL_OUTPUT_DIR)')
def serve(host: str, port: int, output: Optional[Path]):
    """Run the upload/download HTTP service"""
    import uvicorn

    from .service import create_app, get_settings

    settings = get_settings()
    if output is not None:
        settings = settings.model_copy(update={"output_dir": output})

    logger.info(f"Serving on http://{host}:{port}, artifacts in {settings.output_dir}")
    uvicorn.run(create_app(settings), host=host, port=port)


@cli.command()
def doctor():
    """Diagnostic tool for csv2oscal installation"""
    required = ['pandas', 'openpyxl', 'yaml', 'pydantic', 'pydantic_settings',
                'click', 'rich', 'fastapi', 'uvicorn']
    missing = []

    for pkg in required:
        try:
            __import__(pkg)
        except ImportError:
            missing.append(pkg)

    if missing:
        logger.error(f"Missing Python dependencies: {', '.join(missing)}")
        logger.info("Run: pip install -e .")
        sys.exit(1)

    logger.info("All Python dependencies satisfied")


if __name__ == '__main__':
    cli()
