"""
Blob stream CLI tool.

Copies a blob to stdout or a local file, or uploads stdin or a local file
into a blob, through the configured streamer backend.

Usage:
    blobstream get reports/a.txt
    blobstream get reports/a.txt -o ./a.txt
    cat a.txt | blobstream put reports/a.txt --no-overwrite
"""

import shutil
import sys
from pathlib import Path

import click
import structlog

from src.config import configure_logging, get_settings
from src.storage import StreamerError, get_streamer

logger = structlog.get_logger(__name__)

COPY_BUFFER_SIZE = 1024 * 1024


@click.group()
def main():
    """Read and write blobs as streams."""
    configure_logging(get_settings())


@main.command()
@click.argument("name")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write to this file instead of stdout",
)
def get(name: str, output: Path | None):
    """Copy blob NAME to stdout or a file."""
    created = None
    try:
        streamer = get_streamer()
        with streamer.open_read_stream(name) as src:
            if output is None:
                shutil.copyfileobj(src, click.get_binary_stream("stdout"), COPY_BUFFER_SIZE)
            else:
                with open(output, "wb") as dest:
                    created = output
                    shutil.copyfileobj(src, dest, COPY_BUFFER_SIZE)
    except (StreamerError, ValueError) as e:
        logger.error("Failed to read blob", blob=name, error=str(e))
        if created is not None:
            created.unlink(missing_ok=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("name")
@click.option(
    "-i",
    "--input",
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read from this file instead of stdin",
)
@click.option(
    "--overwrite/--no-overwrite",
    default=True,
    help="Replace an existing blob (default: overwrite)",
)
def put(name: str, input_path: Path | None, overwrite: bool):
    """Upload stdin or a file into blob NAME."""
    try:
        streamer = get_streamer()
        with streamer.open_write_stream(name, overwrite=overwrite) as dest:
            if input_path is None:
                shutil.copyfileobj(click.get_binary_stream("stdin"), dest, COPY_BUFFER_SIZE)
            else:
                with open(input_path, "rb") as src:
                    shutil.copyfileobj(src, dest, COPY_BUFFER_SIZE)
    except (StreamerError, ValueError) as e:
        logger.error("Failed to write blob", blob=name, error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Wrote {name}", err=True)


if __name__ == "__main__":
    main()
