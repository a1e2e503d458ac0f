"""
pdfinterleave <odd-pages-file> <even-pages-file>

Interleave two one-sided scans into a double-sided PDF. The result is
written next to the odd pages file as <odd>-<even>-interleaved.pdf and is
never overwritten.

Env:
  PDFINTERLEAVE_BACKEND  pypdf (default) or poppler
  PDFSEPARATE_PATH       poppler pdfseparate(1) executable
  PDFUNITE_PATH          poppler pdfunite(1) executable
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer

from .backends import BACKENDS, DEFAULT_BACKEND, get_backend
from .errors import InterleaveError
from .interleaver import interleave

app = typer.Typer(add_completion=False)
log = structlog.get_logger("pdfinterleave.cli")

USAGE = "Usage: pdfinterleave <odd-pages-file> <even-pages-file>"

# ---------- logging setup ----------

def configure_logging(verbosity: int) -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

# ---------- CLI ----------

@app.command()
def run(
    odd_file: Optional[Path] = typer.Argument(None, help="PDF holding the odd pages, first page first"),
    even_file: Optional[Path] = typer.Argument(None, help="PDF holding the even pages, last page first"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output PDF (default: derived from both names)"),
    backend: str = typer.Option(
        DEFAULT_BACKEND, "--backend", envvar="PDFINTERLEAVE_BACKEND",
        help=f"Split/merge backend: {', '.join(BACKENDS)}",
    ),
    no_reverse: bool = typer.Option(False, "--no-reverse", help="Even pages are already in reading order"),
    strict: bool = typer.Option(False, "--strict", help="Fail instead of truncating on unequal page counts"),
    verbose: int = typer.Option(0, "-v", count=True, help="-v or -vv for more logs"),
):
    """Interleave odd and even page scans into one PDF."""
    configure_logging(verbose)

    if odd_file is None or even_file is None:
        typer.echo(USAGE, err=True)
        raise typer.Exit(1)

    try:
        be = get_backend(backend)
    except ValueError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    try:
        out = interleave(
            odd_file, even_file,
            output=output, backend=be, reverse_even=not no_reverse, strict=strict,
        )
    except InterleaveError as e:
        log.debug("interleave_failed", error_type=type(e).__name__, error=str(e))
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    log.info("written", output=str(out))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
