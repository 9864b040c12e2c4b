"""
Command-line interface for eis2fdr.

Usage:
    python -m eis2fdr convert log_231104_084813_KPOU.csv flight.fdr
    python -m eis2fdr convert log_231104_084813_KPOU.csv | head
    python -m eis2fdr inspect log_231104_084813_KPOU.csv
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer

from .converter import convert_file, describe_log
from .errors import ConversionError, MissingRequiredColumn, UnrecognizedSource
from .models import DEFAULT_AIRCRAFT, DEFAULT_TAIL_NUMBER, ConversionConfig

app = typer.Typer(
    name="eis2fdr",
    help="Garmin EIS log to X-Plane FDR v4 converter",
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _fail(message: str) -> None:
    typer.echo(typer.style(message, fg=typer.colors.RED), err=True)
    raise typer.Exit(1)


def _silence_stdout() -> None:
    # stdout is gone; point it at devnull so the interpreter's final flush is quiet
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


@app.command()
def convert(
    input: Path = typer.Argument(
        ...,
        help="Path to avionics log file",
    ),
    output: Optional[Path] = typer.Argument(
        None,
        help="Path to output FDR file (default: stdout)",
    ),
    aircraft: str = typer.Option(
        DEFAULT_AIRCRAFT,
        "--aircraft", "-a",
        envvar="EIS2FDR_AIRCRAFT",
        help="X-Plane aircraft file, relative to the X-Plane folder",
    ),
    tail_number: Optional[str] = typer.Option(
        None,
        "--tail-number", "-t",
        envvar="EIS2FDR_TAIL_NUMBER",
        help=f"Override tail number (default: from log, else {DEFAULT_TAIL_NUMBER})",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Print verbose output",
    ),
):
    """
    Convert an avionics log into an X-Plane FDR v4 file.
    """
    _configure_logging(verbose)
    config = ConversionConfig(aircraft=aircraft, tail_number_override=tail_number)

    try:
        convert_file(input, output, config)
    except UnrecognizedSource as e:
        _fail(str(e))
    except FileNotFoundError as e:
        _fail(f"File not found: {e.filename}")
    except MissingRequiredColumn as e:
        _fail(f"Writing error: {e}")
    except ConversionError as e:
        _fail(f"Parsing error: {e}")
    except BrokenPipeError as e:
        # ignore broken pipes on stdout, as when piping output to head
        if output is not None:
            _fail(f"Writing error: {e}")
        _silence_stdout()
    except OSError as e:
        _fail(f"I/O error: {e}")


@app.command()
def inspect(
    input: Path = typer.Argument(
        ...,
        help="Path to avionics log file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Print verbose output",
    ),
):
    """
    Show the detected source, metadata and column schema of a log.
    """
    _configure_logging(verbose)

    try:
        summary = describe_log(input)
    except UnrecognizedSource as e:
        _fail(str(e))
    except FileNotFoundError as e:
        _fail(f"File not found: {e.filename}")
    except ConversionError as e:
        _fail(f"Parsing error: {e}")
    except OSError as e:
        _fail(f"I/O error: {e}")

    typer.echo(f"Source: {summary['source']}")
    typer.echo("Metadata:")
    for key, value in summary["metadata"].items():
        typer.echo(f"  {key}: {value}")
    typer.echo(f"Columns ({len(summary['columns'])}):")
    for column in summary["columns"]:
        typer.echo(f"  {column['name']} [{column['unit']}] {column['type']}")
    typer.echo(f"Rows: {summary['rows']}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
