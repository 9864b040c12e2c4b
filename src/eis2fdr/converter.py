"""
Conversion of avionics logs into X-Plane FDR v4 files.

Ties source detection, log loading and FDR writing together.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .cleaning import clean_dataframe
from .detect import detect_source
from .errors import UnrecognizedSource
from .fdr import open_destination, write_fdr
from .garmin import build_schema, load_table, read_bytes, read_header
from .models import ConversionConfig, FDRDocument

logger = logging.getLogger(__name__)


def convert_file(
    input_path: Path,
    output_path: Optional[Path] = None,
    config: Optional[ConversionConfig] = None,
) -> FDRDocument:
    """
    Convert one avionics log into an FDR v4 file.

    Args:
        input_path: Path to the avionics log
        output_path: Path of the FDR file to create (default: stdout)
        config: Aircraft and tail number settings

    Returns:
        The FDR document that was written

    Raises:
        UnrecognizedSource: The log format was not recognized
        ConversionError: The log content is malformed
        OSError: Reading the log or writing the output failed
    """
    input_path = Path(input_path)
    if config is None:
        config = ConversionConfig()

    source = detect_source(input_path)
    if source is None:
        raise UnrecognizedSource(input_path)
    logger.info("Detected %s log: %s", source.source.value, input_path)

    # build before opening the destination so a bad log never creates the file
    document = source.to_fdr(config)

    with open_destination(output_path) as stream:
        write_fdr(document, stream)

    if output_path is not None:
        logger.info("Wrote %s", output_path)
    return document


def describe_log(path: Path) -> Dict[str, Any]:
    """
    Summarize a log without converting it.

    Args:
        path: Path to the avionics log

    Returns:
        Dictionary with the source, metadata, schema and the number of
        non-empty data rows

    Raises:
        UnrecognizedSource: The log format was not recognized
    """
    path = Path(path)
    source = detect_source(path)
    if source is None:
        raise UnrecognizedSource(path)

    header = read_header(path)
    schema = build_schema(header)
    table = clean_dataframe(load_table(read_bytes(path), schema))

    return {
        "source": source.source.value,
        "metadata": header.metadata,
        "columns": [
            {"name": field.name, "unit": column.unit, "type": field.value_type.value}
            for column, field in zip(header.columns, schema)
        ],
        "rows": len(table),
    }
