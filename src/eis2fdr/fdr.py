"""
Writer for the X-Plane Flight Data Recorder (FDR) file format.

A .fdr file is a text file of csv-like lines with a few header lines:
  - The first describes the line endings: "A" (Apple) or "I" (IBM).
  - The second holds the file version, 3 or 4.
  - Subsequent lines hold fields: FIELD,val1,val2,...,valN

In version 4 files the DATA fields are omitted and the raw csv data is
appended to the end of the file. The first 7 csv columns must be zulu
time (hh:mm:ss), longitude, latitude, altitude (feet), magnetic heading,
pitch and roll (degrees). Any further column needs a matching DREF line.
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, TextIO

import pandas as pd

from .models import (
    REQUIRED_COLUMNS,
    AircraftField,
    CalibrationField,
    CommentField,
    DataRefField,
    EventField,
    FDRDocument,
    FDRField,
    FlightDateField,
    FlightTimeField,
    MarkerField,
    SeaLevelPressureField,
    SeaLevelTemperatureField,
    TailNumberField,
    TextField,
    WarningField,
    WindField,
)

logger = logging.getLogger(__name__)

LINE_ENDINGS = "A"
FILE_VERSION = "4"

# ==================== Field Serialization ====================

FIELD_VALUES: Dict[type, Callable[..., List[str]]] = {
    CommentField: lambda f: [f.comment],
    AircraftField: lambda f: [f.aircraft],
    TailNumberField: lambda f: [f.tail_number],
    FlightTimeField: lambda f: [f.time],
    FlightDateField: lambda f: [f.date],
    SeaLevelPressureField: lambda f: [str(f.pressure)],
    SeaLevelTemperatureField: lambda f: [str(f.temperature)],
    WindField: lambda f: [str(f.direction), str(f.speed)],
    CalibrationField: lambda f: [str(f.longitude), str(f.latitude), str(f.elevation)],
    WarningField: lambda f: [str(f.time), f.sound],
    TextField: lambda f: [str(f.time), f.text],
    MarkerField: lambda f: [str(f.time), f.text],
    EventField: lambda f: [str(f.time)],
    DataRefField: lambda f: [f.dref, str(f.conversion_factor)],
}


def field_values(field: FDRField) -> List[str]:
    """Ordered string values of a field line, without its tag."""
    try:
        serializer = FIELD_VALUES[type(field)]
    except KeyError:
        raise TypeError(f"Not an FDR field: {type(field).__name__}") from None
    return serializer(field)


def serialize_field(field: FDRField) -> str:
    """
    Render a field as one FDR line.

    Values are not quoted, so commas inside free text split the value.

    Examples:
        WindField(direction=230, speed=16) -> "WIND,230,16"
    """
    return ",".join([field.tag] + field_values(field))


# ==================== Document Writing ====================


def select_data(table: pd.DataFrame) -> pd.DataFrame:
    """
    Shape a table into the FDR v4 data block.

    Keeps the required columns in order, drops rows missing any of them
    and renders the timestamp as HH:MM:SS.
    """
    data = table[REQUIRED_COLUMNS].dropna().copy()
    data["Timestamp"] = data["Timestamp"].dt.strftime("%H:%M:%S")
    return data


def write_fdr(document: FDRDocument, stream: TextIO) -> None:
    """
    Write an FDR v4 document to a text stream.

    Args:
        document: Fields and flight data to write
        stream: Open text destination

    Raises:
        OSError: Writing to the stream failed
    """
    data = select_data(document.table)
    dropped = len(document.table) - len(data)
    if dropped:
        logger.debug("Dropped %d rows missing required columns", dropped)

    stream.write(f"{LINE_ENDINGS}\n")
    stream.write(f"{FILE_VERSION}\n")
    for field in document.fields:
        stream.write(serialize_field(field) + "\n")

    data.to_csv(stream, header=False, index=False, lineterminator="\n")
    logger.info("Wrote %d fields and %d data rows", len(document.fields), len(data))


@contextmanager
def open_destination(path: Optional[Path] = None) -> Iterator[TextIO]:
    """
    Open the output destination: a file, or stdout when no path is given.

    Files are closed on exit; stdout is flushed and left open.
    """
    if path is None:
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()
        return

    with open(path, "w", encoding="utf-8", newline="\n") as stream:
        yield stream
