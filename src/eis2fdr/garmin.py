"""
Reader for Garmin EIS CSV logs (e.g. G500 TXi engine indication exports).

All header data can be found in the first 3 lines of the file:
  line 1 starts with a comment char and has key="value" metadata entries
  line 2 starts with a comment char and has the column units
  line 3 lists the column names
Every following line is a data row. Files copied off the display may be
padded with NUL bytes up to a fixed block size.
"""

import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from .cleaning import clean_dataframe, parse_timestamp
from .errors import DuplicateColumn, HeaderTruncated, SchemaMismatch
from .models import (
    AircraftField,
    Column,
    CommentField,
    FDRDocument,
    FlightDateField,
    FlightTimeField,
    LogHeader,
    SchemaField,
    TailNumberField,
    ValueType,
)

logger = logging.getLogger(__name__)

COMMENT_CHAR = "#"
HEADER_LINES = 3
# metadata and units lines; the names line is read as the table header
SKIP_ROWS = 2

DATE_COLUMN = "Lcl Date"
TIME_COLUMN = "Lcl Time"
OFFSET_COLUMN = "UTCOfst"
TIMESTAMP_COLUMN = "Timestamp"

# ==================== Unit to Type Mapping ====================

UNIT_TYPES: Dict[str, ValueType] = {
    "yyy-mm-dd": ValueType.DATE,
    "bool": ValueType.INTEGER,
    "#": ValueType.INTEGER,
    "enum": ValueType.TEXT,
    "crc16": ValueType.TEXT,
    "MHz": ValueType.FLOAT,
    "degrees": ValueType.FLOAT,
    "ft": ValueType.FLOAT,
    "nm": ValueType.FLOAT,
    "fsd": ValueType.FLOAT,  # full scale deflection
    "mt": ValueType.FLOAT,  # WAAS performance numbers
    "ft wgs": ValueType.FLOAT,
    "ft Baro": ValueType.FLOAT,
    "ft msl": ValueType.FLOAT,
    "kt": ValueType.FLOAT,
    "fpm": ValueType.FLOAT,
    "deg": ValueType.FLOAT,
    "ft/min": ValueType.FLOAT,
    "deg F/min": ValueType.FLOAT,
    "kts": ValueType.FLOAT,
    "lbs": ValueType.FLOAT,
    "gals": ValueType.FLOAT,
    "volts": ValueType.FLOAT,
    "amps": ValueType.FLOAT,
    "gph": ValueType.FLOAT,
    "psi": ValueType.FLOAT,
    "degF": ValueType.FLOAT,
    "deg F": ValueType.FLOAT,
    "deg C": ValueType.FLOAT,
    "%": ValueType.FLOAT,
    "rpm": ValueType.FLOAT,
    "inch": ValueType.FLOAT,
    "Hg": ValueType.FLOAT,
    "G": ValueType.FLOAT,
    "s": ValueType.FLOAT,
}

# ==================== Header Parsing ====================


def _strip_comment(line: str) -> str:
    return line[1:] if line.startswith(COMMENT_CHAR) else line


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def parse_metadata(line: str) -> Dict[str, str]:
    """
    Parse the metadata line into a dictionary.

    Entries without an "=" are skipped; a repeated key keeps its last value.

    Examples:
        '#log_version="1.03",tail_number="N12345"'
            -> {"log_version": "1.03", "tail_number": "N12345"}
    """
    metadata = {}
    for entry in _strip_comment(line).split(","):
        key, sep, value = entry.partition("=")
        if not sep:
            continue
        metadata[key.strip()] = _unquote(value)
    return metadata


def read_header(path: Path) -> LogHeader:
    """
    Read the three header lines of a Garmin EIS log.

    Args:
        path: Path to the log file

    Returns:
        Parsed LogHeader

    Raises:
        HeaderTruncated: The file has fewer than three lines
        OSError: The file could not be opened or read
    """
    lines = []
    with open(path, "rb") as f:
        for _ in range(HEADER_LINES):
            raw = f.readline()
            if not raw:
                raise HeaderTruncated(
                    f"{path}: expected {HEADER_LINES} header lines, found {len(lines)}"
                )
            lines.append(raw.decode("utf-8").rstrip("\r\n"))

    metadata_line, units_line, names_line = lines
    units = [unit.strip() for unit in _strip_comment(units_line).split(",")]
    names = names_line.split(",")

    columns = [Column(raw_name=name, unit=unit) for unit, name in zip(units, names)]
    return LogHeader(metadata=parse_metadata(metadata_line), columns=columns)


# ==================== Schema Resolution ====================


def resolve_value_type(unit: str) -> ValueType:
    """Map a column unit to its value type. Unknown units are read as text."""
    return UNIT_TYPES.get(unit.strip(), ValueType.TEXT)


def build_schema(header: LogHeader) -> List[SchemaField]:
    """
    Build the typed schema for a log, one field per header column.

    Raises:
        DuplicateColumn: Two columns have the same trimmed name
    """
    schema = []
    seen = set()
    for column in header.columns:
        if column.name in seen:
            raise DuplicateColumn(f"Column name {column.name!r} appears more than once")
        seen.add(column.name)
        schema.append(SchemaField(name=column.name, value_type=resolve_value_type(column.unit)))
    return schema


# ==================== Table Loading ====================


def read_bytes(path: Path) -> bytes:
    """Read a whole log file, dropping trailing NUL padding."""
    with open(path, "rb") as f:
        buffer = f.read()
    stripped = buffer.rstrip(b"\x00")
    if len(stripped) != len(buffer):
        logger.debug("Stripped %d trailing NUL bytes", len(buffer) - len(stripped))
    return stripped


def _cast_column(values: pd.Series, value_type: ValueType) -> pd.Series:
    if value_type == ValueType.TEXT:
        return values.astype("string")

    stripped = values.str.strip()
    if value_type == ValueType.DATE:
        return pd.to_datetime(stripped, format="%Y-%m-%d", errors="coerce")

    numbers = pd.to_numeric(stripped, errors="coerce").astype("float64")
    if value_type == ValueType.INTEGER:
        return numbers.where(numbers.mod(1) == 0).astype("Int64")
    return numbers


def load_table(buffer: bytes, schema: List[SchemaField]) -> pd.DataFrame:
    """
    Load the data rows of a log into a typed DataFrame.

    Cells that are empty or cannot be cast to their column type become
    null; only the overall row shape is enforced.

    Args:
        buffer: Complete file contents
        schema: Column types, in file order

    Returns:
        DataFrame with the raw header names as columns

    Raises:
        HeaderTruncated: No names line follows the metadata and units lines
        SchemaMismatch: A row has more fields than the header, or the
            header and schema disagree on the column count
    """
    try:
        raw = pd.read_csv(
            io.BytesIO(buffer),
            skiprows=SKIP_ROWS,
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            encoding="utf-8",
            encoding_errors="replace",
        )
    except pd.errors.EmptyDataError as e:
        raise HeaderTruncated("No column names line in log") from e
    except pd.errors.ParserError as e:
        raise SchemaMismatch(str(e)) from e

    if raw.shape[1] != len(schema):
        raise SchemaMismatch(
            f"Schema declares {len(schema)} columns but the data has {raw.shape[1]}"
        )

    names = ["" if pd.isna(name) else name for name in raw.iloc[0]]
    body = raw.iloc[1:].reset_index(drop=True)

    columns = [
        _cast_column(body.iloc[:, idx], field.value_type)
        for idx, field in enumerate(schema)
    ]
    df = pd.concat(columns, axis=1, ignore_index=True) if columns else pd.DataFrame(index=body.index)
    df.columns = names
    return df


# ==================== Log Aggregate ====================


class GarminLog(BaseModel):
    """A parsed Garmin EIS log: header plus cleaned, typed data."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    header: LogHeader = Field(description="Metadata and declared columns")
    data: pd.DataFrame = Field(description="Cleaned data with a UTC Timestamp column")

    @classmethod
    def from_csv(cls, path: Path) -> "GarminLog":
        """
        Load and clean a Garmin EIS log.

        Raises:
            HeaderTruncated, SchemaMismatch, DuplicateColumn, TimestampFormat,
            MissingRequiredColumn: The log content is malformed
            OSError: The file could not be read
        """
        path = Path(path)
        header = read_header(path)
        schema = build_schema(header)
        data = load_table(read_bytes(path), schema)
        data = clean_dataframe(data)
        data = parse_timestamp(data, DATE_COLUMN, TIME_COLUMN, OFFSET_COLUMN, TIMESTAMP_COLUMN)
        logger.info("Loaded %s: %d rows, %d columns", path.name, len(data), data.shape[1])
        return cls(header=header, data=data)

    def first_time(self) -> Optional[datetime]:
        """First non-null UTC timestamp in the log, if any."""
        if TIMESTAMP_COLUMN not in self.data.columns:
            return None
        timestamps = self.data[TIMESTAMP_COLUMN].dropna()
        if timestamps.empty:
            return None
        return timestamps.iloc[0].to_pydatetime()


# ==================== FDR Conversion ====================


class GarminToFDRBuilder:
    """Builds FDR documents from Garmin logs."""

    def __init__(self, aircraft: str, tail_number_default: str):
        self.aircraft = aircraft
        self.tail_number_default = tail_number_default
        self.tail_number_override: Optional[str] = None

    def with_tail_number_override(self, tail_number: str) -> "GarminToFDRBuilder":
        self.tail_number_override = tail_number
        return self

    def _tail_number(self, log: GarminLog) -> str:
        if self.tail_number_override is not None:
            return self.tail_number_override
        return log.header.metadata.get("tail_number", self.tail_number_default)

    def _comment(self, log: GarminLog, tail_number: str) -> str:
        metadata = log.header.metadata
        comment = tail_number
        if "airframe_name" in metadata:
            comment += f" - {metadata['airframe_name']}"
        source = " ".join(metadata[key] for key in ("unit", "Product") if key in metadata)
        if source:
            comment += f" ({source})"
        return comment + ". Converted using eis2fdr."

    def build(self, log: GarminLog) -> FDRDocument:
        tail_number = self._tail_number(log)
        fields = [
            CommentField(comment=self._comment(log, tail_number)),
            AircraftField(aircraft=self.aircraft),
            TailNumberField(tail_number=tail_number),
        ]

        # If there is a time point in the data, add the time fields to the FDR
        first_time = log.first_time()
        if first_time is not None:
            fields.append(FlightTimeField(time=first_time.strftime("%H:%M:%S")))
            fields.append(FlightDateField(date=first_time.strftime("%m/%d/%Y")))

        return FDRDocument(fields=fields, table=log.data)
