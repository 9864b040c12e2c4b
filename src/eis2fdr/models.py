"""
Pydantic models for Garmin EIS logs and X-Plane FDR documents.

Defines both input models (log header and schema) and output models
(FDR field lines and the FDR v4 document).
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import MissingRequiredColumn

DEFAULT_AIRCRAFT = "Aircraft/Laminar Research/Cirrus SR22/Cirrus SR22.acf"
DEFAULT_TAIL_NUMBER = "N12345"

# zulu time, longitude, latitude, altitude (ft), magnetic heading, pitch, roll
REQUIRED_COLUMNS = ["Timestamp", "Longitude", "Latitude", "AltB", "HDG", "Pitch", "Roll"]


class ValueType(str, Enum):
    """Semantic type of a log column, resolved from its unit."""
    DATE = "date"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"


class LogSource(str, Enum):
    """Avionics products whose logs can be converted."""
    GARMIN = "garmin"


# ==================== Garmin Log Models (Input) ====================


class Column(BaseModel):
    """One column declared by the log header."""
    raw_name: str = Field(description="Column name exactly as written in the header")
    unit: str = Field(description="Unit string from the units line")

    @property
    def name(self) -> str:
        return self.raw_name.strip()


class LogHeader(BaseModel):
    """
    The three-line preamble of a Garmin EIS log.

    Line 1 holds key="value" metadata, line 2 the column units and
    line 3 the column names.
    """
    metadata: Dict[str, str] = Field(
        default_factory=dict,
        description="Metadata entries such as airframe_name and tail_number",
    )
    columns: List[Column] = Field(
        default_factory=list,
        description="Columns in file order, units paired with names",
    )


class SchemaField(BaseModel):
    """Clean column name and the type its cells are cast to."""
    name: str = Field(description="Trimmed column name")
    value_type: ValueType = Field(description="Type resolved from the column unit")


class ConversionConfig(BaseModel):
    """Settings applied when building an FDR document from a log."""
    aircraft: str = Field(
        default=DEFAULT_AIRCRAFT,
        description="Aircraft file, relative to the X-Plane folder",
    )
    default_tail_number: str = Field(
        default=DEFAULT_TAIL_NUMBER,
        description="Tail number used when the log does not carry one",
    )
    tail_number_override: Optional[str] = Field(
        default=None,
        description="Tail number that replaces the one found in the log",
    )


# ==================== FDR Field Models (Output) ====================


class CommentField(BaseModel):
    tag: Literal["COMM"] = "COMM"
    comment: str


class AircraftField(BaseModel):
    """Aircraft file path, e.g. Aircraft/Laminar Research/Boeing B747-400/747-400.acf."""
    tag: Literal["ACFT"] = "ACFT"
    aircraft: str


class TailNumberField(BaseModel):
    """Tail number. X-Plane expects it immediately after the ACFT line."""
    tag: Literal["TAIL"] = "TAIL"
    tail_number: str


class FlightTimeField(BaseModel):
    """Zulu time at the start of the flight (HH:MM:SS)."""
    tag: Literal["TIME"] = "TIME"
    time: str


class FlightDateField(BaseModel):
    """Date of the flight (MM/DD/YYYY)."""
    tag: Literal["DATE"] = "DATE"
    date: str


class SeaLevelPressureField(BaseModel):
    """Sea level pressure in inches of mercury."""
    tag: Literal["PRES"] = "PRES"
    pressure: float


class SeaLevelTemperatureField(BaseModel):
    """Sea level temperature in degrees Fahrenheit."""
    tag: Literal["TEMP"] = "TEMP"
    temperature: float


class WindField(BaseModel):
    tag: Literal["WIND"] = "WIND"
    direction: int = Field(description="Degrees")
    speed: int = Field(description="Knots")


class CalibrationField(BaseModel):
    """Takeoff or touchdown position used to calibrate against X-Plane scenery."""
    tag: Literal["CALI"] = "CALI"
    longitude: float
    latitude: float
    elevation: int = Field(description="Feet")


class WarningField(BaseModel):
    """Warning sound to play at a time, path relative to X-Plane."""
    tag: Literal["WARN"] = "WARN"
    time: int
    sound: str


class TextField(BaseModel):
    """Text read aloud by speech synthesis at a time."""
    tag: Literal["TEXT"] = "TEXT"
    time: int
    text: str


class MarkerField(BaseModel):
    """Marker shown in the time slider."""
    tag: Literal["MARK"] = "MARK"
    time: int
    text: str


class EventField(BaseModel):
    """Highlights the flight path at a time."""
    tag: Literal["EVNT"] = "EVNT"
    time: float


class DataRefField(BaseModel):
    """X-Plane dataref fed by an extra data column, with its unit conversion factor."""
    tag: Literal["DREF"] = "DREF"
    dref: str
    conversion_factor: float = 1.0


FDRField = Annotated[
    Union[
        CommentField,
        AircraftField,
        TailNumberField,
        FlightTimeField,
        FlightDateField,
        SeaLevelPressureField,
        SeaLevelTemperatureField,
        WindField,
        CalibrationField,
        WarningField,
        TextField,
        MarkerField,
        EventField,
        DataRefField,
    ],
    Field(discriminator="tag"),
]


class FDRDocument(BaseModel):
    """
    An X-Plane FDR version 4 document.

    Field lines are written in order, followed by the data block built
    from the required columns of the table.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    fields: List[FDRField] = Field(default_factory=list, description="Field lines in output order")
    table: pd.DataFrame = Field(description="Flight data, one row per sample")

    @model_validator(mode="after")
    def _check_required_columns(self) -> "FDRDocument":
        for column in REQUIRED_COLUMNS:
            if column not in self.table.columns:
                raise MissingRequiredColumn(column)
        return self
