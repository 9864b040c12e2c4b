"""
eis2fdr - Garmin EIS Log to X-Plane FDR Converter

Converts Garmin engine indication system CSV logs into X-Plane
Flight Data Recorder (FDR v4) files for replaying flights in the simulator.
"""

from .models import (
    ValueType,
    LogSource,
    Column,
    LogHeader,
    SchemaField,
    ConversionConfig,
    FDRField,
    FDRDocument,
)
from .garmin import (
    read_header,
    build_schema,
    resolve_value_type,
    read_bytes,
    load_table,
    GarminLog,
    GarminToFDRBuilder,
)
from .detect import DetectedSource, detect_source
from .fdr import serialize_field, write_fdr, open_destination
from .converter import convert_file

__version__ = "0.1.0"
__all__ = [
    "ValueType",
    "LogSource",
    "Column",
    "LogHeader",
    "SchemaField",
    "ConversionConfig",
    "FDRField",
    "FDRDocument",
    "read_header",
    "build_schema",
    "resolve_value_type",
    "read_bytes",
    "load_table",
    "GarminLog",
    "GarminToFDRBuilder",
    "DetectedSource",
    "detect_source",
    "serialize_field",
    "write_fdr",
    "open_destination",
    "convert_file",
]
