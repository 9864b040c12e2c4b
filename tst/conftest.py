"""
Pytest fixtures for eis2fdr tests.

Provides synthetic Garmin EIS logs written to temporary directories.
"""

import pytest

METADATA_LINE = (
    '#airframe_name="Mooney M20J",unit="GDU 460",Product="G500 TXi",'
    'log_version="1.03",tail_number="N12345"'
)
UNITS_LINE = "#yyy-mm-dd,hh:mm:ss,hh:mm,ident,degrees,degrees,ft Baro,deg,deg,deg,rpm,bool,crc16"
NAMES_LINE = (
    "  Lcl Date, Lcl Time, UTCOfst, AtvWpt,     Latitude,    Longitude,"
    "    AltB,  Pitch,   Roll,   HDG, E1 RPM, OnGrnd, LogCheck"
)

DATA_ROWS = [
    "2023-11-04, 08:48:13,-04:00, KPOU,  41.6265869,  -73.8842316,   165.0,   1.2,  -0.5,  245.3, 2400.0,1,0x5A3C",
    "2023-11-04, 08:48:14,-04:00, KPOU,  41.6266000,  -73.8842000,   166.0,   1.3,  -0.4,  245.5, 2410.0,1,0x5A3D",
    ",,,,,,,,,,,,",
    "2023-11-04, 08:48:15,-04:00, KPOU,,,   167.0,   1.4,  -0.3,  245.9, 2420.0,1,0x5A3E",
]


def build_log(rows=None, metadata_line=METADATA_LINE) -> bytes:
    """Assemble Garmin EIS log bytes from header and data lines."""
    if rows is None:
        rows = DATA_ROWS
    lines = [metadata_line, UNITS_LINE, NAMES_LINE] + list(rows)
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def log_bytes() -> bytes:
    """Complete Garmin EIS log content."""
    return build_log()


@pytest.fixture
def log_file(tmp_path, log_bytes):
    """Garmin EIS log written to disk."""
    path = tmp_path / "log_231104_084813_KPOU.csv"
    path.write_bytes(log_bytes)
    return path


@pytest.fixture
def padded_log_file(tmp_path, log_bytes):
    """Garmin EIS log followed by NUL padding, as copied off an SD card."""
    path = tmp_path / "log_padded.csv"
    path.write_bytes(log_bytes + b"\x00" * 500)
    return path


@pytest.fixture
def foreign_file(tmp_path):
    """A file that is not an avionics log."""
    path = tmp_path / "notes.txt"
    path.write_text("just one line\n")
    return path


@pytest.fixture
def output_file(tmp_path):
    """Path for a FDR file that does not exist yet."""
    return tmp_path / "flight.fdr"
