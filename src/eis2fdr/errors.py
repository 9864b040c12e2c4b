"""
Exception types raised while converting avionics logs.

I/O failures are not wrapped: the builtin OSError family propagates as-is.
"""


class ConversionError(Exception):
    """Base class for structural conversion failures."""


class HeaderTruncated(ConversionError):
    """The log ends before its three header lines are complete."""


class SchemaMismatch(ConversionError):
    """Data rows disagree with the column count declared by the header."""


class DuplicateColumn(ConversionError):
    """Two header columns trim to the same name."""


class TimestampFormat(ConversionError):
    """Date, time and UTC offset fields do not form a valid timestamp."""


class MissingRequiredColumn(ConversionError):
    """A column needed for the conversion is not present in the table."""

    def __init__(self, column: str):
        super().__init__(f"Missing required column: {column}")
        self.column = column


class UnrecognizedSource(ConversionError):
    """The input file is not a recognized avionics log."""

    def __init__(self, path):
        super().__init__(f"Unable to recognize avionics log source: {path}")
        self.path = path
