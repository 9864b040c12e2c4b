"""
Detects the source of an avionics log file.
"""

import errno
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .errors import ConversionError
from .garmin import GarminLog, GarminToFDRBuilder, read_header
from .models import ConversionConfig, FDRDocument, LogSource

logger = logging.getLogger(__name__)

# errors meaning the file cannot be inspected at all, rather than not understood
FATAL_ERRORS = (FileNotFoundError, PermissionError, IsADirectoryError)


def is_fatal_io_error(error: OSError) -> bool:
    return isinstance(error, FATAL_ERRORS) or error.errno == errno.ESPIPE


class DetectedSource(BaseModel):
    """An avionics log whose source product was recognized."""
    source: LogSource = Field(description="Product that wrote the log")
    path: Path = Field(description="Path to the log file")

    def to_fdr(self, config: Optional[ConversionConfig] = None) -> FDRDocument:
        """Load the log and build an FDR v4 document from it."""
        if config is None:
            config = ConversionConfig()

        if self.source == LogSource.GARMIN:
            log = GarminLog.from_csv(self.path)
            builder = GarminToFDRBuilder(config.aircraft, config.default_tail_number)
            if config.tail_number_override is not None:
                builder = builder.with_tail_number_override(config.tail_number_override)
            return builder.build(log)

        raise ValueError(f"Unsupported log source: {self.source}")


def detect_source(path: Path) -> Optional[DetectedSource]:
    """
    Detect the source of an avionics log file.

    Args:
        path: Path to the log file

    Returns:
        The detected source, or None if the format is not recognized

    Raises:
        OSError: The file is missing, unreadable, a directory or not seekable
    """
    path = Path(path)
    # Currently, only Garmin files are supported.
    try:
        read_header(path)
    except OSError as e:
        if is_fatal_io_error(e):
            raise
        logger.debug("Error %r is being disregarded as the format being unrecognized", e)
        return None
    except (ConversionError, ValueError) as e:
        logger.debug("Error %r is being disregarded as the format being unrecognized", e)
        return None

    return DetectedSource(source=LogSource.GARMIN, path=path)
