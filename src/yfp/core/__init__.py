"""yfp.core — Foundation enums, config, and exceptions."""

from yfp.core.config import HttpConfig, OutputConfig, YfpConfig, load_config
from yfp.core.exceptions import (
    ConfigError,
    DateParseError,
    ExportError,
    ExtractionError,
    FetchError,
    FormatError,
    MissingTableError,
    RateLimitError,
    YfpError,
)
from yfp.core.models import FileFormat, Frequency

__all__ = [
    # Enums
    "FileFormat",
    "Frequency",
    # Config
    "HttpConfig",
    "OutputConfig",
    "YfpConfig",
    "load_config",
    # Exceptions
    "YfpError",
    "ConfigError",
    "DateParseError",
    "FormatError",
    "ExtractionError",
    "MissingTableError",
    "FetchError",
    "RateLimitError",
    "ExportError",
]
