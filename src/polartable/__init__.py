"""
polartable - parser for delimited sailing polar tables
"""

from polartable.core.config import ConfigurationError, PolarDefinition
from polartable.core.models import PolarTable, SpeedUnit, WindSpeedColumn
from polartable.parser.polar_table import (
    MalformedTableError,
    NumericParseError,
    PolarTableError,
    PolarTableParser,
    parse_polar_table,
)
from polartable.plugin import PolarsPlugin

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "MalformedTableError",
    "NumericParseError",
    "PolarDefinition",
    "PolarTable",
    "PolarTableError",
    "PolarTableParser",
    "PolarsPlugin",
    "SpeedUnit",
    "WindSpeedColumn",
    "parse_polar_table",
]
