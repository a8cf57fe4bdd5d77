"""
Configuration of polar definitions.

A polar definition is one entry of the ``polars`` list in the plugin
options, in the shape written by the host's configuration editor::

    {
        "polars": [
            {
                "name": "My boat",
                "data": "twa/tws;6;8\\n52;5.33;6.29",
                "delimiter": ";",
                "trueWindSpeedUnit": "kn",
                "speedThroughWaterUnit": "kn"
            }
        ]
    }
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from polartable.core.models import SpeedUnit

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ";"
DEFAULT_UNIT = SpeedUnit.KNOTS.value

DELIMITER_ALIASES = {
    "semicolon": ";",
    "comma": ",",
    "tab": "\t",
}

UNIT_ALIASES = {
    "mps": SpeedUnit.METERS_PER_SECOND,
    "metersPerSecond": SpeedUnit.METERS_PER_SECOND,
    "kn": SpeedUnit.KNOTS,
    "knots": SpeedUnit.KNOTS,
}


@dataclass(eq=False)
class ConfigurationError(Exception):
    """Raised when a polar definition or parser option is invalid."""

    message: str

    def __str__(self):
        return self.message


def resolve_unit(identifier) -> SpeedUnit:
    """Look up a speed unit by its identifier (``mps``, ``kn``, ...)."""
    if isinstance(identifier, SpeedUnit):
        return identifier
    try:
        return UNIT_ALIASES[identifier]
    except (KeyError, TypeError):
        raise ConfigurationError(f"Unknown speed unit: {identifier!r}") from None


def resolve_delimiter(delimiter: str) -> str:
    """Map a delimiter name (``comma``, ``tab``, ...) to its character."""
    if not isinstance(delimiter, str):
        raise ConfigurationError(f"Delimiter must be a string, got {delimiter!r}")
    return DELIMITER_ALIASES.get(delimiter, delimiter)


@dataclass
class PolarDefinition:
    """One configured polar: its text table and the units it is written in."""

    name: str
    data: str = ""
    delimiter: str = DEFAULT_DELIMITER
    true_wind_speed_unit: str = DEFAULT_UNIT
    speed_through_water_unit: str = DEFAULT_UNIT
    description: Optional[str] = None

    def __post_init__(self):
        """Validate the definition and normalize delimiter names."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError("Polar name must be a non-empty string")
        if self.data is None:
            self.data = ""
        if not isinstance(self.data, str):
            raise ConfigurationError(f"Polar data for {self.name!r} must be text")
        self.delimiter = resolve_delimiter(self.delimiter)
        if not self.delimiter:
            raise ConfigurationError(f"Delimiter for {self.name!r} must not be empty")
        # Validate now so a bad unit fails here and not in the parser
        resolve_unit(self.true_wind_speed_unit)
        resolve_unit(self.speed_through_water_unit)

    @property
    def wind_speed_unit(self) -> SpeedUnit:
        return resolve_unit(self.true_wind_speed_unit)

    @property
    def boat_speed_unit(self) -> SpeedUnit:
        return resolve_unit(self.speed_through_water_unit)

    @classmethod
    def from_dict(cls, entry: Mapping[str, Any]) -> "PolarDefinition":
        """Build a definition from a configuration entry with camelCase keys."""
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Polar entry must be an object, got {entry!r}")
        if "name" not in entry:
            raise ConfigurationError("Polar entry is missing its name")

        return cls(
            name=entry["name"],
            data=entry.get("data") or "",
            delimiter=entry.get("delimiter") or DEFAULT_DELIMITER,
            true_wind_speed_unit=entry.get("trueWindSpeedUnit") or DEFAULT_UNIT,
            speed_through_water_unit=entry.get("speedThroughWaterUnit")
            or DEFAULT_UNIT,
            description=entry.get("description"),
        )


def load_polar_definitions(props: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Return the raw ``polars`` entries of the plugin options.

    Entries are validated one by one by the caller so that a bad entry
    does not hide the others.

    Raises:
        ConfigurationError: If ``polars`` is present but not a list
    """
    if not props:
        return []
    entries = props.get("polars") or []
    if not isinstance(entries, list):
        raise ConfigurationError("'polars' must be a list of polar definitions")
    return entries


def load_config_file(filepath: str) -> Dict[str, Any]:
    """Read plugin options from a JSON file."""
    try:
        with open(filepath, "r") as f:
            props = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {filepath}: {e}") from e

    if not isinstance(props, dict):
        raise ConfigurationError(f"{filepath} must contain a JSON object")
    logger.debug("Loaded %d polar entries from %s", len(props.get("polars") or []), filepath)
    return props
