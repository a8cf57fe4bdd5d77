"""
Polar table parser module.

This module parses the delimited text form of a sailing polar:

    twa/tws;6;8;10
    52;5.33;6.29;6.9   # close hauled
    60;5.65;6.61;7.1

- The first record is the header. Its first field names the angle column
  and is ignored, the other fields are the true wind speed of each column.
- Every following record is one true wind angle in degrees followed by the
  boat speed for each wind speed column.
- Everything from the comment marker to the end of a line is dropped.
  Blank lines are skipped.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from polartable.core.config import ConfigurationError, resolve_unit
from polartable.core.models import PolarTable, SpeedUnit, WindSpeedColumn, to_radians

logger = logging.getLogger(__name__)

DEFAULT_COMMENT = "#"
QUOTE = '"'

NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(eq=False)
class PolarTableError(Exception):
    """Base class for polar table parsing errors."""

    message: str

    def __str__(self):
        return self.message


@dataclass(eq=False)
class MalformedTableError(PolarTableError):
    """Raised when the text is not a rectangular table of delimited fields."""

    line_number: Optional[int] = None
    expected: Optional[int] = None
    received: Optional[int] = None


@dataclass(eq=False)
class NumericParseError(PolarTableError):
    """Raised when a header or data cell is not a number."""

    line_number: Optional[int] = None
    column: Optional[int] = None
    value: Optional[str] = None


@dataclass
class Record:
    """One non-blank line of the table, split into fields."""

    line_number: int
    fields: List[str]


def parse_number(value: str, line_number: int, column: int) -> float:
    """Parse a decimal number field."""
    if not NUMBER_PATTERN.fullmatch(value):
        raise NumericParseError(
            message=f"Line {line_number}, column {column + 1}: "
            f"{value!r} is not a number",
            line_number=line_number,
            column=column,
            value=value,
        )
    return float(value)


class PolarTableParser:
    """Parser for delimited polar tables."""

    def __init__(self, comment: str = DEFAULT_COMMENT):
        """Initialize the parser.

        Args:
            comment (str): Marker starting a comment that runs to the end
                           of the line
        """
        if not isinstance(comment, str) or not comment:
            raise ConfigurationError("Comment marker must be a non-empty string")
        if "\n" in comment or "\r" in comment:
            raise ConfigurationError("Comment marker must not contain a line break")
        self.comment = comment

    def _check_delimiter(self, delimiter: str):
        if not isinstance(delimiter, str) or not delimiter:
            raise ConfigurationError("Delimiter must be a non-empty string")
        if "\n" in delimiter or "\r" in delimiter:
            raise ConfigurationError("Delimiter must not contain a line break")
        if QUOTE in delimiter:
            raise ConfigurationError("Delimiter must not contain a quote")
        if self.comment in delimiter or delimiter in self.comment:
            raise ConfigurationError(
                f"Delimiter {delimiter!r} clashes with comment marker {self.comment!r}"
            )

    def tokenize(self, text: str, delimiter: str) -> List[Record]:
        """Split text into records of raw string fields.

        Args:
            text (str): The polar table text
            delimiter (str): Field separator

        Returns:
            List[Record]: One record per line that is not blank once its
            comment is removed

        Raises:
            MalformedTableError: If a field has unbalanced quotes
        """
        self._check_delimiter(delimiter)
        records = []
        for line_number, line in enumerate(LINE_BREAK.split(text or ""), start=1):
            line = line.split(self.comment, 1)[0]
            if not line.strip():
                continue

            fields = []
            for field in line.split(delimiter):
                field = field.strip()
                if len(field) >= 2 and field[0] == QUOTE and field[-1] == QUOTE:
                    field = field[1:-1]
                if QUOTE in field:
                    raise MalformedTableError(
                        message=f"Line {line_number}: unbalanced quote in field {field!r}",
                        line_number=line_number,
                    )
                fields.append(field)
            records.append(Record(line_number=line_number, fields=fields))

        return records

    def parse(
        self,
        text: str,
        delimiter: str,
        wind_speed_unit: SpeedUnit,
        boat_speed_unit: SpeedUnit,
    ) -> PolarTable:
        """Parse a polar table.

        Args:
            text (str): The polar table text
            delimiter (str): Field separator, e.g. ";", "," or "\\t"
            wind_speed_unit (SpeedUnit): Unit of the header wind speeds
            boat_speed_unit (SpeedUnit): Unit of the boat speeds

        Returns:
            PolarTable: Speeds in m/s and angles in radians, with the
            values as written kept as labels

        Raises:
            MalformedTableError: If the text is not a rectangular table
            NumericParseError: If a speed or angle is not a number
            ConfigurationError: If the delimiter or a unit is invalid
        """
        wind_speed_unit = resolve_unit(wind_speed_unit)
        boat_speed_unit = resolve_unit(boat_speed_unit)

        records = self.tokenize(text, delimiter)
        if not records:
            return PolarTable(
                true_wind_speed_label_unit=wind_speed_unit.value,
                speed_through_water_label_unit=boat_speed_unit.value,
            )

        header, rows = records[0], records[1:]
        wind_speed_labels = [
            parse_number(value, header.line_number, column)
            for column, value in enumerate(header.fields[1:], start=1)
        ]

        angle_labels = []
        speed_labels = [[] for _ in wind_speed_labels]
        for row in rows:
            if len(row.fields) != len(header.fields):
                raise MalformedTableError(
                    message=f"Line {row.line_number}: expected "
                    f"{len(header.fields)} fields like the header, "
                    f"got {len(row.fields)}",
                    line_number=row.line_number,
                    expected=len(header.fields),
                    received=len(row.fields),
                )
            angle_labels.append(parse_number(row.fields[0], row.line_number, 0))
            for column, value in enumerate(row.fields[1:], start=1):
                speed_labels[column - 1].append(
                    parse_number(value, row.line_number, column)
                )

        polars = tuple(
            WindSpeedColumn(
                true_wind_speed=wind_speed_unit.to_meters_per_second(tws),
                true_wind_speed_label=tws,
                polar_speeds=tuple(
                    boat_speed_unit.to_meters_per_second(speed) for speed in labels
                ),
                polar_speed_labels=tuple(labels),
            )
            for tws, labels in zip(wind_speed_labels, speed_labels)
        )

        logger.debug(
            "Parsed polar table: %d angles x %d wind speeds",
            len(angle_labels),
            len(polars),
        )
        return PolarTable(
            true_wind_angles=tuple(to_radians(angle) for angle in angle_labels),
            true_wind_angle_labels=tuple(angle_labels),
            polars=polars,
            true_wind_speed_label_unit=wind_speed_unit.value,
            speed_through_water_label_unit=boat_speed_unit.value,
        )


def parse_polar_table(
    text: str,
    delimiter: str,
    wind_speed_unit: SpeedUnit,
    boat_speed_unit: SpeedUnit,
    comment: str = DEFAULT_COMMENT,
) -> PolarTable:
    """Parse a polar table with a one-off parser."""
    return PolarTableParser(comment).parse(
        text, delimiter, wind_speed_unit, boat_speed_unit
    )
