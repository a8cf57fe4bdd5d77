"""
Core data models for the polartable package.
"""

import csv
import math
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd

MPS_PER_KNOT = 0.514444


class SpeedUnit(Enum):
    """Speed units a polar table can be written in."""

    METERS_PER_SECOND = "mps"
    KNOTS = "kn"

    def to_meters_per_second(self, value: float) -> float:
        """Convert a speed in this unit to meters/second."""
        if self is SpeedUnit.KNOTS:
            return value * MPS_PER_KNOT
        return value


def to_radians(degrees: float) -> float:
    """Convert degrees to radians. Out of range angles are kept as given."""
    return degrees * math.pi / 180


@dataclass(frozen=True)
class WindSpeedColumn:
    """One true wind speed column of a polar table."""

    true_wind_speed: float  # m/s
    true_wind_speed_label: float  # as written
    polar_speeds: Tuple[float, ...] = ()  # m/s, one per angle row
    polar_speed_labels: Tuple[float, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trueWindSpeed": self.true_wind_speed,
            "trueWindSpeedLabel": self.true_wind_speed_label,
            "polarSpeeds": list(self.polar_speeds),
            "polarSpeedLabels": list(self.polar_speed_labels),
        }


@dataclass(frozen=True)
class PolarTable:
    """
    A parsed polar diagram.

    Index ``i`` of ``true_wind_angles`` and index ``i`` of every column's
    ``polar_speeds`` refer to the same row of the source table. Columns
    are ordered as in the header row.
    """

    true_wind_angles: Tuple[float, ...] = ()  # radians
    true_wind_angle_labels: Tuple[float, ...] = ()  # degrees
    polars: Tuple[WindSpeedColumn, ...] = ()
    true_wind_speed_label_unit: Optional[str] = None
    speed_through_water_label_unit: Optional[str] = None

    @property
    def true_wind_speeds(self) -> Tuple[float, ...]:
        return tuple(column.true_wind_speed for column in self.polars)

    @property
    def true_wind_speed_labels(self) -> Tuple[float, ...]:
        return tuple(column.true_wind_speed_label for column in self.polars)

    def speed_matrix(self, labels: bool = False) -> np.ndarray:
        """
        Boat speeds as a 2D array.

        Args:
            labels (bool): Return the values as written instead of m/s

        Returns:
            np.ndarray: Shape (number of angles, number of wind speeds)
        """
        matrix = np.zeros((len(self.true_wind_angles), len(self.polars)))
        for index, column in enumerate(self.polars):
            values = column.polar_speed_labels if labels else column.polar_speeds
            matrix[:, index] = values
        return matrix

    def to_dataframe(self, labels: bool = False) -> pd.DataFrame:
        """Boat speeds indexed by angle, one column per wind speed."""
        if labels:
            index = list(self.true_wind_angle_labels)
            columns = list(self.true_wind_speed_labels)
        else:
            index = list(self.true_wind_angles)
            columns = list(self.true_wind_speeds)
        df = pd.DataFrame(self.speed_matrix(labels), index=index, columns=columns)
        df.index.name = "twa"
        df.columns.name = "tws"
        return df

    def to_dict(self) -> Dict[str, Any]:
        """JSON ready representation using the camelCase field names."""
        return {
            "trueWindAngles": list(self.true_wind_angles),
            "trueWindAngleLabels": list(self.true_wind_angle_labels),
            "polars": [column.to_dict() for column in self.polars],
            "trueWindSpeedLabelUnit": self.true_wind_speed_label_unit,
            "speedThroughWaterLabelUnit": self.speed_through_water_label_unit,
        }

    def export_csv(self, file_path: str, delimiter: str = ";"):
        """
        Write the label values back out as a polar text table.

        Args:
            file_path (str): Path to the output file
            delimiter (str): Field delimiter
        """
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        rows = [["twa/tws"] + [_format(tws) for tws in self.true_wind_speed_labels]]
        for row, angle in enumerate(self.true_wind_angle_labels):
            rows.append(
                [_format(angle)]
                + [_format(column.polar_speed_labels[row]) for column in self.polars]
            )

        with open(file_path, "w", newline="") as csvfile:
            if len(delimiter) == 1:
                writer = csv.writer(csvfile, delimiter=delimiter, lineterminator="\n")
                writer.writerows(rows)
            else:
                # csv only takes single character delimiters; fields are plain
                # numbers so they never need quoting
                for fields in rows:
                    csvfile.write(delimiter.join(fields) + "\n")


def _format(value: float) -> str:
    # 6.0 -> "6", 5.33 -> "5.33"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
