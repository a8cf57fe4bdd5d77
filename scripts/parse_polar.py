#!/usr/bin/env python3
"""
Parse the polars of a plugin options file and summarize them.
"""
import logging
import os
import sys

# Add the src directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import numpy as np

from polartable.core.config import ConfigurationError, load_config_file
from polartable.plugin import PolarsPlugin


def summarize_file(filepath):
    """Parse every polar in the file and print what was found."""
    print(f"\nParsing {filepath}...")
    plugin = PolarsPlugin()
    plugin.start(load_config_file(filepath))

    for definition, table in zip(plugin.definitions, plugin.parsed_polars):
        print(f"\n{definition.name}")
        if definition.description:
            print(f"  {definition.description}")
        print(f"  Wind speeds ({table.true_wind_speed_label_unit}): "
              f"{list(table.true_wind_speed_labels)}")
        print(f"  Wind angles (deg): {list(table.true_wind_angle_labels)}")
        print(f"  Boat speeds (m/s):")
        with np.printoptions(precision=2, suppress=True):
            print(table.speed_matrix())

    for name, error in plugin.errors.items():
        print(f"\n{name}: FAILED - {error}")

    return not plugin.errors


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if len(sys.argv) != 2:
        print("Usage: parse_polar.py <options.json>")
        sys.exit(1)

    filepath = sys.argv[1]
    if not os.path.exists(filepath):
        print(f"Error: File not found: {filepath}")
        sys.exit(1)

    try:
        ok = summarize_file(filepath)
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(1)
    sys.exit(0 if ok else 2)
