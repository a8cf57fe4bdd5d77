"""
Tests for the polars plugin lifecycle.
"""

import logging
import os

import pytest

from polartable.core.config import ConfigurationError, load_config_file
from polartable.core.models import MPS_PER_KNOT, PolarTable
from polartable.parser.polar_table import (
    MalformedTableError,
    NumericParseError,
    PolarTableParser,
)
from polartable.plugin import PolarsPlugin

TEST_DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
CONFIG_FILE = os.path.join(TEST_DATA_DIR, "polars.json")


@pytest.fixture
def props():
    return load_config_file(CONFIG_FILE)


def test_plugin_identity():
    """Test the identifiers the host sees."""
    plugin = PolarsPlugin()
    assert plugin.id == "polars"
    assert plugin.name == "Polars"
    assert plugin.description == "Polar handling"


def test_start_parses_every_entry(props, caplog):
    """Test that a broken entry is skipped and the others parse."""
    plugin = PolarsPlugin()
    with caplog.at_level(logging.ERROR, logger="polartable.plugin"):
        tables = plugin.start(props)

    assert len(tables) == 2
    assert [d.name for d in plugin.definitions] == ["Cruiser 40", "Dinghy"]
    assert list(plugin.errors) == ["Broken"]
    assert isinstance(plugin.errors["Broken"], MalformedTableError)
    assert "Skipping polar Broken" in caplog.text

    cruiser = plugin.get("Cruiser 40")
    assert cruiser is tables[0]
    assert cruiser.true_wind_speed_label_unit == "kn"
    assert cruiser.polars[0].true_wind_speed == pytest.approx(6 * MPS_PER_KNOT)
    assert cruiser.true_wind_angle_labels == (52, 90, 150)

    dinghy = plugin.get("Dinghy")
    assert dinghy.speed_through_water_label_unit == "mps"
    assert dinghy.polars[1].polar_speeds == (2.5, 3.5)

    assert plugin.get("Broken") is None


def test_start_strict(props):
    """Test that strict mode surfaces the first failure."""
    plugin = PolarsPlugin(strict=True)
    with pytest.raises(MalformedTableError):
        plugin.start(props)


def test_bad_configuration_entry_skipped():
    """Test that a configuration error only fails its own entry."""
    plugin = PolarsPlugin()
    tables = plugin.start(
        {
            "polars": [
                {"data": "twa;6\n52;5"},
                {"name": "Ok", "data": "twa;6\n52;5", "trueWindSpeedUnit": "mps"},
                {"name": "Bad unit", "data": "twa;6", "speedThroughWaterUnit": "mph"},
            ]
        }
    )

    assert len(tables) == 1
    assert set(plugin.errors) == {"#0", "Bad unit"}
    assert isinstance(plugin.errors["Bad unit"], ConfigurationError)

    with pytest.raises(ConfigurationError):
        PolarsPlugin(strict=True).start({"polars": [{"name": "x", "delimiter": "#"}]})


def test_restart_replaces_result(props):
    """Test that a new start replaces the previous tables."""
    plugin = PolarsPlugin()
    plugin.start(props)
    plugin.start({"polars": [{"name": "Only", "data": "twa;6\n45;2"}]})

    assert len(plugin.parsed_polars) == 1
    assert plugin.get("Cruiser 40") is None
    assert plugin.errors == {}


def test_start_without_polars():
    """Test that missing options give no tables."""
    plugin = PolarsPlugin()
    assert plugin.start(None) == []
    assert plugin.start({}) == []


def test_empty_data_gives_empty_table():
    """Test that an entry without data parses to an empty table."""
    plugin = PolarsPlugin()
    (table,) = plugin.start({"polars": [{"name": "Empty"}]})

    assert table.polars == ()
    assert table.true_wind_angles == ()


def test_stop(props):
    """Test that stop forgets the parsed polars."""
    plugin = PolarsPlugin()
    plugin.start(props)
    plugin.stop()

    assert plugin.parsed_polars == []
    assert plugin.errors == {}
    assert plugin.get("Dinghy") is None


def test_custom_parser():
    """Test that the plugin uses the parser it is given."""
    plugin = PolarsPlugin(parser=PolarTableParser(comment="!"))
    (table,) = plugin.start(
        {"polars": [{"name": "Bang", "data": "twa;6 ! knots\n52;5 ! fast"}]}
    )

    assert table.polars[0].polar_speed_labels == (5,)


def test_strict_failure_forgets_previous_polars():
    """Test that a failed strict start does not keep the old configuration."""
    plugin = PolarsPlugin(strict=True)
    plugin.start({"polars": [{"name": "Old", "data": "twa;6\n52;5"}]})
    assert plugin.get("Old") is not None

    with pytest.raises(MalformedTableError):
        plugin.start({"polars": [{"name": "New", "data": "twa;6;8\n52;5"}]})

    assert plugin.get("Old") is None
    assert plugin.get("New") is None
    assert plugin.parsed_polars == []
    assert plugin.definitions == []


def test_failures_with_same_name_all_recorded():
    """Test that two failing entries sharing a name are both kept."""
    plugin = PolarsPlugin()
    plugin.start(
        {
            "polars": [
                {"name": "A", "data": "twa;6;8\n52;5"},
                {"name": "A", "data": "twa;x"},
            ]
        }
    )

    assert len(plugin.errors) == 2
    assert isinstance(plugin.errors["A"], MalformedTableError)
    assert isinstance(plugin.errors["#1"], NumericParseError)


def test_table_dump_only_when_debugging(props, monkeypatch):
    """Test that tables are serialized for the log only at debug level."""
    calls = []
    real_to_dict = PolarTable.to_dict

    def counting_to_dict(self):
        calls.append(self)
        return real_to_dict(self)

    monkeypatch.setattr(PolarTable, "to_dict", counting_to_dict)
    logger = logging.getLogger("polartable.plugin")

    level = logger.level
    try:
        logger.setLevel(logging.INFO)
        PolarsPlugin().start(props)
        assert calls == []

        logger.setLevel(logging.DEBUG)
        PolarsPlugin().start(props)
        assert len(calls) == 2
    finally:
        logger.setLevel(level)
