"""
Polar handling plugin.

Parses every polar configured in the plugin options when the host starts
the plugin and keeps the resulting tables until the next start or stop.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from polartable.core.config import (
    ConfigurationError,
    PolarDefinition,
    load_polar_definitions,
)
from polartable.core.models import PolarTable
from polartable.parser.polar_table import PolarTableError, PolarTableParser

logger = logging.getLogger(__name__)


class PolarsPlugin:
    """Host plugin that turns configured polar text into polar tables."""

    id = "polars"
    name = "Polars"
    description = "Polar handling"

    def __init__(self, strict=False, parser: Optional[PolarTableParser] = None):
        """Initialize the plugin.

        Args:
            strict (bool): If True, re-raise the first entry that fails to
                           parse. If False, log it and parse the others.
            parser (PolarTableParser): Parser to use, default comment "#"
        """
        self.strict = strict
        self.parser = parser or PolarTableParser()
        self.definitions: List[PolarDefinition] = []
        self.parsed_polars: List[PolarTable] = []
        self.errors: Dict[str, Exception] = {}
        self._by_name: Dict[str, PolarTable] = {}

    def parse_definition(self, definition: PolarDefinition) -> PolarTable:
        """Parse a single polar definition."""
        return self.parser.parse(
            definition.data,
            definition.delimiter,
            definition.wind_speed_unit,
            definition.boat_speed_unit,
        )

    def start(self, props: Optional[Mapping[str, Any]]) -> List[PolarTable]:
        """Parse all configured polars, replacing any previous result.

        Args:
            props: Plugin options holding a ``polars`` list

        Returns:
            List[PolarTable]: One table per entry that parsed, in
            configuration order

        Raises:
            ConfigurationError, PolarTableError: Only in strict mode
        """
        self.stop()
        definitions = []
        parsed = []
        by_name = {}
        errors = {}

        for index, entry in enumerate(load_polar_definitions(props)):
            label = entry.get("name") if isinstance(entry, Mapping) else None
            label = label or f"#{index}"
            try:
                definition = PolarDefinition.from_dict(entry)
                table = self.parse_definition(definition)
            except (ConfigurationError, PolarTableError) as e:
                if self.strict:
                    raise
                logger.error("Skipping polar %s: %s", label, e)
                if label in errors:
                    label = f"#{index}"
                errors[label] = e
                continue

            definitions.append(definition)
            parsed.append(table)
            by_name[definition.name] = table
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Polar %s: %s",
                    definition.name,
                    json.dumps(table.to_dict(), indent=2),
                )

        self.definitions = definitions
        self.parsed_polars = parsed
        self.errors = errors
        self._by_name = by_name
        logger.info(
            "Parsed %d polars, %d failed", len(self.parsed_polars), len(self.errors)
        )
        return self.parsed_polars

    def stop(self):
        """Forget the parsed polars. Nothing else is held."""
        self.definitions = []
        self.parsed_polars = []
        self.errors = {}
        self._by_name = {}

    def get(self, name: str) -> Optional[PolarTable]:
        """Return the parsed table of the named polar, if it parsed."""
        return self._by_name.get(name)
