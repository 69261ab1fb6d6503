"""JourneyStore: loads journey definition YAML files into typed models.

This is the single source of truth for journey data at runtime.  The store
is loaded once at startup and provides lookup by journey id.

Usage::

    store = JourneyStore()          # defaults to the bundled definitions/
    store.load()                    # parse all *.yaml files

    definition = store.get("feedback")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from formflow_journeys.models.schema import JourneyDefinition

logger = logging.getLogger(__name__)

# Bundled journey definitions shipped inside the package.
DEFINITIONS_DIR = Path(__file__).resolve().parent / "definitions"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class JourneyStore:
    """Loads every ``*.yaml`` under a directory as a :class:`JourneyDefinition`.

    Attributes populated after :meth:`load`:

        journeys: dict[journey_id, JourneyDefinition]
    """

    def __init__(self, journey_dir: str | Path | None = None) -> None:
        self._base = Path(journey_dir) if journey_dir is not None else DEFINITIONS_DIR
        self.journeys: dict[str, JourneyDefinition] = {}

    def load(self) -> None:
        """Parse all YAML files under the journey directory.

        Call this once at startup.  Raises ``FileNotFoundError`` if the
        directory is missing and ``ValueError`` on duplicate journey ids or
        routes.
        """
        if not self._base.is_dir():
            raise FileNotFoundError(f"Missing journey directory: {self._base}")

        routes: set[str] = set()
        for path in sorted(self._base.glob("*.yaml")):
            definition = JourneyDefinition(**load_yaml(path))
            if definition.id in self.journeys:
                raise ValueError(f"Duplicate journey id '{definition.id}' in {path.name}")
            for route in filter(None, (definition.route, definition.manage_route)):
                if route in routes:
                    raise ValueError(f"Duplicate route '{route}' in {path.name}")
                routes.add(route)
            self.journeys[definition.id] = definition

        logger.info(
            "JourneyStore loaded: %d journeys (%s)",
            len(self.journeys),
            ", ".join(sorted(self.journeys)),
        )

    def get(self, journey_id: str) -> JourneyDefinition:
        """Look up a journey definition by id.

        Raises:
            KeyError: if the journey id is not loaded.
        """
        return self.journeys[journey_id]

    def list_journeys(self) -> list[JourneyDefinition]:
        """Every loaded journey, ordered by id."""
        return [self.journeys[journey_id] for journey_id in sorted(self.journeys)]
