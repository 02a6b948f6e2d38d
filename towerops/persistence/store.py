from __future__ import annotations

import json
import os
from typing import Optional

from towerops.core.airport import Airport
from towerops.core.errors import PersistenceError
from towerops.events.bus import EventBus
from towerops.utils.logging import get_logger


logger = get_logger(__name__)


def save(airport: Airport, path: str) -> None:
	state = airport.to_dict()
	tmp_path = f"{path}.tmp"
	with open(tmp_path, "w", encoding="utf-8") as fh:
		json.dump(state, fh, indent=2)
	os.replace(tmp_path, path)
	logger.info("Saved %d flights and %d runways to %s", len(state["flights"]), len(state["runways"]), path)


def load(path: str, bus: Optional[EventBus] = None) -> Airport:
	with open(path, "r", encoding="utf-8") as fh:
		try:
			state = json.load(fh)
		except (json.JSONDecodeError, UnicodeDecodeError) as e:
			raise PersistenceError(f"{path} is not a saved airport: {e}") from e
	if not isinstance(state, dict):
		raise PersistenceError(f"{path} is not a saved airport")
	airport = Airport.from_dict(state, bus=bus)
	logger.info("Loaded %d flights and %d runways from %s", len(state["flights"]), airport.runway_count(), path)
	return airport
