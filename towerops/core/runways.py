from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from towerops.core.errors import AirportConfigurationError, ResourceConflictError


@dataclass
class Runway:
	id: int
	occupied: bool = False

	def book(self) -> None:
		if self.occupied:
			raise ResourceConflictError(f"Runway {self.id} is already booked for another flight")
		self.occupied = True

	def release(self) -> None:
		if not self.occupied:
			raise ResourceConflictError(f"Runway {self.id} is not booked")
		self.occupied = False

	def to_dict(self) -> Dict[str, object]:
		return {"id": self.id, "occupied": self.occupied}


class RunwayRegistry:
	"""Fixed, ordered pool of runways numbered 1..count."""

	def __init__(self, count: int) -> None:
		if isinstance(count, bool) or not isinstance(count, int) or count < 1:
			raise AirportConfigurationError(
				f"Cannot build an airport with {count!r} runways; at least one is required"
			)
		self._runways: List[Runway] = [Runway(i + 1) for i in range(count)]

	@classmethod
	def from_runways(cls, runways: List[Runway]) -> "RunwayRegistry":
		registry = cls(len(runways)) if runways else cls(0)
		for expected, rw in enumerate(runways, start=1):
			if rw.id != expected:
				raise AirportConfigurationError(f"Runway ids must run 1..N, got {rw.id} at position {expected}")
		registry._runways = list(runways)
		return registry

	def __len__(self) -> int:
		return len(self._runways)

	def __iter__(self) -> Iterator[Runway]:
		return iter(self._runways)

	def get(self, runway_id: int) -> Optional[Runway]:
		if 1 <= runway_id <= len(self._runways):
			return self._runways[runway_id - 1]
		return None

	def find_free(self) -> Optional[Runway]:
		for rw in self._runways:
			if not rw.occupied:
				return rw
		return None
